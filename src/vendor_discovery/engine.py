"""
DiscoveryEngine — оркестратор выдачи вендоров.

query string -> Codec -> Composer -> Fetcher -> Renderer (+ Locator, Sync)
"""
from collections import OrderedDict
from typing import Hashable, Optional, Tuple

from vendor_discovery.config.settings import settings
from vendor_discovery.models.filter_state import DiscoveryState, FilterState, Recommended, ViewMode
from vendor_discovery.models.listing import ListingOutcome
from vendor_discovery.models.saved_vendor import ToggleOutcome
from vendor_discovery.models.view_models import ErrorStateView, PageView
from vendor_discovery.query.codec import QueryInput, decode
from vendor_discovery.services.catalog_service import CatalogQuery, HttpCatalogClient, LocalCatalog
from vendor_discovery.services.database_service import DatabaseService
from vendor_discovery.services.filter_composer import FilterComposer
from vendor_discovery.services.listing_fetcher import ListingFetcher
from vendor_discovery.services.navigation import Navigator
from vendor_discovery.services.saved_vendor_service import (
    HttpSavedVendorStore,
    LocalSavedVendorStore,
    SavedVendorSet,
    SavedVendorStore,
    SaveToggleController,
)
from vendor_discovery.services.share_service import ShareService
from vendor_discovery.services.sync_service import SyncService
from vendor_discovery.services.view_service import ViewRenderer
from vendor_discovery.gis import locator
from vendor_discovery.utils.logger import get_logger


def category_base(category: str) -> FilterState:
    """Зафиксированные фильтры страницы категории: категория + только рекомендованные."""
    return FilterState(main_category=category, sort=Recommended())


class DiscoveryEngine:
    """
    Собирает все компоненты выдачи вместе.

    Каталог выбирается по настройкам: BACKEND_URL задан -> HttpCatalogClient,
    иначе LocalCatalog поверх локальной SQLite.
    """

    def __init__(
        self,
        db_path: str = None,
        backend_url: Optional[str] = None,
        catalog: Optional[CatalogQuery] = None,
        max_toggle_controllers: int = 1024,
    ):
        """
        Args:
            db_path: Путь к БД. Если не указан, берётся из settings.
            backend_url: Адрес удалённого бэкенда. Если не указан, берётся из settings.
            catalog: Явный коллаборатор каталога (перекрывает выбор по настройкам)
            max_toggle_controllers: Сколько контроллеров избранного держать в памяти
        """
        self.logger = get_logger("DiscoveryEngine")

        self.db = DatabaseService(db_path)
        self.backend_url = backend_url if backend_url is not None else settings.backend_url

        if catalog is not None:
            self.catalog = catalog
        elif self.backend_url:
            self.catalog = HttpCatalogClient(self.backend_url)
        else:
            self.catalog = LocalCatalog(self.db.vendors)

        self.fetcher = ListingFetcher(self.catalog)
        self.share = ShareService()
        self.renderer = ViewRenderer(self.share)
        self.sync = SyncService()

        # Контроллеры избранного по зрителю (pending-состояние живёт между запросами)
        self.max_toggle_controllers = max_toggle_controllers
        self._toggles: "OrderedDict[Hashable, SaveToggleController]" = OrderedDict()

        self.logger.info(
            f"DiscoveryEngine initialized ({'remote' if self.backend_url else 'local'} catalog)"
        )

    def init_database(self) -> bool:
        """Инициализирует базу данных."""
        return self.db.init_database()

    def get_statistics(self) -> dict:
        return self.db.get_statistics()

    # ------------------------------------------------------------------
    # Выдача
    # ------------------------------------------------------------------

    def composer(self, path: str = "/vendors", base: Optional[FilterState] = None,
                 navigator: Optional[Navigator] = None) -> FilterComposer:
        return FilterComposer(navigator=navigator, path=path, base=base,
                              max_page_size=settings.max_page_size)

    def resolve_state(self, query: QueryInput, base: Optional[FilterState] = None) -> DiscoveryState:
        """Разбирает query и накладывает зафиксированные фильтры страницы."""
        state = decode(query, max_page_size=settings.max_page_size)
        if base is None:
            return state
        return state.with_filters(self.composer(base=base).apply_base(state.filters))

    def fetch(self, state: DiscoveryState) -> ListingOutcome:
        return self.fetcher.fetch_result(state.filters)

    def render_page(
        self,
        query: QueryInput,
        user_id: Optional[int] = None,
        base: Optional[FilterState] = None,
        path: str = "/vendors",
        auth_token: Optional[str] = None,
    ) -> Tuple[DiscoveryState, ListingOutcome, PageView]:
        """
        Полный цикл: query -> состояние -> выборка -> view-модель.

        Returns:
            (состояние, результат выборки, ListingPageView | ErrorStateView)
        """
        state = self.resolve_state(query, base)
        outcome = self.fetch(state)

        if not outcome.ok:
            return state, outcome, self.renderer.render(state, outcome, path=path)

        saved = self.saved_set(user_id, auth_token)

        token = None
        if state.view == ViewMode.MAP:
            marker_ids = [v.id for v in locator.located(outcome.result.items)]
            token = self.sync.open_session(marker_ids).token

        page = self.renderer.render(state, outcome, saved, path=path, session_token=token)
        return state, outcome, page

    def render_error(self, query: QueryInput, path: str = "/vendors") -> ErrorStateView:
        return self.renderer.render_error(self.resolve_state(query), path)


    # ------------------------------------------------------------------
    # Избранное
    # ------------------------------------------------------------------

    def viewer_key(self, user_id: Optional[int], auth_token: Optional[str] = None) -> Optional[Hashable]:
        """
        Кто смотрит выдачу: токен для удалённого бэкенда, user_id для локальной БД.
        None означает анонимного зрителя.
        """
        if self.backend_url:
            return auth_token or None
        return user_id

    def saved_store(self, user_id: Optional[int], auth_token: Optional[str] = None) -> SavedVendorStore:
        if self.backend_url:
            return HttpSavedVendorStore(self.backend_url, auth_token=auth_token)
        return LocalSavedVendorStore(self.db.saved_vendors, user_id)

    def saved_set(self, user_id: Optional[int], auth_token: Optional[str] = None) -> SavedVendorSet:
        """Сохранённые вендоры зрителя, загружаются на каждый показ выдачи."""
        if self.viewer_key(user_id, auth_token) is None:
            return SavedVendorSet()
        return SavedVendorSet.load(self.saved_store(user_id, auth_token))

    def toggle_saved(
        self,
        user_id: Optional[int],
        vendor_id: str,
        auth_token: Optional[str] = None,
    ) -> ToggleOutcome:
        """Переключает "сохранён" для вендора от имени зрителя."""
        key = self.viewer_key(user_id, auth_token)
        if key is None:
            controller = SaveToggleController(
                self.saved_store(None), SavedVendorSet(), authenticated=False
            )
            return controller.toggle(vendor_id)

        return self._toggle_controller(key, user_id, auth_token).toggle(vendor_id)

    def _toggle_controller(
        self, key: Hashable, user_id: Optional[int], auth_token: Optional[str]
    ) -> SaveToggleController:
        controller = self._toggles.get(key)
        if controller is not None:
            self._toggles.move_to_end(key)
            return controller

        store = self.saved_store(user_id, auth_token)
        controller = SaveToggleController(store, SavedVendorSet.load(store))
        self._toggles[key] = controller

        # Вытесняем самые давние контроллеры без незавершённых запросов
        excess = len(self._toggles) - self.max_toggle_controllers
        if excess > 0:
            idle = [k for k, c in self._toggles.items() if not c.has_pending and k != key]
            for stale in idle[:excess]:
                del self._toggles[stale]
        return controller
