"""
Сборка канонического ListingRequest из сырых значений контролов.
"""
from dataclasses import fields
from typing import Any, Mapping, Optional

from vendor_discovery.config.settings import settings
from vendor_discovery.models.filter_state import (
    DEFAULT_PAGE,
    DiscoveryState,
    FilterState,
    Recommended,
    ViewMode,
    sort_from_key,
)
from vendor_discovery.query.normalize import (
    normalize_bool,
    normalize_int,
    normalize_non_negative,
    normalize_rating,
    normalize_text,
)
from vendor_discovery.services.navigation import Location, Navigator
from vendor_discovery.utils.logger import get_logger

# Группы "таблеток" с одиночным выбором: повторный клик снимает выбор
TOGGLE_FACETS = ("sub_category", "rating_floor", "occasion", "location")

# Фасеты, которые можно выставить через select()
SELECTABLE_FACETS = TOGGLE_FACETS + ("main_category", "search_text", "sort")


class FilterComposer:
    """
    Валидирует и нормализует ввод пользователя в FilterState.

    Ошибки ввода никогда не поднимаются: некорректные значения
    молча исправляются или отбрасываются.
    Каждая успешная сборка кладёт новый адрес в Navigator без прокрутки.
    """

    def __init__(
        self,
        navigator: Optional[Navigator] = None,
        path: str = "/vendors",
        base: Optional[FilterState] = None,
        max_page_size: int = None,
    ):
        """
        Args:
            navigator: История навигации (создаётся, если не передана)
            path: Путь страницы, к которому прикрепляется query
            base: Зафиксированные фильтры (например, main_category на странице категории)
            max_page_size: Верхняя граница размера страницы
        """
        self.navigator = navigator or Navigator()
        self.path = path
        self.base = base
        self.max_page_size = max_page_size or settings.max_page_size
        self.logger = get_logger("FilterComposer")

    # ------------------------------------------------------------------
    # Чистые операции
    # ------------------------------------------------------------------

    def compose(
        self,
        controls: Mapping[str, Any],
        current: Optional[DiscoveryState] = None,
        base: Optional[FilterState] = None,
    ) -> DiscoveryState:
        """
        Собирает состояние из значений контролов.

        Ключи controls совпадают с query-параметрами (search, location,
        mainCategory, subCategory, minPrice, maxPrice, rating, sort, occasion,
        isRecommended, page, limit, view). Отсутствующий ключ = контрол пуст.
        base — зафиксированные фильтры; по умолчанию self.base.

        - max < min -> значения меняются местами
        - рейтинг вне 1..5 отбрасывается
        - sort="recommended" -> Recommended()
        - смена фильтров сбрасывает страницу на 1, если page не передан явно
        """
        sort = sort_from_key(normalize_text(controls.get("sort")))
        if sort is None and normalize_bool(controls.get("isRecommended")):
            sort = Recommended()

        page = normalize_int(controls.get("page"))
        page_size = normalize_int(controls.get("limit"))
        if page_size is None and current is not None:
            page_size = current.filters.page_size

        filters = FilterState(
            search_text=normalize_text(controls.get("search")),
            location=normalize_text(controls.get("location")),
            main_category=normalize_text(controls.get("mainCategory")),
            sub_category=normalize_text(controls.get("subCategory")),
            min_price=normalize_non_negative(controls.get("minPrice")),
            max_price=normalize_non_negative(controls.get("maxPrice")),
            rating_floor=normalize_rating(controls.get("rating")),
            occasion=normalize_text(controls.get("occasion")),
            sort=sort,
            page=page if page is not None and page >= DEFAULT_PAGE else DEFAULT_PAGE,
            page_size=page_size if page_size is not None and page_size > 0 else 0,
        )
        filters = self.apply_base(filters, base).normalized(max_page_size=self.max_page_size)

        view_raw = normalize_text(controls.get("view"))
        if view_raw is None:
            view = current.view if current is not None else ViewMode.LIST
        else:
            view = ViewMode.MAP if view_raw.lower() == ViewMode.MAP.value else ViewMode.LIST

        return DiscoveryState(filters=filters, view=view)

    def apply_base(self, filters: FilterState, base: Optional[FilterState] = None) -> FilterState:
        """Накладывает зафиксированные фильтры страницы."""
        base = base or self.base
        if base is None:
            return filters
        changes = {}
        for f in fields(FilterState):
            if f.name in ("page", "page_size", "sort"):
                continue
            value = getattr(base, f.name)
            if value is not None:
                changes[f.name] = value
        # Сортировка базы: только значение по умолчанию
        if filters.sort is None and base.sort is not None:
            changes["sort"] = base.sort
        return filters.with_changes(**changes) if changes else filters

    def select_state(self, state: DiscoveryState, facet: str, value: Any) -> DiscoveryState:
        """
        Выбор значения фасета.
        Для TOGGLE_FACETS повторный выбор активного значения снимает его.
        """
        if facet not in SELECTABLE_FACETS:
            raise ValueError(f"Unknown facet: {facet}")

        if facet == "rating_floor":
            new_value = normalize_rating(value)
        elif facet == "sort":
            new_value = sort_from_key(normalize_text(value))
        else:
            new_value = normalize_text(value)
            if facet == "location" and new_value is not None:
                new_value = new_value.lower()

        if facet in TOGGLE_FACETS and new_value is not None and getattr(state.filters, facet) == new_value:
            new_value = None

        filters = state.filters.with_changes(**{facet: new_value, "page": DEFAULT_PAGE})
        filters = self.apply_base(filters)
        return state.with_filters(filters)

    # ------------------------------------------------------------------
    # Операции с навигацией
    # ------------------------------------------------------------------

    def apply(self, controls: Mapping[str, Any], current: Optional[DiscoveryState] = None) -> Location:
        """Собирает состояние и кладёт его в историю без прокрутки."""
        state = self.compose(controls, current)
        return self._push(state)

    def select(self, state: DiscoveryState, facet: str, value: Any) -> Location:
        """select_state() + push."""
        return self._push(self.select_state(state, facet, value))

    def set_view(self, state: DiscoveryState, view: ViewMode) -> Location:
        """Переключает список/карту, сохраняя фильтры и страницу."""
        return self._push(state.with_view(ViewMode(view)))

    def go_to_page(self, state: DiscoveryState, page: int, total_pages: int) -> Optional[Location]:
        """
        Переход на страницу. Страница вне 1..total_pages игнорируется (None).
        Пагинация, в отличие от фильтров, прокручивает страницу наверх.
        """
        if page < 1 or page > total_pages:
            return None
        filters = state.filters.with_changes(page=page)
        return self._push(state.with_filters(filters), scroll=True)

    def clear(self, state: Optional[DiscoveryState] = None, base: Optional[FilterState] = None) -> Location:
        """Сбрасывает все фильтры (зафиксированные остаются), режим отображения сохраняется."""
        view = state.view if state is not None else ViewMode.LIST
        filters = self.apply_base(FilterState(), base).normalized(max_page_size=self.max_page_size)
        return self._push(DiscoveryState(filters=filters, view=view))

    def _push(self, state: DiscoveryState, scroll: bool = False) -> Location:
        location = self.navigator.push(self.path, state, scroll=scroll)
        self.logger.debug(f"Composed {location.url}")
        return location
