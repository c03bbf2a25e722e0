"""
Избранные вендоры: хранилища и оптимистичное переключение "сердечка".

- LocalSavedVendorStore: SavedVendorRepository (локальная SQLite)
- HttpSavedVendorStore: бэкенд, GET /user/saved-vendors, PATCH /user/saved-vendors/toggle
- SavedVendorSet: набор сохранённых id для текущего просмотра
- SaveToggleController: optimistic update + точный откат при ошибке
"""
import sqlite3
from typing import Iterable, List, Optional, Protocol, Set

import requests
from requests.exceptions import JSONDecodeError

from vendor_discovery.config.settings import settings
from vendor_discovery.models.saved_vendor import Notification, ToggleOutcome, ToggleResponse
from vendor_discovery.repositories import SavedVendorRepository
from vendor_discovery.utils.logger import get_logger

LOGIN_URL = "/auth/login"

LOGIN_REQUIRED_MESSAGE = "Please log in to save items to your wishlist."
TOGGLE_FAILED_MESSAGE = "Failed to update saved status."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class SavedVendorStore(Protocol):
    """Контракт хранилища избранного."""

    def get_saved(self) -> List[str]: ...

    def toggle_saved(self, vendor_id: str) -> ToggleResponse: ...


def login_required() -> ToggleResponse:
    """Ответ для неавторизованного пользователя."""
    return ToggleResponse(
        success=False,
        message=LOGIN_REQUIRED_MESSAGE,
        requires_auth=True,
        redirect_to=LOGIN_URL,
    )


class LocalSavedVendorStore:
    """
    Избранное в локальной БД.
    user_id=None означает анонимного пользователя.
    """

    def __init__(self, repository: SavedVendorRepository, user_id: Optional[int] = None):
        self.repository = repository
        self.user_id = user_id
        self.logger = get_logger("LocalSavedVendorStore")

    def get_saved(self) -> List[str]:
        if self.user_id is None:
            return []
        try:
            return self.repository.get_for_user(self.user_id)
        except sqlite3.Error as e:
            self.logger.error(f"[saved] Failed to load saved vendors: {e}")
            return []

    def toggle_saved(self, vendor_id: str) -> ToggleResponse:
        if self.user_id is None:
            return login_required()

        if self.repository.is_saved(self.user_id, vendor_id):
            if not self.repository.remove(self.user_id, vendor_id):
                return ToggleResponse(success=False, saved=True, error=TOGGLE_FAILED_MESSAGE)
            self.logger.info(f"User {self.user_id} removed vendor {vendor_id}")
            return ToggleResponse(success=True, saved=False, message="Vendor removed from saved list")

        if not self.repository.add(self.user_id, vendor_id):
            return ToggleResponse(success=False, saved=False, error=TOGGLE_FAILED_MESSAGE)
        self.logger.info(f"User {self.user_id} saved vendor {vendor_id}")
        return ToggleResponse(success=True, saved=True, message="Vendor saved successfully")


class HttpSavedVendorStore:
    """
    Избранное на удалённом бэкенде.
    Сетевые ошибки не поднимаются: get_saved() -> [], toggle -> success=False.
    """

    LIST_ENDPOINT = "/user/saved-vendors"
    TOGGLE_ENDPOINT = "/user/saved-vendors/toggle"

    def __init__(
        self,
        base_url: str = None,
        auth_token: Optional[str] = None,
        timeout: float = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.backend_url or "").rstrip("/")
        self.timeout = timeout if timeout is not None else settings.catalog_timeout_s
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if auth_token:
            self.session.headers.update({"Authorization": f"Bearer {auth_token}"})
        self.logger = get_logger("HttpSavedVendorStore")

    def get_saved(self) -> List[str]:
        url = f"{self.base_url}{self.LIST_ENDPOINT}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.exceptions.RequestException, JSONDecodeError) as e:
            self.logger.error(f"[saved] Failed to load saved vendors: {e}")
            return []

        data = payload.get("data") or {}
        saved = data.get("savedVendors") or []
        ids = []
        for item in saved:
            vendor_id = (item.get("_id") or item.get("id")) if isinstance(item, dict) else item
            if vendor_id:
                ids.append(str(vendor_id))
        return ids

    def toggle_saved(self, vendor_id: str) -> ToggleResponse:
        url = f"{self.base_url}{self.TOGGLE_ENDPOINT}"
        try:
            resp = self.session.patch(url, json={"vendorId": vendor_id}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"[saved] Toggle request failed: {e}")
            return ToggleResponse(success=False, error=str(e))

        try:
            payload = resp.json()
        except JSONDecodeError:
            payload = {}

        if resp.status_code == 401 or payload.get("requiresAuth"):
            response = login_required()
            response.redirect_to = payload.get("redirectTo") or LOGIN_URL
            return response

        if not resp.ok:
            message = payload.get("message") or f"HTTP {resp.status_code}"
            self.logger.error(f"[saved] Toggle failed: {message}")
            return ToggleResponse(success=False, error=message)

        return ToggleResponse(
            success=True,
            saved=bool(payload.get("saved")),
            message=payload.get("message") or "",
        )


class SavedVendorSet:
    """
    Сохранённые вендоры зрителя.
    Загружается один раз при показе выдачи и меняется оптимистично.
    """

    def __init__(self, vendor_ids: Iterable[str] = ()):
        self._ids: Set[str] = set(vendor_ids)

    @classmethod
    def load(cls, store: SavedVendorStore) -> "SavedVendorSet":
        return cls(store.get_saved())

    def __contains__(self, vendor_id: str) -> bool:
        return vendor_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def mark(self, vendor_id: str, saved: bool):
        if saved:
            self._ids.add(vendor_id)
        else:
            self._ids.discard(vendor_id)

    def snapshot(self) -> List[str]:
        return sorted(self._ids)


class SaveToggleController:
    """
    Переключение "сохранён / не сохранён" для карточки.

    1. Повторный клик, пока запрос по этому вендору не завершён, игнорируется.
    2. Состояние сразу инвертируется (optimistic update).
    3. При ошибке восстанавливается ровно прежнее значение и показывается ошибка.
    4. При успехе берётся значение, которое вернуло хранилище.
    """

    def __init__(
        self,
        store: SavedVendorStore,
        saved: SavedVendorSet,
        authenticated: bool = True,
    ):
        self.store = store
        self.saved = saved
        self.authenticated = authenticated
        self._pending: Set[str] = set()
        self.logger = get_logger("SaveToggleController")

    def is_pending(self, vendor_id: str) -> bool:
        return vendor_id in self._pending

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def toggle(self, vendor_id: str) -> ToggleOutcome:
        previous = vendor_id in self.saved

        if not self.authenticated:
            return ToggleOutcome(
                vendor_id=vendor_id,
                saved=previous,
                notification=Notification("info", LOGIN_REQUIRED_MESSAGE),
                redirect_to=LOGIN_URL,
            )

        if vendor_id in self._pending:
            self.logger.debug(f"Toggle for {vendor_id} already pending, ignored")
            return ToggleOutcome(vendor_id=vendor_id, saved=previous, ignored=True)

        self._pending.add(vendor_id)
        self.saved.mark(vendor_id, not previous)
        self.logger.info("Removing vendor..." if previous else "Saving vendor...")

        try:
            response = self.store.toggle_saved(vendor_id)
        except Exception as e:
            self.logger.exception(f"Toggle for {vendor_id} crashed: {e}")
            self.saved.mark(vendor_id, previous)
            return ToggleOutcome(
                vendor_id=vendor_id,
                saved=previous,
                notification=Notification("error", UNEXPECTED_ERROR_MESSAGE),
            )
        finally:
            self._pending.discard(vendor_id)

        if response.requires_auth:
            self.saved.mark(vendor_id, previous)
            return ToggleOutcome(
                vendor_id=vendor_id,
                saved=previous,
                notification=Notification("info", response.message or LOGIN_REQUIRED_MESSAGE),
                redirect_to=response.redirect_to or LOGIN_URL,
            )

        if not response.success:
            self.saved.mark(vendor_id, previous)
            self.logger.warning(f"Toggle for {vendor_id} failed: {response.error or response.message}")
            return ToggleOutcome(
                vendor_id=vendor_id,
                saved=previous,
                notification=Notification("error", TOGGLE_FAILED_MESSAGE),
            )

        self.saved.mark(vendor_id, response.saved)
        message = response.message or ("Vendor saved" if response.saved else "Vendor removed")
        return ToggleOutcome(
            vendor_id=vendor_id,
            saved=response.saved,
            notification=Notification("success", message),
        )
