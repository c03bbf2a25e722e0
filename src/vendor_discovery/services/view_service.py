"""
Сервис для подготовки view-моделей выдачи.
"""
from typing import List, Optional

from vendor_discovery.config.settings import settings
from vendor_discovery.gis import locator
from vendor_discovery.models.filter_state import LOCATIONS, DiscoveryState, ViewMode
from vendor_discovery.models.listing import ListingOutcome, ListingResult
from vendor_discovery.models.vendor import Coordinates, VendorSummary
from vendor_discovery.models.view_models import (
    ErrorStateView,
    ListingPageView,
    MapView,
    MarkerView,
    PageLink,
    PageView,
    PaginationView,
    VendorCardView,
)
from vendor_discovery.query.codec import build_location, encode
from vendor_discovery.query.normalize import format_number
from vendor_discovery.services.saved_vendor_service import SavedVendorSet
from vendor_discovery.services.share_service import ShareService
from vendor_discovery.utils.logger import get_logger

# Цвета аватарок (red, blue, green, yellow, purple, pink, indigo, teal)
AVATAR_COLORS = (
    "#ef4444",
    "#3b82f6",
    "#22c55e",
    "#eab308",
    "#a855f7",
    "#ec4899",
    "#6366f1",
    "#14b8a6",
)

EMPTY_TITLE = "No Matching Vendors"
EMPTY_MESSAGE = "Try adjusting your filters to discover more great vendors."

ERROR_TITLE = "Something went wrong"
ERROR_MESSAGE = "We couldn’t load vendor listings. Try again later."

NO_LOCATION_MESSAGE = (
    "No Vendors with Location Data: "
    "None of the vendors in this list have location coordinates available."
)

# Сколько номеров страниц показывать одновременно
PAGINATION_WINDOW = 5

DESCRIPTION_LIMIT = 120


def initials(name: str) -> str:
    """'Golden Lens Studio' -> 'GL'."""
    words = [w for w in (name or "").split() if w]
    if not words:
        return "?"
    return "".join(w[0] for w in words[:2]).upper()


def avatar_color(name: str) -> str:
    """Стабильный цвет аватарки: сумма кодов символов по модулю 8."""
    return AVATAR_COLORS[sum(ord(ch) for ch in (name or "")) % len(AVATAR_COLORS)]


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def page_window(current: int, total: int, size: int = PAGINATION_WINDOW) -> List[Optional[int]]:
    """
    Номера страниц для пагинации; None — многоточие.
    Первая и последняя страницы видны всегда.

    >>> page_window(6, 20)
    [1, None, 4, 5, 6, 7, 8, None, 20]
    """
    if total <= 1:
        return [1] if total == 1 else []

    current = min(max(current, 1), total)
    start = max(1, current - size // 2)
    end = min(total, start + size - 1)
    start = max(1, end - size + 1)

    pages: List[Optional[int]] = []
    if start > 1:
        pages.append(1)
        if start > 2:
            pages.append(None)
    pages.extend(range(start, end + 1))
    if end < total:
        if end < total - 1:
            pages.append(None)
        pages.append(total)
    return pages


class ViewRenderer:
    """
    Превращает ListingOutcome в view-модели страницы.
    Не поднимает исключений: ошибка выборки -> ErrorStateView.
    """

    def __init__(self, share_service: ShareService = None, default_center: Coordinates = None, zoom: int = None):
        self.share = share_service or ShareService()
        self.default_center = default_center or Coordinates(*settings.default_center)
        self.zoom = zoom or settings.map_zoom
        self.logger = get_logger("ViewRenderer")

    def render(
        self,
        state: DiscoveryState,
        outcome: ListingOutcome,
        saved: Optional[SavedVendorSet] = None,
        path: str = "/vendors",
        session_token: Optional[str] = None,
    ) -> PageView:
        """
        Args:
            state: Текущее состояние фильтров и режима
            outcome: Результат выборки (или ошибка)
            saved: Сохранённые вендоры зрителя
            path: Путь страницы для ссылок пагинации и переключателя вида
            session_token: Токен канала синхронизации (режим карты)

        Returns:
            ListingPageView или ErrorStateView
        """
        if not outcome.ok:
            self.logger.warning(f"Rendering error state: {outcome.error}")
            return self.render_error(state, path)

        result = outcome.result
        saved = saved or SavedVendorSet()
        compact = state.view == ViewMode.MAP

        page = ListingPageView(
            view=state.view.value,
            query=encode(state),
            cards=[self.card(v, v.id in saved, compact=compact) for v in result.items],
            pagination=self.pagination(state, result, path),
            list_url=build_location(path, state.with_view(ViewMode.LIST)),
            map_url=build_location(path, state.with_view(ViewMode.MAP)),
            session_token=session_token,
        )

        if result.is_empty:
            page.empty_title = EMPTY_TITLE
            page.empty_message = EMPTY_MESSAGE
        elif compact:
            page.map = self.map_view(result.items, saved)

        return page

    def render_error(self, state: DiscoveryState, path: str = "/vendors") -> ErrorStateView:
        return ErrorStateView(
            title=ERROR_TITLE,
            message=ERROR_MESSAGE,
            retry_url=build_location(path, state),
        )

    def card(self, vendor: VendorSummary, is_saved: bool = False, compact: bool = False) -> VendorCardView:
        """Карточка вендора."""
        city_label = None
        if vendor.city:
            city_label = f"{LOCATIONS.get(vendor.city, vendor.city)}, UAE"

        return VendorCardView(
            vendor_id=vendor.id,
            slug=vendor.slug,
            name=vendor.business_name,
            initials=initials(vendor.business_name),
            avatar_color=avatar_color(vendor.business_name),
            logo=vendor.logo,
            images=list(vendor.gallery),
            categories=vendor.display_categories,
            description=truncate(vendor.description or vendor.tagline),
            rating=vendor.rating,
            rating_label=f"{vendor.rating:.1f}/5",
            price_label=f"AED {format_number(vendor.starting_price)}",
            is_recommended=vendor.is_recommended,
            is_saved=is_saved,
            city_label=city_label,
            detail_url=f"/vendors/{vendor.slug}",
            compare_url=f"/compare?vendors={vendor.slug}",
            share=self.share.target(vendor.business_name, vendor.slug),
            compact=compact,
        )

    def map_view(self, vendors, saved: Optional[SavedVendorSet] = None) -> MapView:
        """Карта: маркеры находящихся на карте вендоров или заглушка."""
        saved = saved or SavedVendorSet()
        middle = locator.center(vendors, default=self.default_center)

        markers = [
            MarkerView(
                vendor_id=m.vendor.id,
                lat=m.position.lat,
                lng=m.position.lng,
                fill_color=m.fill,
                border_color=m.border,
                is_recommended=m.vendor.is_recommended,
                label=initials(m.vendor.business_name),
                logo=m.vendor.logo,
                popup=self.card(m.vendor, m.vendor.id in saved, compact=True),
            )
            for m in locator.markers(vendors)
        ]

        return MapView(
            center_lat=middle.lat,
            center_lng=middle.lng,
            zoom=self.zoom,
            markers=markers,
            placeholder=None if markers else NO_LOCATION_MESSAGE,
        )

    def pagination(self, state: DiscoveryState, result: ListingResult, path: str) -> Optional[PaginationView]:
        """Пагинация; при одной странице не показывается."""
        if result.total_pages <= 1:
            return None

        def _url(page: int) -> str:
            return build_location(path, state.with_filters(state.filters.with_changes(page=page)))

        current = result.current_page
        links = []
        for number in page_window(current, result.total_pages):
            if number is None:
                links.append(PageLink(label="...", is_ellipsis=True))
            else:
                links.append(PageLink(
                    label=str(number),
                    page=number,
                    url=_url(number),
                    is_active=number == current,
                ))

        return PaginationView(
            current_page=current,
            total_pages=result.total_pages,
            links=links,
            previous_url=_url(current - 1) if current > 1 else None,
            next_url=_url(current + 1) if current < result.total_pages else None,
        )
