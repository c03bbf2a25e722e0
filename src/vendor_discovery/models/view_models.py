"""
View-модели для отображения выдачи вендоров.
"""
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Union


@dataclass
class ShareTarget:
    """Данные для кнопки "Поделиться"."""
    title: str
    text: str
    url: str


@dataclass
class VendorCardView:
    """
    Карточка вендора (сетка или компактный вариант рядом с картой).
    Read-only view model.
    """
    vendor_id: str
    slug: str
    name: str
    initials: str
    avatar_color: str
    logo: Optional[str]
    images: List[str]
    categories: List[str]
    description: str
    rating: float
    rating_label: str           # "4.5/5"
    price_label: str            # "AED 500"
    is_recommended: bool
    is_saved: bool
    city_label: Optional[str]
    detail_url: str
    compare_url: str
    share: ShareTarget
    compact: bool = False


@dataclass
class MarkerView:
    """Маркер на карте."""
    vendor_id: str
    lat: float
    lng: float
    fill_color: str
    border_color: str
    is_recommended: bool
    label: str                  # Инициалы, если нет логотипа
    logo: Optional[str]
    popup: VendorCardView


@dataclass
class MapView:
    """Карта: центр, маркеры или заглушка."""
    center_lat: float
    center_lng: float
    zoom: int
    markers: List[MarkerView] = field(default_factory=list)
    placeholder: Optional[str] = None

    @property
    def has_markers(self) -> bool:
        return bool(self.markers)


@dataclass
class PageLink:
    """Элемент пагинации: номер страницы или многоточие."""
    label: str
    page: Optional[int] = None
    url: Optional[str] = None
    is_active: bool = False
    is_ellipsis: bool = False


@dataclass
class PaginationView:
    current_page: int
    total_pages: int
    links: List[PageLink] = field(default_factory=list)
    previous_url: Optional[str] = None
    next_url: Optional[str] = None


@dataclass
class ListingPageView:
    """Вся выдача целиком: карточки, карта, пагинация, пустое состояние."""
    view: str
    query: str
    cards: List[VendorCardView] = field(default_factory=list)
    map: Optional[MapView] = None
    pagination: Optional[PaginationView] = None
    empty_title: Optional[str] = None
    empty_message: Optional[str] = None
    list_url: str = ""
    map_url: str = ""
    session_token: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.empty_title is not None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ErrorStateView:
    """Состояние ошибки загрузки с возможностью повтора."""
    title: str
    message: str
    retry_url: str

    def to_dict(self) -> dict:
        return asdict(self)


PageView = Union[ListingPageView, ErrorStateView]
