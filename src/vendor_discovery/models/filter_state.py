"""
Модель состояния фильтров каталога вендоров.

FilterState — неизменяемый, уже нормализованный набор фасетов,
пагинации и сортировки. Это и есть ListingRequest, который уходит в каталог.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Union

from vendor_discovery.config.settings import settings


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 12


def default_page_size() -> int:
    """Размер страницы по умолчанию: DEFAULT_PAGE_SIZE из настроек, не больше MAX_PAGE_SIZE."""
    size = settings.default_page_size if settings.default_page_size > 0 else DEFAULT_PAGE_SIZE
    if settings.max_page_size > 0:
        size = min(size, settings.max_page_size)
    return size


# Эмираты, по которым можно фильтровать (slug -> подпись)
LOCATIONS = {
    "abu-dhabi": "Abu Dhabi",
    "dubai": "Dubai",
    "sharjah": "Sharjah",
    "ajman": "Ajman",
    "umm-al-quwain": "Umm Al Quwain",
    "ras-al-khaimah": "Ras Al Khaimah",
    "fujairah": "Fujairah",
}

OCCASIONS = (
    "baby-showers-gender-reveals",
    "birthdays-anniversaries",
    "corporate-events",
    "cultural-festival-events",
    "engagement-proposal-events",
    "graduation-celebrations",
    "private-parties",
    "product-launches-brand-events",
)

FIELD_SORT_KEYS = ("price-low", "price-high", "rating")
RECOMMENDED_SORT_KEY = "recommended"
NO_SORT_KEY = "none"


def occasion_label(slug: str) -> str:
    """'baby-showers-gender-reveals' -> 'Baby Showers Gender Reveals'."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


class ViewMode(str, Enum):
    """Режим отображения списка."""
    LIST = "list"
    MAP = "map"


@dataclass(frozen=True)
class ByField:
    """Сортировка по полю: price-low | price-high | rating."""
    key: str

    def __post_init__(self):
        if self.key not in FIELD_SORT_KEYS:
            raise ValueError(f"Unknown sort key: {self.key!r}")


@dataclass(frozen=True)
class Recommended:
    """Только рекомендованные вендоры (на проводе — isRecommended=true)."""
    key: str = field(default=RECOMMENDED_SORT_KEY, init=False)


SortSpec = Union[ByField, Recommended]


def sort_from_key(key: Optional[str]) -> Optional[SortSpec]:
    """Строит SortSpec из ключа. Неизвестный ключ или 'none' -> None."""
    if not key:
        return None
    key = key.strip().lower()
    if key == RECOMMENDED_SORT_KEY:
        return Recommended()
    if key in FIELD_SORT_KEYS:
        return ByField(key)
    return None


@dataclass(frozen=True)
class FilterState:
    """
    Нормализованный запрос к каталогу.

    Инварианты (обеспечиваются normalized()):
    - min_price <= max_price, если заданы оба
    - rating_floor в 1..5 или None
    - page >= 1, page_size > 0
    - пустые строки хранятся как None
    """
    search_text: Optional[str] = None
    location: Optional[str] = None
    main_category: Optional[str] = None
    sub_category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    rating_floor: Optional[int] = None
    occasion: Optional[str] = None
    sort: Optional[SortSpec] = None
    page: int = DEFAULT_PAGE
    page_size: int = field(default_factory=default_page_size)

    @property
    def is_recommended(self) -> bool:
        return isinstance(self.sort, Recommended)

    @property
    def sort_key(self) -> str:
        return self.sort.key if self.sort else NO_SORT_KEY

    def with_changes(self, **changes) -> "FilterState":
        """Копия с изменениями, сразу нормализованная."""
        return replace(self, **changes).normalized()

    def normalized(self, max_page_size: Optional[int] = None) -> "FilterState":
        """Возвращает состояние с применёнными инвариантами."""
        def _clean(value: Optional[str]) -> Optional[str]:
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        min_price = self.min_price if self.min_price is not None and self.min_price >= 0 else None
        max_price = self.max_price if self.max_price is not None and self.max_price >= 0 else None
        if min_price is not None and max_price is not None and min_price > max_price:
            min_price, max_price = max_price, min_price

        rating = self.rating_floor if self.rating_floor in (1, 2, 3, 4, 5) else None

        location = _clean(self.location)
        if location is not None:
            location = location.lower()
            if location not in LOCATIONS:
                location = None

        page_size = self.page_size if self.page_size and self.page_size > 0 else default_page_size()
        if max_page_size:
            page_size = min(page_size, max_page_size)

        return FilterState(
            search_text=_clean(self.search_text),
            location=location,
            main_category=_clean(self.main_category),
            sub_category=_clean(self.sub_category),
            min_price=min_price,
            max_price=max_price,
            rating_floor=rating,
            occasion=_clean(self.occasion),
            sort=self.sort,
            page=max(DEFAULT_PAGE, int(self.page or DEFAULT_PAGE)),
            page_size=page_size,
        )


@dataclass(frozen=True)
class DiscoveryState:
    """Состояние фильтров + режим отображения (то, что живёт в URL)."""
    filters: FilterState = field(default_factory=FilterState)
    view: ViewMode = ViewMode.LIST

    def with_filters(self, filters: FilterState) -> "DiscoveryState":
        return DiscoveryState(filters=filters, view=self.view)

    def with_view(self, view: ViewMode) -> "DiscoveryState":
        return DiscoveryState(filters=self.filters, view=view)


# Каноническое имя для запроса к каталогу
ListingRequest = FilterState
