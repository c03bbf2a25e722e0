"""
Модель вендора для выдачи каталога.
"""
import json
from dataclasses import dataclass, asdict, field
from typing import Optional, List


@dataclass(frozen=True)
class Coordinates:
    """Географическая точка."""
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class VendorSummary:
    """Read-only проекция вендора для карточек и карты."""

    id: str                                     # Стабильный ID
    slug: str                                   # Ключ маршрутизации (/vendors/<slug>)
    business_name: str                          # Отображаемое имя
    logo: Optional[str] = None                  # URL логотипа
    gallery: List[str] = field(default_factory=list)     # Упорядоченные изображения
    categories: List[str] = field(default_factory=list)  # Упорядоченные категории
    tagline: str = ""                           # Короткий слоган
    description: str = ""                       # Описание
    rating: float = 0.0                         # 0..5
    starting_price: float = 0.0                 # Цена "от", AED
    is_recommended: bool = False
    coordinates: Optional[Coordinates] = None
    city: Optional[str] = None                  # Slug эмирата

    @property
    def display_categories(self) -> List[str]:
        """Первые две категории для карточки."""
        return self.categories[:2]

    def to_dict(self) -> dict:
        """Преобразует объект в словарь."""
        data = asdict(self)
        data["coordinates"] = self.coordinates.to_dict() if self.coordinates else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'VendorSummary':
        """
        Создаёт объект из словаря.
        Понимает и собственный формат, и ответ бэкенда
        (_id, businessName, averageRating, pricingStartingFrom, address.coordinates).
        """
        address = data.get('address') or {}
        coords = data.get('coordinates') or address.get('coordinates')

        gallery = data.get('gallery') or []
        gallery = [img.get('url') if isinstance(img, dict) else img for img in gallery]

        categories = data.get('categories') or []
        categories = [c.get('name') if isinstance(c, dict) else c for c in categories]

        return cls(
            id=str(data.get('id') or data.get('_id') or ''),
            slug=data.get('slug', ''),
            business_name=data.get('business_name') or data.get('businessName') or '',
            logo=data.get('logo') or data.get('businessLogo'),
            gallery=[g for g in gallery if g],
            categories=[c for c in categories if c],
            tagline=data.get('tagline') or '',
            description=data.get('description') or data.get('businessDescription') or '',
            rating=float(data.get('rating', data.get('averageRating')) or 0),
            starting_price=float(data.get('starting_price', data.get('pricingStartingFrom')) or 0),
            is_recommended=bool(data.get('is_recommended', data.get('isRecommended', False))),
            coordinates=parse_coordinates(coords),
            city=data.get('city') or address.get('city'),
        )

    @classmethod
    def from_row(cls, row) -> 'VendorSummary':
        """Создаёт VendorSummary из sqlite3.Row."""
        lat, lng = row["latitude"], row["longitude"]
        return cls(
            id=row["id"],
            slug=row["slug"],
            business_name=row["business_name"],
            logo=row["logo"],
            gallery=json.loads(row["gallery"] or "[]"),
            categories=json.loads(row["categories"] or "[]"),
            tagline=row["tagline"] or "",
            description=row["description"] or "",
            rating=float(row["rating"] or 0),
            starting_price=float(row["starting_price"] or 0),
            is_recommended=bool(row["is_recommended"]),
            coordinates=Coordinates(lat, lng) if lat is not None and lng is not None else None,
            city=row["city"],
        )


def parse_coordinates(value) -> Optional[Coordinates]:
    """
    Разбирает координаты из {lat, lng} / {latitude, longitude} / Coordinates.
    Невалидные значения -> None.
    """
    if value is None:
        return None
    if isinstance(value, Coordinates):
        return value
    if not isinstance(value, dict):
        return None
    lat = value.get('lat', value.get('latitude'))
    lng = value.get('lng', value.get('longitude'))
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return None
    return Coordinates(lat, lng)


@dataclass
class VendorRecord:
    """
    Вендор в локальном каталоге: проекция + поля, по которым идёт фильтрация.

    Attributes:
        summary: То, что уходит в выдачу
        main_category: Slug основной категории
        sub_categories: Slug'и подкатегорий
        occasions: Slug'и поводов (corporate-events, ...)
        created_at: ISO-дата добавления (сортировка "Latest")
        is_active: Показывать в каталоге
    """
    summary: VendorSummary
    main_category: Optional[str] = None
    sub_categories: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    is_active: bool = True
