"""
Репозиторий каталога вендоров.
Фильтрация, сортировка и пагинация выполняются на стороне SQLite.
"""
import json
from datetime import datetime
from typing import Optional, List, Tuple

from .base import BaseRepository
from vendor_discovery.models.filter_state import FilterState, Recommended
from vendor_discovery.models.vendor import VendorRecord, VendorSummary

# Сортировки -> ORDER BY. id в конце для стабильного порядка при равенстве.
_ORDER_BY = {
    "price-low": "starting_price ASC, id ASC",
    "price-high": "starting_price DESC, id ASC",
    "rating": "rating DESC, id ASC",
    "recommended": "rating DESC, id ASC",
    "none": "created_at DESC, id ASC",
}

_COLUMNS = (
    "id", "slug", "business_name", "logo", "gallery", "categories",
    "main_category", "sub_categories", "occasions", "tagline", "description",
    "rating", "starting_price", "is_recommended", "latitude", "longitude",
    "city", "is_active", "created_at",
)

_UPSERT_SQL = (
    f"INSERT OR REPLACE INTO vendors ({', '.join(_COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in _COLUMNS)})"
)


def _escape_like(text: str) -> str:
    """Экранирует % и _, чтобы поиск шёл по буквальному тексту."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class VendorRepository(BaseRepository[VendorRecord]):
    """Репозиторий для CRUD операций и поиска по вендорам."""

    table_name = "vendors"

    def create_table(self) -> bool:
        """Создаёт таблицу vendors и индексы по категории и цене."""
        return self.execute_script([
            """
            CREATE TABLE IF NOT EXISTS vendors (
                id TEXT PRIMARY KEY,
                slug TEXT NOT NULL UNIQUE,
                business_name TEXT NOT NULL,
                logo TEXT,
                gallery TEXT,
                categories TEXT,
                main_category TEXT,
                sub_categories TEXT,
                occasions TEXT,
                tagline TEXT,
                description TEXT,
                rating REAL DEFAULT 0,
                starting_price REAL DEFAULT 0,
                is_recommended INTEGER DEFAULT 0,
                latitude REAL,
                longitude REAL,
                city TEXT,
                is_active INTEGER DEFAULT 1,
                created_at TEXT NOT NULL
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_vendors_category ON vendors(main_category)",
            "CREATE INDEX IF NOT EXISTS idx_vendors_price ON vendors(starting_price)",
        ])

    @staticmethod
    def _to_params(record: VendorRecord) -> tuple:
        v = record.summary
        return (
            v.id,
            v.slug,
            v.business_name,
            v.logo,
            json.dumps(v.gallery),
            json.dumps(v.categories),
            record.main_category,
            json.dumps(record.sub_categories),
            json.dumps(record.occasions),
            v.tagline,
            v.description,
            v.rating,
            v.starting_price,
            1 if v.is_recommended else 0,
            v.coordinates.lat if v.coordinates else None,
            v.coordinates.lng if v.coordinates else None,
            v.city,
            1 if record.is_active else 0,
            record.created_at or datetime.now().isoformat(),
        )

    def save(self, record: VendorRecord) -> bool:
        """Сохраняет (или обновляет) вендора."""
        return self.execute(_UPSERT_SQL, self._to_params(record)) > 0

    def save_batch(self, records: List[VendorRecord]) -> int:
        """Сохраняет список вендоров. Возвращает число сохранённых."""
        return sum(1 for record in records if self.save(record))

    def get_by_id(self, id: str) -> Optional[VendorSummary]:
        row = self.fetch_one("SELECT * FROM vendors WHERE id = ?", (id,))
        return VendorSummary.from_row(row) if row else None

    def get_by_slug(self, slug: str) -> Optional[VendorSummary]:
        row = self.fetch_one("SELECT * FROM vendors WHERE slug = ?", (slug,))
        return VendorSummary.from_row(row) if row else None

    def get_all(self) -> List[VendorSummary]:
        rows = self.fetch_all("SELECT * FROM vendors ORDER BY created_at DESC, id ASC")
        return [VendorSummary.from_row(row) for row in rows]

    def search(self, request: FilterState) -> Tuple[List[VendorSummary], int]:
        """
        Выборка одной страницы по нормализованному запросу.

        Returns:
            (вендоры на странице, общее количество совпадений)
        """
        where, params = self._build_where(request)
        order_by = _ORDER_BY.get(request.sort_key, _ORDER_BY["none"])
        offset = (request.page - 1) * request.page_size

        total_row = self.fetch_one(f"SELECT COUNT(*) FROM vendors WHERE {where}", params)
        total = total_row[0] if total_row else 0
        if total == 0:
            return [], 0

        rows = self.fetch_all(
            f"SELECT * FROM vendors WHERE {where} ORDER BY {order_by} LIMIT ? OFFSET ?",
            params + [request.page_size, offset],
        )
        return [VendorSummary.from_row(row) for row in rows], total

    @staticmethod
    def _build_where(request: FilterState) -> Tuple[str, list]:
        """WHERE-условие и параметры для запроса."""
        clauses = ["is_active = 1"]
        params: list = []

        if request.search_text:
            like = f"%{_escape_like(request.search_text)}%"
            clauses.append(
                "(business_name LIKE ? ESCAPE '\\' OR tagline LIKE ? ESCAPE '\\'"
                " OR description LIKE ? ESCAPE '\\')"
            )
            params.extend([like, like, like])
        if request.location:
            clauses.append("city = ?")
            params.append(request.location)
        if request.main_category:
            clauses.append("main_category = ?")
            params.append(request.main_category)
        if request.sub_category:
            clauses.append("EXISTS (SELECT 1 FROM json_each(vendors.sub_categories) WHERE value = ?)")
            params.append(request.sub_category)
        if request.occasion:
            clauses.append("EXISTS (SELECT 1 FROM json_each(vendors.occasions) WHERE value = ?)")
            params.append(request.occasion)
        if request.min_price is not None:
            clauses.append("starting_price >= ?")
            params.append(request.min_price)
        if request.max_price is not None:
            clauses.append("starting_price <= ?")
            params.append(request.max_price)
        if request.rating_floor is not None:
            clauses.append("rating >= ?")
            params.append(request.rating_floor)
        if isinstance(request.sort, Recommended):
            clauses.append("is_recommended = 1")

        return " AND ".join(clauses), params

    def delete(self, id: str) -> bool:
        """Удаляет вендора по ID."""
        return self.execute("DELETE FROM vendors WHERE id = ?", (id,)) > 0
