"""
Репозиторий для избранных вендоров пользователя.
"""
from typing import List

from .base import BaseRepository


class SavedVendorRepository(BaseRepository[str]):
    """Пары (user_id, vendor_id); одна пара хранится не более одного раза."""

    table_name = "saved_vendors"

    def create_table(self) -> bool:
        """Создаёт таблицу saved_vendors."""
        return self.execute_script([
            """
            CREATE TABLE IF NOT EXISTS saved_vendors (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                vendor_id TEXT NOT NULL,
                saved_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (vendor_id) REFERENCES vendors(id),
                UNIQUE(user_id, vendor_id)
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_saved_vendors_user_id ON saved_vendors(user_id)",
        ])

    def add(self, user_id: int, vendor_id: str) -> bool:
        """Добавляет вендора в избранное. False, если он уже там."""
        inserted = self.execute(
            "INSERT OR IGNORE INTO saved_vendors (user_id, vendor_id) VALUES (?, ?)",
            (user_id, vendor_id),
        )
        return inserted > 0

    def remove(self, user_id: int, vendor_id: str) -> bool:
        """Удаляет вендора из избранного пользователя."""
        removed = self.execute(
            "DELETE FROM saved_vendors WHERE user_id = ? AND vendor_id = ?",
            (user_id, vendor_id),
        )
        return removed > 0

    def is_saved(self, user_id: int, vendor_id: str) -> bool:
        row = self.fetch_one(
            "SELECT 1 FROM saved_vendors WHERE user_id = ? AND vendor_id = ?",
            (user_id, vendor_id),
        )
        return row is not None

    def get_for_user(self, user_id: int) -> List[str]:
        """Список vendor_id в избранном пользователя (новые первыми)."""
        rows = self.fetch_all(
            "SELECT vendor_id FROM saved_vendors WHERE user_id = ? ORDER BY saved_at DESC, id DESC",
            (user_id,),
        )
        return [row["vendor_id"] for row in rows]

    def get_all(self) -> List[str]:
        rows = self.fetch_all("SELECT DISTINCT vendor_id FROM saved_vendors")
        return [row["vendor_id"] for row in rows]

    def delete(self, id: str) -> bool:
        """Удаляет вендора из избранного у всех пользователей."""
        return self.execute("DELETE FROM saved_vendors WHERE vendor_id = ?", (id,)) > 0
