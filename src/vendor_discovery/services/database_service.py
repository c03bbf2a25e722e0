"""
Локальное хранилище каталога: репозитории вендоров и избранного.
"""
from pathlib import Path
from typing import Iterable, List

from vendor_discovery.config.settings import settings
from vendor_discovery.models.vendor import VendorRecord
from vendor_discovery.repositories import VendorRepository, SavedVendorRepository
from vendor_discovery.repositories.base import BaseRepository
from vendor_discovery.utils.logger import get_logger


class DatabaseService:
    """Держит репозитории одной SQLite-базы и создаёт её схему."""

    def __init__(self, db_path: str = None):
        """
        Args:
            db_path: Путь к БД. Если не указан, берётся из settings.
        """
        self.db_path = db_path or settings.database_path
        self.logger = get_logger("DatabaseService")

        self.vendors = VendorRepository(self.db_path)
        self.saved_vendors = SavedVendorRepository(self.db_path)

    @property
    def repositories(self) -> List[BaseRepository]:
        # vendors первым: saved_vendors ссылается на него
        return [self.vendors, self.saved_vendors]

    def init_database(self) -> bool:
        """Создаёт недостающие таблицы. True, если все созданы."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        failed = [repo.table_name for repo in self.repositories if not repo.create_table()]
        if failed:
            self.logger.error(f"Schema init failed for: {', '.join(failed)}")
            return False

        self.logger.info(f"Database ready: {self.db_path}")
        return True

    def seed(self, records: Iterable[VendorRecord]) -> int:
        """Загружает вендоров в каталог. Возвращает число сохранённых."""
        records = list(records)
        saved = self.vendors.save_batch(records)
        self.logger.info(f"Seeded {saved}/{len(records)} vendors")
        return saved

    def get_statistics(self) -> dict:
        """Количество строк по таблицам."""
        return {f"{repo.table_name}_count": repo.count() for repo in self.repositories}
