"""
Конфигурация проекта через переменные окружения.
Значения читаются из .env (если есть) и переменных окружения.
"""
import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field


@dataclass
class Settings:
    """Настройки приложения."""

    # Пути
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent.parent.parent)

    # Database
    database_path: str = ""

    # Удалённый каталог вендоров (если не задан, используется локальная БД)
    backend_url: Optional[str] = None
    catalog_timeout_s: float = 30.0
    catalog_retries: int = 1

    # Публичный адрес сайта (для ссылок "Поделиться")
    site_url: str = "http://127.0.0.1:8000"

    # Пагинация
    default_page_size: int = 12
    max_page_size: int = 100

    # Карта
    default_map_lat: float = 25.2048
    default_map_lng: float = 55.2708
    map_zoom: int = 11

    # Логирование
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Загружает значения из .env или переменных окружения."""
        # Загружаем .env если есть
        self._load_dotenv()

        # Database - относительный путь от корня проекта
        default_db = str(self.base_dir / "results" / "vendors.db")
        self.database_path = os.getenv("DATABASE_PATH", default_db)

        # Backend
        self.backend_url = os.getenv("BACKEND_URL") or None
        self.catalog_timeout_s = float(os.getenv("CATALOG_TIMEOUT_S", "30"))
        self.catalog_retries = int(os.getenv("CATALOG_RETRIES", "1"))
        self.site_url = os.getenv("SITE_URL", self.site_url).rstrip("/")

        # Pagination
        self.default_page_size = int(os.getenv("DEFAULT_PAGE_SIZE", "12"))
        self.max_page_size = int(os.getenv("MAX_PAGE_SIZE", "100"))

        # Map
        self.default_map_lat = float(os.getenv("DEFAULT_MAP_LAT", str(self.default_map_lat)))
        self.default_map_lng = float(os.getenv("DEFAULT_MAP_LNG", str(self.default_map_lng)))
        self.map_zoom = int(os.getenv("MAP_ZOOM", str(self.map_zoom)))

        self.log_level = os.getenv("LOG_LEVEL", self.log_level).upper()
        self.log_file = os.getenv("LOG_FILE") or None

    def _load_dotenv(self):
        """Загружает .env файл если существует."""
        env_path = self.base_dir / ".env"
        if not env_path.exists():
            return
        with open(env_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    os.environ.setdefault(key.strip(), value.strip())

    @property
    def results_dir(self) -> Path:
        """Директория для БД и логов."""
        return self.base_dir / "results"

    @property
    def default_center(self) -> tuple[float, float]:
        """Центр карты по умолчанию (Дубай)."""
        return (self.default_map_lat, self.default_map_lng)


# Глобальный экземпляр настроек
settings = Settings()
