"""
FastAPI приложение для выдачи вендоров.
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from vendor_discovery.engine import DiscoveryEngine
from vendor_discovery.utils.logger import get_logger
from .routes import router

logger = get_logger("api")

# Глобальный экземпляр движка
engine_instance: DiscoveryEngine = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Управление жизненным циклом приложения.
    Инициализирует движок выдачи при запуске (если его не подставили заранее).
    """
    global engine_instance
    if engine_instance is None:
        engine_instance = DiscoveryEngine()
    engine_instance.init_database()
    logger.info("DiscoveryEngine initialized for API")
    yield
    logger.info("API shutdown")


def create_app() -> FastAPI:
    """Создаёт и настраивает приложение FastAPI."""
    app = FastAPI(
        title="Vendor Discovery",
        description="Каталог вендоров: фильтры, пагинация, карта, избранное",
        version="1.0.0",
        lifespan=lifespan
    )

    # Настраиваем статику
    base_dir = Path(__file__).parent.parent
    static_dir = base_dir / "web" / "static"

    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    # Подключаем роуты
    app.include_router(router)

    return app


# Экземпляр для запуска через uvicorn
app = create_app()


def set_engine(engine: DiscoveryEngine):
    """Подставляет готовый движок (тесты, CLI с другой БД)."""
    global engine_instance
    engine_instance = engine


def get_engine() -> DiscoveryEngine:
    """Возвращает глобальный экземпляр движка."""
    if engine_instance is None:
        raise RuntimeError("DiscoveryEngine not initialized")
    return engine_instance
