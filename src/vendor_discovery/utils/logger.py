"""
Логирование каталога.

Все логгеры проекта являются потомками "vendor_discovery", поэтому обработчики
вешаются один раз на корневой логгер пакета.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER = "vendor_discovery"
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

Level = Union[int, str]


def _resolve_level(level: Level) -> int:
    """'debug' / 'INFO' / logging.WARNING -> числовой уровень."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _build_handlers(log_file: Optional[Union[str, Path]]) -> list:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    handlers = [console]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def setup_logger(
    level: Level = logging.INFO,
    log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Настраивает корневой логгер пакета.

    Args:
        level: Уровень (число или имя, например "DEBUG")
        log_file: Путь к файлу лога (опционально)

    Returns:
        Корневой логгер "vendor_discovery"
    """
    root = logging.getLogger(ROOT_LOGGER)
    numeric = _resolve_level(level)
    root.setLevel(numeric)

    if root.handlers:
        for handler in root.handlers:
            handler.setLevel(numeric)
        return root

    for handler in _build_handlers(log_file):
        handler.setLevel(numeric)
        root.addHandler(handler)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Логгер "vendor_discovery.<name>".
    При первом обращении настраивает корневой логгер по LOG_LEVEL / LOG_FILE.
    """
    if not logging.getLogger(ROOT_LOGGER).handlers:
        from vendor_discovery.config.settings import settings
        setup_logger(level=settings.log_level, log_file=settings.log_file)

    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)
