"""
Базовый класс репозиториев каталога.

Каждый запрос открывает своё соединение: сервер FastAPI обслуживает
запросы из пула потоков, а sqlite3.Connection нельзя делить между потоками.
"""
import sqlite3
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from vendor_discovery.utils.logger import get_logger

T = TypeVar('T')

LOCKED_MESSAGE = "database is locked"


class RepositoryLockedError(sqlite3.OperationalError):
    """БД осталась заблокированной после всех попыток."""

    def __init__(self, table: str, attempts: int):
        super().__init__(f"{LOCKED_MESSAGE}: {table} unavailable after {attempts} attempts")
        self.table = table
        self.attempts = attempts


class BaseRepository(ABC, Generic[T]):
    """
    Общая логика работы с SQLite для таблицы table_name.

    Подклассы описывают схему (create_table) и пользуются
    fetch_one / fetch_all / execute, которые уже повторяют
    операцию при "database is locked".
    """

    table_name: str = ""

    def __init__(self, db_path: str, max_retries: int = 3, retry_delay: float = 1.0):
        self.db_path = db_path
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.logger = get_logger(self.__class__.__name__)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def get_connection(self):
        """Соединение с row_factory=Row; закрывается при выходе из блока."""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout = 30000")
        conn.execute("PRAGMA journal_mode = WAL")
        try:
            yield conn
        finally:
            conn.close()

    def execute_with_retry(self, operation: Callable[..., Any], *args, **kwargs):
        """
        Выполняет operation, повторяя её при блокировке БД.

        Returns:
            Результат operation.

        Raises:
            RepositoryLockedError: все попытки упёрлись в блокировку.
            Остальные ошибки sqlite поднимаются как есть.
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                return operation(*args, **kwargs)
            except sqlite3.OperationalError as e:
                if LOCKED_MESSAGE not in str(e):
                    raise
                self.logger.warning(f"[{self.table_name}] DB locked, attempt {attempt}/{self.max_retries}")
                time.sleep(self.retry_delay)

        self.logger.error(f"[{self.table_name}] Operation failed after {self.max_retries} attempts")
        raise RepositoryLockedError(self.table_name, self.max_retries)

    # ------------------------------------------------------------------
    # Помощники для подклассов
    # ------------------------------------------------------------------

    def fetch_one(self, sql: str, params: Iterable = ()) -> Optional[sqlite3.Row]:
        def _fetch():
            with self.get_connection() as conn:
                return conn.execute(sql, tuple(params)).fetchone()

        return self.execute_with_retry(_fetch)

    def fetch_all(self, sql: str, params: Iterable = ()) -> List[sqlite3.Row]:
        def _fetch():
            with self.get_connection() as conn:
                return conn.execute(sql, tuple(params)).fetchall()

        return self.execute_with_retry(_fetch)

    def execute(self, sql: str, params: Iterable = ()) -> int:
        """Изменяющий запрос с commit. Возвращает rowcount."""
        def _execute():
            with self.get_connection() as conn:
                cursor = conn.execute(sql, tuple(params))
                conn.commit()
                return cursor.rowcount

        return self.execute_with_retry(_execute)

    def execute_script(self, statements: Iterable[str]) -> bool:
        """Несколько DDL-запросов в одной транзакции."""
        def _run():
            with self.get_connection() as conn:
                for statement in statements:
                    conn.execute(statement)
                conn.commit()
                return True

        return self.execute_with_retry(_run)

    def count(self) -> int:
        """Количество строк в таблице."""
        row = self.fetch_one(f"SELECT COUNT(*) FROM {self.table_name}")
        return row[0] if row else 0

    @abstractmethod
    def create_table(self) -> bool:
        """Создаёт таблицу (и индексы) в БД."""

    @abstractmethod
    def get_all(self) -> List[T]:
        """Все записи таблицы."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Удаляет запись."""
