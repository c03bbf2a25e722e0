"""
Сервис выборки вендоров из каталога.
"""
import asyncio
from typing import Optional

from vendor_discovery.models.filter_state import FilterState
from vendor_discovery.models.listing import FetchError, ListingOutcome, ListingResult
from vendor_discovery.services.catalog_service import CatalogQuery
from vendor_discovery.utils.logger import get_logger


class ListingFetcher:
    """
    Выполняет ListingRequest через коллаборатор каталога.

    - fetch(): ошибка каталога поднимается как FetchError;
      пустая выдача — нормальный результат, не ошибка.
    - fetch_result(): то же, но в виде ListingOutcome (без исключений).
    - refresh(): асинхронная выборка с монотонным номером запроса —
      ответ устаревшего запроса не перетирает более новый результат.

    Кэширования нет: каждое изменение фильтров — новый запрос.
    """

    def __init__(self, catalog: CatalogQuery):
        self.catalog = catalog
        self.logger = get_logger("ListingFetcher")

        self._issued = 0            # Номер последнего выданного запроса
        self._applied = 0           # Номер запроса, чей ответ сейчас применён
        self.current: Optional[ListingOutcome] = None

    def fetch(self, request: FilterState) -> ListingResult:
        """
        Выполняет запрос к каталогу.

        Raises:
            FetchError: каталог недоступен или вернул ошибку
        """
        try:
            response = self.catalog.query(request)
        except FetchError:
            raise
        except Exception as e:
            self.logger.error(f"Catalog query crashed: {e}")
            raise FetchError(str(e) or "Failed to fetch vendor list.") from e

        if response.error:
            self.logger.warning(f"Catalog error: {response.error}")
            raise FetchError(response.error)

        total_pages = max(1, response.total_pages or 1)
        result = ListingResult(
            items=tuple(response.data),
            current_page=request.page,
            total_pages=total_pages,
        )
        self.logger.info(
            f"Fetched {len(result.items)} vendors (page {result.current_page}/{result.total_pages})"
        )
        return result

    def fetch_result(self, request: FilterState) -> ListingOutcome:
        """Как fetch(), но ошибка возвращается в ListingOutcome."""
        try:
            return ListingOutcome.success(self.fetch(request))
        except FetchError as e:
            return ListingOutcome.failure(e)

    def next_ticket(self) -> int:
        """Выдаёт номер для нового запроса."""
        self._issued += 1
        return self._issued

    def apply(self, ticket: int, outcome: ListingOutcome) -> bool:
        """
        Применяет ответ, если он не старее уже применённого.

        Returns:
            True если результат применён, False если отброшен как устаревший
        """
        if ticket <= self._applied:
            self.logger.debug(f"Discarding stale response #{ticket} (applied #{self._applied})")
            return False
        self._applied = ticket
        self.current = outcome
        return True

    async def refresh(self, request: FilterState) -> ListingOutcome:
        """
        Асинхронно выполняет запрос и применяет ответ с учётом порядка.

        Блокирующий вызов каталога уходит в поток (asyncio.to_thread).
        Возвращает актуальный результат: свой, если он применён,
        иначе тот, что уже применён более новым запросом.
        """
        ticket = self.next_ticket()
        outcome = await asyncio.to_thread(self.fetch_result, request)
        self.apply(ticket, outcome)
        return self.current
