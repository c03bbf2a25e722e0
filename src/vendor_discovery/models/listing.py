"""
Результат запроса к каталогу вендоров.
"""
from dataclasses import dataclass, field
from typing import Optional, List

from .vendor import VendorSummary


class FetchError(Exception):
    """Каталог недоступен или отклонил запрос."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class CatalogResponse:
    """Ответ коллаборатора каталога: данные + число страниц или ошибка."""
    data: List[VendorSummary] = field(default_factory=list)
    total_pages: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class ListingResult:
    """
    Результат выборки для одной страницы.
    Создаётся заново на каждый запрос и не изменяется.
    """
    items: tuple = ()
    current_page: int = 1
    total_pages: int = 1
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def to_dict(self) -> dict:
        """Преобразует объект в словарь."""
        return {
            "items": [item.to_dict() for item in self.items],
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "error": self.error,
        }


@dataclass(frozen=True)
class ListingOutcome:
    """
    Типизированный результат выборки: либо ListingResult, либо FetchError.
    Слой рендеринга решает, что показать, без перехвата исключений.
    """
    result: Optional[ListingResult] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, result: ListingResult) -> "ListingOutcome":
        return cls(result=result)

    @classmethod
    def failure(cls, error: FetchError) -> "ListingOutcome":
        return cls(error=error)

    def unwrap(self) -> ListingResult:
        """Возвращает результат или поднимает сохранённую ошибку."""
        if self.error is not None:
            raise self.error
        return self.result
