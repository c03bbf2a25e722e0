"""
История навигации (аналог router.push с back/forward).
"""
from dataclasses import dataclass
from typing import List, Optional

from vendor_discovery.models.filter_state import DiscoveryState
from vendor_discovery.query.codec import build_location, decode
from vendor_discovery.utils.logger import get_logger


@dataclass(frozen=True)
class Location:
    """Навигируемый адрес: путь + query, и нужно ли прокручивать страницу."""
    path: str
    query: str
    scroll: bool = False

    @property
    def url(self) -> str:
        return f"{self.path}?{self.query}" if self.query else self.path

    @property
    def state(self) -> DiscoveryState:
        return decode(self.query)

    def to_dict(self) -> dict:
        return {"url": self.url, "path": self.path, "query": self.query, "scroll": self.scroll}


class Navigator:
    """
    Стек адресов с курсором.
    push() после back() отбрасывает "будущее", как в браузере.
    """

    def __init__(self, initial: Optional[Location] = None):
        self._entries: List[Location] = [initial] if initial else []
        self._cursor = len(self._entries) - 1
        self.logger = get_logger("Navigator")

    @property
    def current(self) -> Optional[Location]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    @property
    def entries(self) -> List[Location]:
        return list(self._entries)

    def push(self, path: str, state: DiscoveryState, scroll: bool = False) -> Location:
        """Добавляет новый адрес в историю."""
        url = build_location(path, state)
        query = url.split("?", 1)[1] if "?" in url else ""
        location = Location(path=path, query=query, scroll=scroll)

        del self._entries[self._cursor + 1:]
        self._entries.append(location)
        self._cursor = len(self._entries) - 1
        self.logger.debug(f"push {location.url} (scroll={scroll})")
        return location

    def back(self) -> Optional[Location]:
        if self._cursor <= 0:
            return None
        self._cursor -= 1
        return self.current

    def forward(self) -> Optional[Location]:
        if self._cursor >= len(self._entries) - 1:
            return None
        self._cursor += 1
        return self.current
