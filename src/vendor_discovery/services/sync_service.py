"""
Синхронизация списка карточек и карты.

Список публикует HoverSignal при наведении на карточку, карта подписана
на тот же канал и держит не больше одного открытого попапа.
Канал изолирован токеном экземпляра выдачи: две выдачи на одной странице
не видят сигналов друг друга.
"""
import secrets
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from vendor_discovery.utils.logger import get_logger


@dataclass(frozen=True)
class HoverSignal:
    """open(vendor_id) или close (vendor_id=None)."""
    vendor_id: Optional[str] = None

    @classmethod
    def open(cls, vendor_id: str) -> "HoverSignal":
        return cls(vendor_id=vendor_id)

    @classmethod
    def close(cls) -> "HoverSignal":
        return cls(vendor_id=None)

    @property
    def is_open(self) -> bool:
        return self.vendor_id is not None


Subscriber = Callable[[HoverSignal], None]


class HoverChannel:
    """Типизированный publish/subscribe для HoverSignal."""

    def __init__(self, token: str):
        self.token = token
        self._subscribers: List[Subscriber] = []
        self.logger = get_logger("HoverChannel")

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Подписывает callback. Возвращает функцию отписки."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, signal: HoverSignal):
        """Доставляет сигнал всем подписчикам в порядке подписки."""
        self.logger.debug(f"[{self.token}] {'open ' + signal.vendor_id if signal.is_open else 'close'}")
        for callback in list(self._subscribers):
            callback(signal)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


class ChannelRegistry:
    """Каналы по токену экземпляра выдачи."""

    def __init__(self):
        self._channels: Dict[str, HoverChannel] = {}
        self.logger = get_logger("ChannelRegistry")

    def create(self) -> HoverChannel:
        token = secrets.token_urlsafe(8)
        channel = HoverChannel(token)
        self._channels[token] = channel
        self.logger.debug(f"Channel {token} created")
        return channel

    def get(self, token: str) -> Optional[HoverChannel]:
        return self._channels.get(token)

    def release(self, token: str) -> bool:
        return self._channels.pop(token, None) is not None

    def __len__(self) -> int:
        return len(self._channels)


class HoverPublisher:
    """
    Сторона списка: автомат Idle / Highlighted(id).

    - enter(id) в Idle -> Highlighted(id), публикует open(id)
    - enter(id') в Highlighted(id) -> Highlighted(id'), публикует open(id')
    - leave() в Highlighted -> Idle, публикует close
    """

    def __init__(self, channel: HoverChannel):
        self.channel = channel
        self.highlighted: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.highlighted is None

    def enter(self, vendor_id: str):
        if self.highlighted == vendor_id:
            return
        self.highlighted = vendor_id
        self.channel.publish(HoverSignal.open(vendor_id))

    def leave(self):
        if self.highlighted is None:
            return
        self.highlighted = None
        self.channel.publish(HoverSignal.close())


class MapPopupController:
    """
    Сторона карты: не больше одного открытого попапа.

    Открытие нового попапа закрывает предыдущий в том же шаге,
    так что одновременно двух открытых не бывает.
    transitions хранит ("close"|"open", vendor_id) в порядке применения.
    """

    def __init__(self, marker_ids: Iterable[str] = (), channel: Optional[HoverChannel] = None):
        self.marker_ids = set(marker_ids)
        self.open_popup: Optional[str] = None
        self.transitions: List[Tuple[str, str]] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        if channel is not None:
            self.attach(channel)

    def attach(self, channel: HoverChannel):
        self.detach()
        self._unsubscribe = channel.subscribe(self.on_signal)

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_signal(self, signal: HoverSignal):
        if signal.is_open:
            self.open(signal.vendor_id)
        else:
            self.close_all()

    def open(self, vendor_id: str):
        """Открывает попап маркера; вендор без маркера не открывает ничего."""
        if vendor_id not in self.marker_ids:
            self.close_all()
            return
        if self.open_popup == vendor_id:
            return
        self.close_all()
        self.open_popup = vendor_id
        self.transitions.append(("open", vendor_id))

    def close_all(self):
        if self.open_popup is None:
            return
        self.transitions.append(("close", self.open_popup))
        self.open_popup = None

    def marker_enter(self, vendor_id: str):
        """Наведение на маркер открывает его попап."""
        self.open(vendor_id)

    def marker_click(self, vendor_id: str):
        """Клик по маркеру переключает его попап."""
        if self.open_popup == vendor_id:
            self.close_all()
        else:
            self.open(vendor_id)


@dataclass
class DiscoverySession:
    """Экземпляр выдачи: канал + обе стороны синхронизации."""
    channel: HoverChannel
    publisher: HoverPublisher
    popups: MapPopupController

    @property
    def token(self) -> str:
        return self.channel.token

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "highlighted": self.publisher.highlighted,
            "open_popup": self.popups.open_popup,
        }


class SyncService:
    """
    Создаёт и хранит сессии синхронизации по токену.
    Хранится не больше max_sessions последних сессий, старые закрываются.
    """

    def __init__(self, registry: Optional[ChannelRegistry] = None, max_sessions: int = 256):
        self.registry = registry or ChannelRegistry()
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, DiscoverySession]" = OrderedDict()
        self.logger = get_logger("SyncService")

    def open_session(self, marker_ids: Iterable[str]) -> DiscoverySession:
        channel = self.registry.create()
        session = DiscoverySession(
            channel=channel,
            publisher=HoverPublisher(channel),
            popups=MapPopupController(marker_ids, channel=channel),
        )
        self._sessions[channel.token] = session
        while len(self._sessions) > self.max_sessions:
            oldest = next(iter(self._sessions))
            self.close_session(oldest)
        self.logger.info(f"Session {channel.token} opened with {len(session.popups.marker_ids)} markers")
        return session

    def get(self, token: str) -> Optional[DiscoverySession]:
        return self._sessions.get(token)

    def close_session(self, token: str) -> bool:
        session = self._sessions.pop(token, None)
        if session is None:
            return False
        session.popups.detach()
        self.registry.release(token)
        return True
