"""
Кнопка "Поделиться" для карточки вендора.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from vendor_discovery.config.settings import settings
from vendor_discovery.models.view_models import ShareTarget
from vendor_discovery.utils.logger import get_logger

# Платформенный share (navigator.share и т.п.): принимает ShareTarget,
# возвращает True, если платформа взяла отправку на себя
PlatformShare = Callable[[ShareTarget], bool]


@dataclass
class ShareOutcome:
    target: ShareTarget
    shared: bool                        # Отправлено платформой
    fallback_message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "title": self.target.title,
            "text": self.target.text,
            "url": self.target.url,
            "shared": self.shared,
            "fallback_message": self.fallback_message,
        }


class ShareService:
    """Строит ShareTarget и делится им через платформу, если она умеет."""

    def __init__(self, site_url: str = None):
        self.site_url = (site_url or settings.site_url).rstrip("/")
        self.logger = get_logger("ShareService")

    def vendor_url(self, slug: str) -> str:
        return f"{self.site_url}/vendors/{slug}"

    def target(self, name: str, slug: str) -> ShareTarget:
        return ShareTarget(
            title=name,
            text=f"Check out {name} for your event planning needs!",
            url=self.vendor_url(slug),
        )

    def share(self, name: str, slug: str, platform_share: Optional[PlatformShare] = None) -> ShareOutcome:
        """
        Делится карточкой вендора.
        Без платформенного share (или если он отказал) возвращает ссылку
        в сообщении для ручного копирования.
        """
        target = self.target(name, slug)
        if platform_share is not None and platform_share(target):
            self.logger.debug(f"Shared {target.url} via platform")
            return ShareOutcome(target=target, shared=True)

        message = (
            "Sharing not supported in this browser. "
            f"You can manually share this link: {target.url}"
        )
        return ShareOutcome(target=target, shared=False, fallback_message=message)
