"""
Модели для избранных вендоров (saved vendors).
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ToggleResponse:
    """
    Ответ хранилища избранного на toggle.

    Attributes:
        success: Операция выполнена
        saved: Итоговое состояние (сохранён / нет)
        message: Сообщение для пользователя
        requires_auth: Пользователь не авторизован
        redirect_to: Куда перенаправить (если requires_auth)
        error: Текст ошибки
    """
    success: bool
    saved: bool = False
    message: str = ""
    requires_auth: bool = False
    redirect_to: Optional[str] = None
    error: Optional[str] = None


@dataclass
class Notification:
    """Короткое уведомление (toast) для UI."""
    level: str      # info | success | error
    message: str


@dataclass
class ToggleOutcome:
    """Что видит UI после клика по "сердечку"."""
    vendor_id: str
    saved: bool
    notification: Optional[Notification] = None
    redirect_to: Optional[str] = None
    ignored: bool = False

    def to_dict(self) -> dict:
        return {
            "vendor_id": self.vendor_id,
            "saved": self.saved,
            "notification": (
                {"level": self.notification.level, "message": self.notification.message}
                if self.notification else None
            ),
            "redirect_to": self.redirect_to,
            "ignored": self.ignored,
        }
