"""Transient notifications shown to the participant.

Usage::

    dispatcher = NotificationDispatcher()
    dispatcher.attach_tray(tray_icon)
    dispatcher.show_notification(
        Notification(COUNTDOWN_NOTICE_KEY, {"period": "30", "periodType": "seconds"}),
        NotificationTimeoutType.MEDIUM,
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QSystemTrayIcon

log = logging.getLogger(__name__)


COUNTDOWN_NOTICE_KEY = "notify.countdownNotice"

TITLES: dict[str, str] = {
    COUNTDOWN_NOTICE_KEY: "This session will end in {period} {periodType}.",
}


class NotificationTimeoutType(Enum):
    """How long a notification stays on screen (``None`` = until dismissed)."""

    SHORT = 2500
    MEDIUM = 5000
    LONG = 10000
    STICKY = None

    @classmethod
    def from_name(cls, name: str) -> "NotificationTimeoutType":
        try:
            return cls[name.upper()]
        except KeyError:
            log.warning("Unknown notification timeout %r, using MEDIUM", name)
            return cls.MEDIUM


@dataclass
class Notification:
    title_key: str
    title_arguments: dict[str, str] = field(default_factory=dict)

    @property
    def title(self) -> str:
        template = TITLES.get(self.title_key, self.title_key)
        return template.format(**self.title_arguments)


class NotificationDispatcher(QObject):
    """Delivers notification requests to the tray and to listeners.

    Every delivered notification is appended to :attr:`history` and
    announced through ``notification_shown(notification, timeout)``.
    """

    notification_shown = pyqtSignal(object, object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        super().__init__(parent)
        self._enabled = enabled
        self._tray: QSystemTrayIcon | None = None
        self.history: list[Notification] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def attach_tray(self, tray: QSystemTrayIcon | None) -> None:
        self._tray = tray

    def show_notification(
        self,
        notification: Notification,
        timeout: NotificationTimeoutType = NotificationTimeoutType.MEDIUM,
    ) -> None:
        if not self._enabled:
            log.debug("Notifications disabled, dropping %s", notification.title_key)
            return

        log.info("Notification: %s", notification.title)
        self.history.append(notification)
        self.notification_shown.emit(notification, timeout)

        if self._tray is not None:
            # Qt treats a zero timeout as "platform default"; sticky maps there.
            msecs = timeout.value or 0
            self._tray.showMessage(
                "ConfTimer",
                notification.title,
                QSystemTrayIcon.MessageIcon.Warning,
                msecs,
            )
