"""Main application window."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent, QColor, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import (
    QHBoxLayout, QLabel, QMainWindow, QPushButton, QSpinBox,
    QStatusBar, QSystemTrayIcon, QVBoxLayout, QWidget,
)

from .notifications import (
    Notification,
    NotificationDispatcher,
    NotificationTimeoutType,
)
from .session import ConferenceStore, SessionController
from .settings import Settings, load_settings
from .timer.engine import TimerEngine, TimerMode
from .ui.timer_label import ConferenceTimerLabel

log = logging.getLogger(__name__)


# ── tray‑icon image ───────────────────────────────────────────────────────

def _make_tray_icon(color: str = "#89B4FA") -> QIcon:
    pix = QPixmap(64, 64)
    pix.fill(QColor(0, 0, 0, 0))
    p = QPainter(pix)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor(color))
    p.setPen(QColor(color).darker(120))
    p.drawEllipse(4, 4, 56, 56)
    p.end()
    return QIcon(pix)


MODE_MESSAGES: dict[TimerMode, str] = {
    TimerMode.IDLE:      "Waiting for the session to start",
    TimerMode.ELAPSED:   "Session in progress",
    TimerMode.COUNTDOWN: "Countdown running",
}


class ConferenceTimerApp(QMainWindow):
    """Conference clock window with moderator controls."""

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self._settings = settings or load_settings()
        self.setWindowTitle("ConfTimer")
        self.resize(self._settings.window_width, self._settings.window_height)

        # ── collaborators ─────────────────────────────────────────────
        self._store = ConferenceStore(self)
        self._session = SessionController(
            self, db_enabled=self._settings.record_sessions,
        )
        self._notifier = NotificationDispatcher(
            self, enabled=self._settings.notifications_enabled,
        )
        self._engine = TimerEngine(
            self._notifier,
            self._session,
            self,
            tick_interval_ms=self._settings.tick_interval_ms,
            warning_seconds=self._settings.warning_seconds,
            alert_color=self._settings.alert_color,
            warning_timeout=NotificationTimeoutType.from_name(
                self._settings.notification_timeout,
            ),
        )

        self._build_ui()

        # ── system tray icon ──────────────────────────────────────────
        self._tray_icon: QSystemTrayIcon | None = None
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray_icon = QSystemTrayIcon(_make_tray_icon(), self)
            self._tray_icon.setToolTip("ConfTimer")
            self._tray_icon.show()
        self._notifier.attach_tray(self._tray_icon)

        self._connect_signals()
        self._engine.activate(
            self._store.start_timestamp, self._store.deadline_timestamp,
        )
        self._on_mode_changed(self._engine.mode)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(24, 16, 24, 16)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._clock_label = ConferenceTimerLabel(self._engine, central)
        layout.addWidget(self._clock_label)

        controls = QHBoxLayout()
        controls.setSpacing(8)

        self._join_btn = QPushButton("Join", central)

        self._minutes_spin = QSpinBox(central)
        self._minutes_spin.setRange(1, 24 * 60)
        self._minutes_spin.setValue(10)
        self._minutes_spin.setSuffix(" min")

        self._set_timer_btn = QPushButton("Set timer", central)
        self._set_timer_btn.setEnabled(False)

        controls.addWidget(self._join_btn)
        controls.addWidget(QLabel("Limit:", central))
        controls.addWidget(self._minutes_spin)
        controls.addWidget(self._set_timer_btn)
        layout.addLayout(controls)

        self.setCentralWidget(central)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._join_btn.clicked.connect(self._on_join)
        self._set_timer_btn.clicked.connect(self._on_set_timer)

        self._store.start_changed.connect(self._on_start_changed)
        self._store.deadline_changed.connect(self._on_deadline_changed)

        self._engine.mode_changed.connect(self._on_mode_changed)
        self._engine.display_changed.connect(self._on_display_changed)
        self._notifier.notification_shown.connect(self._on_notification)
        self._session.session_ended.connect(self._on_session_ended)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_join(self) -> None:
        self._store.mark_started()

    def _on_set_timer(self) -> None:
        self._store.set_deadline_in(self._minutes_spin.value() * 60)

    def _on_start_changed(self, start: int | None) -> None:
        if start is not None:
            self._session.begin(start)
        self._engine.on_start_changed(start)
        self._clock_label.render_state(self._engine.display)
        self._join_btn.setEnabled(start is None)
        self._set_timer_btn.setEnabled(start is not None)

    def _on_deadline_changed(self, deadline: int | None) -> None:
        self._session.set_deadline(deadline)
        self._engine.on_deadline_changed(deadline)

    def _on_mode_changed(self, mode: TimerMode) -> None:
        self._status_bar.showMessage(MODE_MESSAGES.get(mode, ""))

    def _on_display_changed(self, state) -> None:
        if self._tray_icon is not None:
            self._tray_icon.setToolTip(f"ConfTimer — {state.formatted_duration}")

    def _on_notification(
        self, notification: Notification, timeout: NotificationTimeoutType,
    ) -> None:
        self._status_bar.showMessage(notification.title, timeout.value or 0)

    def _on_session_ended(self, reason: str) -> None:
        self._status_bar.showMessage("Session ended")
        self._set_timer_btn.setEnabled(False)

    # ── lifecycle ─────────────────────────────────────────────────────────

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def store(self) -> ConferenceStore:
        return self._store

    def closeEvent(self, event: QCloseEvent) -> None:
        self._engine.deactivate()
        if not self._session.has_ended and self._store.start_timestamp is not None:
            self._session.end_session("closed")
        if self._tray_icon is not None:
            self._tray_icon.hide()
        super().closeEvent(event)
