"""Conference clock state machine.

Modes
-----
IDLE        No tick loop scheduled.
ELAPSED     Counting up from the session start timestamp.
COUNTDOWN   Counting down to the moderator-set deadline.

Transitions
-----------
IDLE → ELAPSED              (activate / start timestamp arrives)
ELAPSED → COUNTDOWN         (deadline appears)
COUNTDOWN → COUNTDOWN       (deadline changes; loop restarted)
COUNTDOWN → IDLE            (final second rendered, session terminated)
Any → IDLE                  (deactivate)

Threshold effects
-----------------
Countdown thresholds compare the *formatted* remaining time against the
formatted warning value (``"00:30"``) and the formatted final second
(``"00:01"``).  A countdown whose ticks never render one of those exact
strings never fires the matching effect.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..notifications import (
    COUNTDOWN_NOTICE_KEY,
    Notification,
    NotificationTimeoutType,
)
from .formatting import format_duration

log = logging.getLogger(__name__)


# ── enums / value types ───────────────────────────────────────────────────


class TimerMode(Enum):
    IDLE = "idle"
    ELAPSED = "elapsed"
    COUNTDOWN = "countdown"


@dataclass
class DisplayState:
    """What the clock label should show right now."""

    formatted_duration: str
    style: dict[str, str] = field(default_factory=dict)


class Notifier(Protocol):
    def show_notification(
        self, notification: Notification, timeout: NotificationTimeoutType
    ) -> None: ...


class SessionControl(Protocol):
    def end_session(self) -> None: ...


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000
WARNING_SECONDS = 30
FINAL_SECOND_MS = 1000
ALERT_COLOR = "red"


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _delta(reference: int | None, current: int | None) -> int | None:
    """``current - reference``, or None when unknown or negative."""
    if reference is None or current is None:
        return None
    if current < reference:
        return None
    return current - reference


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Elapsed / countdown clock for a live session.

    The engine owns at most one running ``QTimer``.  Timestamps are plain
    ``int`` milliseconds since the epoch and are only ever read.

    Signals
    -------
    display_changed(state: DisplayState)
        Emitted whenever the formatted value or its style is published.
    mode_changed(mode: TimerMode)
        Emitted on every mode transition.
    countdown_warning()
        Emitted once when the warning threshold is rendered.
    session_terminated()
        Emitted after the final second triggered session termination.
    """

    display_changed = pyqtSignal(object)
    mode_changed = pyqtSignal(object)
    countdown_warning = pyqtSignal()
    session_terminated = pyqtSignal()

    def __init__(
        self,
        notifier: Notifier,
        session_control: SessionControl,
        parent: QObject | None = None,
        *,
        formatter: Callable[[int], str] = format_duration,
        clock: Callable[[], int] | None = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        warning_seconds: int = WARNING_SECONDS,
        alert_color: str = ALERT_COLOR,
        warning_timeout: NotificationTimeoutType = NotificationTimeoutType.MEDIUM,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._notifier = notifier
        self._session_control = session_control
        self._formatter = formatter
        self._clock: Callable[[], int] = clock or _wall_clock_ms

        # ── configuration ─────────────────────────────────────────────
        self._tick_interval_ms = tick_interval_ms
        self._warning_seconds = warning_seconds
        self._alert_color = alert_color
        self._warning_timeout = warning_timeout

        # ── inputs ────────────────────────────────────────────────────
        self._start_timestamp: int | None = None
        self._deadline_timestamp: int | None = None

        # ── display / lifecycle state ─────────────────────────────────
        self._active: bool = False
        self._mode: TimerMode = TimerMode.IDLE
        self._style: dict[str, str] = {}
        self._display = DisplayState(formatter(0))
        self._warning_fired: bool = False
        self._ended: bool = False

        # ── tick loops (None ⇔ not scheduled) ─────────────────────────
        self._interval: QTimer | None = None
        self._countdown_interval: QTimer | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def display(self) -> DisplayState:
        return self._display

    @property
    def formatted_duration(self) -> str:
        return self._display.formatted_duration

    @property
    def style(self) -> dict[str, str]:
        return dict(self._display.style)

    @property
    def is_visible(self) -> bool:
        """Nothing is rendered until a start timestamp is known."""
        return self._start_timestamp is not None

    @property
    def is_elapsed_running(self) -> bool:
        return self._interval is not None

    @property
    def is_countdown_running(self) -> bool:
        return self._countdown_interval is not None

    @property
    def warning_value(self) -> str:
        """Formatted remaining time that triggers the warning."""
        return self._formatter(self._warning_seconds * 1000)

    @property
    def final_value(self) -> str:
        """Formatted remaining time that terminates the session."""
        return self._formatter(FINAL_SECOND_MS)

    # ══════════════════════════════════════════════════════════════════
    #  LIFECYCLE
    # ══════════════════════════════════════════════════════════════════

    def activate(
        self,
        start_timestamp: int | None,
        deadline_timestamp: int | None = None,
    ) -> None:
        """Bring the clock live.  A no-op while already active.

        Without a start timestamp nothing is published or scheduled; a
        deadline is only remembered until the start arrives.
        """
        if self._active:
            log.debug("activate() ignored: engine already active")
            return
        self._active = True
        self._ended = False
        self._start_timestamp = start_timestamp

        if start_timestamp is None:
            log.info("Clock activated without a start timestamp")
            self._deadline_timestamp = deadline_timestamp
            return

        self._deadline_timestamp = None
        self._start_timer()
        self.on_deadline_changed(deadline_timestamp)

    def on_start_changed(self, new_start: int | None) -> None:
        """Track a start timestamp that arrives after activation."""
        if new_start == self._start_timestamp:
            return
        self._start_timestamp = new_start
        if (
            not self._active
            or self._ended
            or new_start is None
            or self._mode is not TimerMode.IDLE
        ):
            return

        if self._deadline_timestamp is not None:
            self._start_countdown()
        else:
            self._start_timer()

    def on_deadline_changed(self, new_deadline: int | None) -> None:
        """Switch to countdown when a new deadline is observed."""
        previous = self._deadline_timestamp
        self._deadline_timestamp = new_deadline
        if new_deadline is None or new_deadline == previous:
            return
        if not self._active or self._start_timestamp is None:
            return

        log.info("Deadline set to %d, switching to countdown", new_deadline)
        self._stop_all()
        self._start_countdown()

    def deactivate(self) -> None:
        """Stop whatever is running.  Safe to call any number of times."""
        self._stop_all()
        self._active = False
        self._set_mode(TimerMode.IDLE)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — tick loops
    # ══════════════════════════════════════════════════════════════════

    def _start_timer(self) -> None:
        if self._interval is not None:
            return
        self._set_mode(TimerMode.ELAPSED)
        self._publish_elapsed()
        self._interval = self._schedule(self._on_elapsed_tick)

    def _start_countdown(self) -> None:
        if self._countdown_interval is not None:
            return
        self._warning_fired = False
        self._style = {}
        self._set_mode(TimerMode.COUNTDOWN)
        self._publish_remaining()
        self._countdown_interval = self._schedule(self._on_countdown_tick)

    def _on_elapsed_tick(self) -> None:
        if self._mode is not TimerMode.ELAPSED:
            return
        self._publish_elapsed()

    def _on_countdown_tick(self) -> None:
        if self._mode is not TimerMode.COUNTDOWN:
            return
        formatted = self._publish_remaining()
        if formatted is None:
            return

        if formatted == self.warning_value:
            self._fire_warning()

        if formatted == self.final_value:
            self._terminate()

    def _schedule(self, slot: Callable[[], None]) -> QTimer:
        timer = QTimer(self)
        timer.setInterval(self._tick_interval_ms)
        timer.timeout.connect(slot)
        timer.start()
        return timer

    @staticmethod
    def _release(timer: QTimer) -> None:
        timer.stop()
        timer.timeout.disconnect()
        timer.deleteLater()

    def _stop_timer(self) -> None:
        if self._interval is not None:
            self._release(self._interval)
            self._interval = None

    def _stop_countdown_timer(self) -> None:
        if self._countdown_interval is not None:
            self._release(self._countdown_interval)
            self._countdown_interval = None

    def _stop_all(self) -> None:
        self._stop_timer()
        self._stop_countdown_timer()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — publishing & thresholds
    # ══════════════════════════════════════════════════════════════════

    def _publish_elapsed(self) -> str | None:
        delta = _delta(self._start_timestamp, self._clock())
        if delta is None:
            log.debug("Skipping elapsed tick: start is unknown or ahead of now")
            return None
        return self._publish(delta)

    def _publish_remaining(self) -> str | None:
        delta = _delta(self._clock(), self._deadline_timestamp)
        if delta is None:
            log.debug("Skipping countdown tick: deadline is unknown or past")
            return None
        return self._publish(delta)

    def _publish(self, milliseconds: int) -> str:
        formatted = self._formatter(milliseconds)
        self._emit_display(formatted)
        return formatted

    def _emit_display(self, formatted: str) -> None:
        self._display = DisplayState(formatted, dict(self._style))
        self.display_changed.emit(self._display)

    def _fire_warning(self) -> None:
        if self._warning_fired:
            return
        self._warning_fired = True
        log.info("Countdown reached %s, sending warning", self.warning_value)

        self._style = {"color": self._alert_color}
        self._emit_display(self._display.formatted_duration)

        self._notifier.show_notification(
            Notification(
                title_key=COUNTDOWN_NOTICE_KEY,
                title_arguments={
                    "period": str(self._warning_seconds),
                    "periodType": "seconds",
                },
            ),
            self._warning_timeout,
        )
        self.countdown_warning.emit()

    def _terminate(self) -> None:
        log.info("Countdown reached %s, ending session", self.final_value)
        self._ended = True
        self._session_control.end_session()
        self._stop_countdown_timer()
        self._publish(0)
        self._set_mode(TimerMode.IDLE)
        self.session_terminated.emit()

    def _set_mode(self, mode: TimerMode) -> None:
        if mode is self._mode:
            return
        log.debug("Clock mode %s → %s", self._mode.value, mode.value)
        self._mode = mode
        self.mode_changed.emit(mode)
