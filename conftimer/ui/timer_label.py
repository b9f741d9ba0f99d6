"""Clock label showing the engine's current display state."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QLabel, QWidget

from ..timer.engine import DisplayState, TimerEngine


BASE_STYLE = "font-size: 42px; font-weight: 600;"


def style_sheet(style: dict[str, str]) -> str:
    """``{"color": "red"}`` → ``"font-size: ...; color: red;"``."""
    extra = " ".join(f"{key}: {value};" for key, value in style.items())
    return f"{BASE_STYLE} {extra}".strip()


class ConferenceTimerLabel(QLabel):
    """Renders the formatted duration; hidden until the session starts."""

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.render_state(engine.display)
        engine.display_changed.connect(self.render_state)

    def render_state(self, state: DisplayState) -> None:
        self.setText(state.formatted_duration)
        self.setStyleSheet(style_sheet(state.style))
        self.setVisible(self._engine.is_visible)
