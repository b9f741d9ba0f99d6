"""Timer package."""

from .engine import (
    TimerEngine,
    TimerMode,
    DisplayState,
    TICK_INTERVAL_MS,
    WARNING_SECONDS,
)
from .formatting import format_duration

__all__ = [
    "TimerEngine",
    "TimerMode",
    "DisplayState",
    "TICK_INTERVAL_MS",
    "WARNING_SECONDS",
    "format_duration",
]
