"""UI package."""

from .timer_label import ConferenceTimerLabel

__all__ = ["ConferenceTimerLabel"]
