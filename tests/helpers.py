"""Shared test helpers for ConfTimer."""

from conftimer.notifications import Notification, NotificationTimeoutType


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Wall clock in ms that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingNotifier:
    def __init__(self):
        self.calls: list[tuple[Notification, NotificationTimeoutType]] = []

    def show_notification(self, notification, timeout):
        self.calls.append((notification, timeout))


class RecordingSessionControl:
    def __init__(self):
        self.end_calls = 0

    def end_session(self):
        self.end_calls += 1


def countdown_tick(engine, clock, ms: int = 1000) -> None:
    """Advance the clock and deliver one countdown tick."""
    clock.advance(ms)
    engine._on_countdown_tick()


def elapsed_tick(engine, clock, ms: int = 1000) -> None:
    """Advance the clock and deliver one elapsed tick."""
    clock.advance(ms)
    engine._on_elapsed_tick()
