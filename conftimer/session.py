"""Conference state and session control.

``ConferenceStore`` holds the two timestamps the clock reads.
``SessionController`` ends the session when the countdown runs out and
keeps a history row per session in the database.
"""

from __future__ import annotations

import logging
import time

from PyQt6.QtCore import QObject, pyqtSignal

from .database.db import get_session
from .database.models import ConferenceRecord

log = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class ConferenceStore(QObject):
    """Source of the start and deadline timestamps (ms since epoch).

    Signals fire only when a value actually changes.
    """

    start_changed = pyqtSignal(object)
    deadline_changed = pyqtSignal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._start_timestamp: int | None = None
        self._deadline_timestamp: int | None = None

    @property
    def start_timestamp(self) -> int | None:
        return self._start_timestamp

    @property
    def deadline_timestamp(self) -> int | None:
        return self._deadline_timestamp

    def set_start(self, timestamp: int | None) -> None:
        if timestamp == self._start_timestamp:
            return
        self._start_timestamp = timestamp
        self.start_changed.emit(timestamp)

    def set_deadline(self, timestamp: int | None) -> None:
        if timestamp == self._deadline_timestamp:
            return
        self._deadline_timestamp = timestamp
        self.deadline_changed.emit(timestamp)

    def mark_started(self) -> int:
        """Record "first participant joined" as now, unless already set."""
        if self._start_timestamp is None:
            self.set_start(now_ms())
        return self._start_timestamp

    def set_deadline_in(self, seconds: int) -> int:
        """Set the deadline *seconds* from now."""
        deadline = now_ms() + seconds * 1000
        self.set_deadline(deadline)
        return deadline

    def reset(self) -> None:
        self.set_deadline(None)
        self.set_start(None)


class SessionController(QObject):
    """Ends sessions and records them.

    Signals
    -------
    session_ended(reason: str)
        Emitted once per session, on the first ``end_session`` call.
    """

    session_ended = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        db_enabled: bool = True,
    ) -> None:
        super().__init__(parent)
        self._db_enabled = db_enabled
        self._record_id: int | None = None
        self._ended: bool = False

    @property
    def has_ended(self) -> bool:
        return self._ended

    @property
    def record_id(self) -> int | None:
        return self._record_id

    def begin(self, start_timestamp: int) -> None:
        """Start tracking a new session."""
        self._ended = False
        self._record_id = None
        if self._db_enabled:
            with get_session() as db:
                record = ConferenceRecord(started_at=start_timestamp)
                db.add(record)
                db.flush()
                self._record_id = record.id
        log.info("Session started at %d", start_timestamp)

    def set_deadline(self, deadline_timestamp: int | None) -> None:
        if self._record_id is None or not self._db_enabled:
            return
        with get_session() as db:
            record = db.get(ConferenceRecord, self._record_id)
            if record:
                record.deadline_at = deadline_timestamp

    def end_session(self, reason: str = "countdown") -> None:
        """Terminate the session.  Further calls are no-ops."""
        if self._ended:
            return
        self._ended = True
        log.info("Ending session (%s)", reason)

        if self._db_enabled and self._record_id is not None:
            with get_session() as db:
                record = db.get(ConferenceRecord, self._record_id)
                if record:
                    record.ended_at = now_ms()
                    record.end_reason = reason

        self.session_ended.emit(reason)
