"""Tests for the conference store, session controller and the full
engine → dispatcher / controller wiring.
"""

from __future__ import annotations

import pytest

from conftimer.database.db import get_session
from conftimer.database.models import ConferenceRecord
from conftimer.notifications import NotificationDispatcher
from conftimer.session import ConferenceStore, SessionController
from conftimer.timer.engine import TimerEngine, TimerMode

from helpers import SignalCollector, FakeClock, countdown_tick


# ═══════════════════════════════════════════════════════════════════════
#  STORE
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestConferenceStore:
    def test_starts_empty(self):
        store = ConferenceStore()
        assert store.start_timestamp is None
        assert store.deadline_timestamp is None

    def test_signals_only_on_change(self):
        store = ConferenceStore()
        c = SignalCollector()
        store.deadline_changed.connect(c)

        store.set_deadline(1_000)
        store.set_deadline(1_000)
        store.set_deadline(2_000)

        assert c.items == [1_000, 2_000]

    def test_mark_started_is_sticky(self):
        store = ConferenceStore()
        first = store.mark_started()
        assert store.mark_started() == first

    def test_set_deadline_in(self, monkeypatch):
        monkeypatch.setattr("conftimer.session.now_ms", lambda: 10_000)
        store = ConferenceStore()
        assert store.set_deadline_in(60) == 70_000
        assert store.deadline_timestamp == 70_000

    def test_reset_clears_both(self):
        store = ConferenceStore()
        store.set_start(1)
        store.set_deadline(2)
        c = SignalCollector()
        store.start_changed.connect(c)
        store.reset()
        assert store.start_timestamp is None
        assert store.deadline_timestamp is None
        assert c.items == [None]


# ═══════════════════════════════════════════════════════════════════════
#  SESSION CONTROLLER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSessionController:
    def test_begin_records_session(self):
        ctl = SessionController()
        ctl.begin(5_000)
        with get_session() as db:
            records = db.query(ConferenceRecord).all()
            assert len(records) == 1
            assert records[0].started_at == 5_000
            assert records[0].ended_at is None

    def test_deadline_recorded(self):
        ctl = SessionController()
        ctl.begin(5_000)
        ctl.set_deadline(65_000)
        with get_session() as db:
            assert db.query(ConferenceRecord).first().deadline_at == 65_000

    def test_end_session_records_reason_once(self):
        ctl = SessionController()
        c = SignalCollector()
        ctl.session_ended.connect(c)

        ctl.begin(5_000)
        ctl.end_session()
        ctl.end_session("closed")

        assert c.items == ["countdown"]
        assert ctl.has_ended is True
        with get_session() as db:
            record = db.query(ConferenceRecord).first()
            assert record.end_reason == "countdown"
            assert record.ended_at is not None

    def test_ended_at_uses_epoch_ms(self, monkeypatch):
        monkeypatch.setattr("conftimer.session.now_ms", lambda: 95_000)
        ctl = SessionController()
        ctl.begin(5_000)
        ctl.set_deadline(65_000)
        ctl.end_session()
        with get_session() as db:
            record = db.query(ConferenceRecord).first()
            assert record.ended_at == 95_000
            assert record.ended_at - record.started_at == 90_000
            assert record.ended_at > record.deadline_at

    def test_begin_resets_ended(self):
        ctl = SessionController()
        ctl.begin(1)
        ctl.end_session()
        ctl.begin(2)
        assert ctl.has_ended is False

    def test_no_db_writes_when_disabled(self):
        ctl = SessionController(db_enabled=False)
        ctl.begin(5_000)
        ctl.set_deadline(6_000)
        ctl.end_session()
        assert ctl.record_id is None
        with get_session() as db:
            assert db.query(ConferenceRecord).count() == 0

    def test_end_without_begin_still_emits(self):
        ctl = SessionController()
        c = SignalCollector()
        ctl.session_ended.connect(c)
        ctl.end_session()
        assert len(c) == 1


# ═══════════════════════════════════════════════════════════════════════
#  FULL WIRING
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestEngineWiring:
    def test_countdown_ends_recorded_session(self):
        clock = FakeClock()
        dispatcher = NotificationDispatcher()
        controller = SessionController()
        ended = SignalCollector()
        controller.session_ended.connect(ended)

        engine = TimerEngine(dispatcher, controller, clock=clock)
        controller.begin(clock.now)
        engine.activate(clock.now)
        engine.on_deadline_changed(clock.now + 31_000)

        for _ in range(30):
            countdown_tick(engine, clock)

        assert len(dispatcher.history) == 1
        assert dispatcher.history[0].title == "This session will end in 30 seconds."
        assert ended.items == ["countdown"]
        assert engine.mode == TimerMode.IDLE
        assert engine.formatted_duration == "00:00"
        with get_session() as db:
            assert db.query(ConferenceRecord).first().end_reason == "countdown"

    def test_store_drives_engine(self):
        clock = FakeClock()
        store = ConferenceStore()
        engine = TimerEngine(NotificationDispatcher(), SessionController(db_enabled=False), clock=clock)
        store.start_changed.connect(engine.on_start_changed)
        store.deadline_changed.connect(engine.on_deadline_changed)

        engine.activate(store.start_timestamp, store.deadline_timestamp)
        assert engine.mode == TimerMode.IDLE

        store.set_start(clock.now - 1_000)
        assert engine.mode == TimerMode.ELAPSED
        assert engine.formatted_duration == "00:01"

        store.set_deadline(clock.now + 45_000)
        assert engine.mode == TimerMode.COUNTDOWN
        assert engine.formatted_duration == "00:45"
        engine.deactivate()
