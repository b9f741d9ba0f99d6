"""Shared pytest fixtures for ConfTimer tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from conftimer.database.db import configure_engine, init_db
from conftimer.timer.engine import TimerEngine

from helpers import FakeClock, RecordingNotifier, RecordingSessionControl


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def session_control():
    return RecordingSessionControl()


@pytest.fixture
def engine(qapp, notifier, session_control, clock):
    """Fresh TimerEngine on a fake clock with recording collaborators."""
    eng = TimerEngine(notifier, session_control, clock=clock)
    yield eng
    eng.deactivate()
