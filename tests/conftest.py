"""Shared pytest fixtures for Pomoflow tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from pomoflow.database.db import configure_engine, init_db
from pomoflow.database.state_store import TimerStateStore
from pomoflow.settings import DictSettings
from pomoflow.timer.engine import TimerEngine
from pomoflow.timer.scheduler import ManualScheduler

from helpers import RecordingExecutor


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
def scheduler():
    return ManualScheduler()


@pytest.fixture
def settings():
    """One-minute segments, no auto-start, long break every 4th pomodoro."""
    return DictSettings({
        "timer": {
            "pomodoro": 1,
            "short_break": 1,
            "long_break": 2,
            "long_break_interval": 4,
            "auto_start_breaks": False,
            "auto_start_pomodoros": False,
        },
    })


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def engine(qapp, settings, scheduler, executor):
    """Fresh TimerEngine on virtual time, recording effect requests."""
    return TimerEngine(settings, scheduler=scheduler, executor=executor)


@pytest.fixture
def engine_persisted(qapp, settings, scheduler, executor):
    """TimerEngine that writes its durable state to the test database."""
    return TimerEngine(
        settings,
        scheduler=scheduler,
        executor=executor,
        store=TimerStateStore(),
    )
