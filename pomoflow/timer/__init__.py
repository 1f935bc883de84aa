"""Timer package."""

from .engine import TimerEngine
from .policy import (
    Mode,
    Status,
    DEFAULT_MINUTES,
    DEFAULT_LONG_BREAK_INTERVAL,
    duration_for,
    long_break_interval,
    auto_start_enabled,
)
from .scheduler import ManualScheduler, QtTickScheduler, TICK_INTERVAL_MS
from .transitions import SessionRecord, TimerState, Transition

__all__ = [
    "TimerEngine",
    "Mode",
    "Status",
    "DEFAULT_MINUTES",
    "DEFAULT_LONG_BREAK_INTERVAL",
    "duration_for",
    "long_break_interval",
    "auto_start_enabled",
    "ManualScheduler",
    "QtTickScheduler",
    "TICK_INTERVAL_MS",
    "SessionRecord",
    "TimerState",
    "Transition",
]
