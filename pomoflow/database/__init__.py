"""Database package."""

from .db import get_session, init_db, configure_engine
from .models import (
    SessionRow, TimerStateRow, TaskRow, DailyProgressRow, WeeklyProgressRow,
)
from .state_store import TimerStateStore

__all__ = [
    "get_session",
    "init_db",
    "configure_engine",
    "SessionRow",
    "TimerStateRow",
    "TaskRow",
    "DailyProgressRow",
    "WeeklyProgressRow",
    "TimerStateStore",
]
