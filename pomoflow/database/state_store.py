"""Durable subset of the timer state.

Only the mode and the completed-pomodoro counter survive a restart; the
engine always comes back stopped with a full countdown.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from ..errors import PersistenceError
from .db import get_session
from .models import TimerStateRow

if TYPE_CHECKING:
    from ..timer.policy import Mode


class TimerStateStore:
    """Reads and writes the single ``timer_state`` row."""

    def load(self) -> tuple["Mode", int] | None:
        from ..timer.policy import Mode

        try:
            with get_session() as db:
                row = db.query(TimerStateRow).first()
                if row is None:
                    return None
                mode_value, count = row.mode, row.pomodoros_completed_in_cycle
        except (SQLAlchemyError, OSError) as error:
            raise PersistenceError(f"failed to read timer state: {error}") from error

        try:
            mode = Mode(mode_value)
        except ValueError:
            mode = Mode.POMODORO
        return mode, max(0, int(count or 0))

    def save(self, mode: "Mode", pomodoros_completed_in_cycle: int) -> None:
        try:
            with get_session() as db:
                row = db.query(TimerStateRow).first()
                if row is None:
                    row = TimerStateRow()
                    db.add(row)
                row.mode = mode.value
                row.pomodoros_completed_in_cycle = pomodoros_completed_in_cycle
                row.updated_at = datetime.now()
        except (SQLAlchemyError, OSError) as error:
            raise PersistenceError(f"failed to write timer state: {error}") from error
