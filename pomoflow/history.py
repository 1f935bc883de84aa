"""Session history: the recorder completed segments are written to.

Usage::

    recorder = SessionRecorder()
    session_id = recorder.record(record)
    recorder.session_stats()
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .database.db import get_session
from .database.models import SessionRow
from .timer.transitions import SessionRecord

MAX_SESSIONS = 1000


class SessionRecorder:
    """Stores completed segments, keeping the newest ``max_sessions``."""

    def __init__(self, max_sessions: int = MAX_SESSIONS) -> None:
        self._max_sessions = max_sessions

    def record(self, record: SessionRecord) -> int:
        task = record.task_ref
        with get_session() as db:
            row = SessionRow(
                mode=record.mode.value,
                start_time=record.start,
                end_time=record.end,
                duration_seconds=record.duration,
                task_id=getattr(task, "id", None),
                task_title=getattr(task, "title", None),
            )
            db.add(row)
            db.flush()
            session_id = row.id
            self._trim(db)
        return session_id

    def clear_history(self) -> None:
        with get_session() as db:
            db.query(SessionRow).delete()

    def sessions_between(self, start: datetime, end: datetime) -> list[SessionRow]:
        """Sessions that started within [start, end], newest first."""
        with get_session() as db:
            return (
                db.query(SessionRow)
                .filter(SessionRow.start_time >= start)
                .filter(SessionRow.start_time <= end)
                .order_by(SessionRow.start_time.desc(), SessionRow.id.desc())
                .all()
            )

    def recent(self, limit: int = 20) -> list[SessionRow]:
        with get_session() as db:
            return (
                db.query(SessionRow)
                .order_by(SessionRow.id.desc())
                .limit(limit)
                .all()
            )

    def total_focus_time(
        self, start: datetime | None = None, end: datetime | None = None,
    ) -> int:
        """Seconds spent in completed pomodoros."""
        return sum(
            s.duration_seconds for s in self._select(start, end)
            if s.mode == "pomodoro"
        )

    def session_stats(
        self, start: datetime | None = None, end: datetime | None = None,
    ) -> dict[str, Any]:
        sessions = self._select(start, end)
        focus = [s.duration_seconds for s in sessions if s.mode == "pomodoro"]
        return {
            "total_sessions": len(sessions),
            "pomodoro_sessions": len(focus),
            "break_sessions": len(sessions) - len(focus),
            "total_focus_time": sum(focus),
            "average_session_length": sum(focus) / len(focus) if focus else 0,
        }

    # ── internal ──────────────────────────────────────────────────────

    def _select(
        self, start: datetime | None, end: datetime | None,
    ) -> list[SessionRow]:
        if start is not None and end is not None:
            return self.sessions_between(start, end)
        with get_session() as db:
            return db.query(SessionRow).all()

    def _trim(self, db) -> None:
        stale = (
            db.query(SessionRow.id)
            .order_by(SessionRow.id.desc())
            .offset(self._max_sessions)
            .all()
        )
        if stale:
            db.query(SessionRow).filter(
                SessionRow.id.in_([row.id for row in stale])
            ).delete(synchronize_session=False)
