"""Task progress: which task completed pomodoros are credited to."""

from __future__ import annotations

from dataclasses import dataclass

from .database.db import get_session
from .database.models import TaskRow


@dataclass(frozen=True)
class TaskRef:
    id: int
    title: str


class TaskProgress:
    """Small task list with at most one active task."""

    def add_task(self, title: str, estimated_pomodoros: int = 1) -> TaskRef:
        title = " ".join(title.split())
        if not title:
            raise ValueError("task title must not be empty")
        with get_session() as db:
            row = TaskRow(
                title=title[:255],
                estimated_pomodoros=max(1, estimated_pomodoros),
            )
            db.add(row)
            db.flush()
            return TaskRef(row.id, row.title)

    def tasks(self) -> list[TaskRow]:
        with get_session() as db:
            return db.query(TaskRow).order_by(TaskRow.id).all()

    def set_active(self, task_id: int) -> None:
        """Make *task_id* the active task, or clear it if it already is."""
        with get_session() as db:
            target = db.get(TaskRow, task_id)
            if target is None:
                raise KeyError(task_id)
            was_active = target.is_active
            db.query(TaskRow).update({TaskRow.is_active: False})
            if not was_active and not target.is_complete:
                target.is_active = True

    def active_task_ref(self) -> TaskRef | None:
        with get_session() as db:
            row = db.query(TaskRow).filter_by(is_active=True).first()
            if row is None:
                return None
            return TaskRef(row.id, row.title)

    def credit_pomodoro(self, ref: TaskRef) -> None:
        with get_session() as db:
            row = db.get(TaskRow, ref.id)
            if row is not None:
                row.actual_pomodoros += 1

    def complete_task(self, task_id: int) -> None:
        with get_session() as db:
            row = db.get(TaskRow, task_id)
            if row is None:
                raise KeyError(task_id)
            row.is_complete = True
            row.is_active = False

    def delete_task(self, task_id: int) -> None:
        with get_session() as db:
            row = db.get(TaskRow, task_id)
            if row is not None:
                db.delete(row)
