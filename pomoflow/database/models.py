"""SQLAlchemy ORM models for Pomoflow."""

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SessionRow(Base):
    """One completed segment (pomodoro or break)."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mode = Column(String(20), nullable=False)   # pomodoro | short_break | long_break
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration_seconds = Column(Integer, nullable=False, default=0)
    task_id = Column(Integer, nullable=True)
    task_title = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SessionRow id={self.id} mode={self.mode} "
            f"duration={self.duration_seconds}>"
        )


class TimerStateRow(Base):
    """Single-row table holding the durable part of the timer state."""

    __tablename__ = "timer_state"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mode = Column(String(20), nullable=False, default="pomodoro")
    pomodoros_completed_in_cycle = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<TimerStateRow mode={self.mode} "
            f"cycle={self.pomodoros_completed_in_cycle}>"
        )


class TaskRow(Base):
    """A task that completed pomodoros can be credited to."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    estimated_pomodoros = Column(Integer, nullable=False, default=1)
    actual_pomodoros = Column(Integer, nullable=False, default=0)
    is_complete = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<TaskRow id={self.id} title={self.title!r} "
            f"pomodoros={self.actual_pomodoros}/{self.estimated_pomodoros}>"
        )


class DailyProgressRow(Base):
    """Pomodoros completed on one calendar day against that day's goal."""

    __tablename__ = "daily_progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, unique=True)
    pomodoros_completed = Column(Integer, nullable=False, default=0)
    goal = Column(Integer, nullable=False, default=8)

    def __repr__(self) -> str:
        return (
            f"<DailyProgressRow date={self.date} "
            f"{self.pomodoros_completed}/{self.goal}>"
        )


class WeeklyProgressRow(Base):
    """Pomodoros completed in one Monday-based week."""

    __tablename__ = "weekly_progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    week_start = Column(Date, nullable=False, unique=True)
    pomodoros_completed = Column(Integer, nullable=False, default=0)
    goal = Column(Integer, nullable=False, default=40)

    def __repr__(self) -> str:
        return (
            f"<WeeklyProgressRow week={self.week_start} "
            f"{self.pomodoros_completed}/{self.goal}>"
        )
