"""Daily and weekly pomodoro goals.

Each completed pomodoro is credited to today's row and to this week's
row (weeks start on Monday).  Goals come from ``goals.daily_pomodoros``
and ``goals.weekly_pomodoros`` when a row is created and are refreshed by
``update_goals()`` after the user edits them.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

from .database.db import get_session
from .database.models import DailyProgressRow, WeeklyProgressRow
from .settings import SettingsProvider, bool_setting, int_setting

DEFAULT_DAILY_GOAL = 8
DEFAULT_WEEKLY_GOAL = 40


def week_start(day: date) -> date:
    """Monday of the week containing *day*."""
    return day - timedelta(days=day.weekday())


class GoalsTracker:

    def __init__(
        self,
        settings: SettingsProvider,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._settings = settings
        self._today = today

    # ── goals from settings ───────────────────────────────────────────

    @property
    def enabled(self) -> bool:
        return bool_setting(self._settings, "goals.enable_goals", True)

    def daily_goal(self) -> int:
        return int_setting(self._settings, "goals.daily_pomodoros", DEFAULT_DAILY_GOAL)

    def weekly_goal(self) -> int:
        return int_setting(self._settings, "goals.weekly_pomodoros", DEFAULT_WEEKLY_GOAL)

    # ── public API ────────────────────────────────────────────────────

    def credit_pomodoro(self) -> None:
        if not self.enabled:
            return
        with get_session() as db:
            day, week = self._ensure_rows(db)
            day.pomodoros_completed += 1
            week.pomodoros_completed += 1

    def update_goals(self) -> None:
        with get_session() as db:
            day, week = self._ensure_rows(db)
            day.goal = self.daily_goal()
            week.goal = self.weekly_goal()

    def today_progress(self) -> DailyProgressRow | None:
        with get_session() as db:
            return db.query(DailyProgressRow).filter_by(date=self._today()).first()

    def week_progress(self) -> WeeklyProgressRow | None:
        with get_session() as db:
            return (
                db.query(WeeklyProgressRow)
                .filter_by(week_start=week_start(self._today()))
                .first()
            )

    def streak(self) -> int:
        """Consecutive days, newest first, on which the goal was met."""
        with get_session() as db:
            days = (
                db.query(DailyProgressRow)
                .order_by(DailyProgressRow.date.desc())
                .all()
            )
        streak = 0
        expected = None
        for day in days:
            if expected is not None and day.date != expected:
                break
            if day.pomodoros_completed < day.goal:
                break
            streak += 1
            expected = day.date - timedelta(days=1)
        return streak

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_rows(self, db) -> tuple[DailyProgressRow, WeeklyProgressRow]:
        today = self._today()
        day = db.query(DailyProgressRow).filter_by(date=today).first()
        if day is None:
            day = DailyProgressRow(
                date=today, pomodoros_completed=0, goal=self.daily_goal(),
            )
            db.add(day)

        monday = week_start(today)
        week = db.query(WeeklyProgressRow).filter_by(week_start=monday).first()
        if week is None:
            week = WeeklyProgressRow(
                week_start=monday, pomodoros_completed=0, goal=self.weekly_goal(),
            )
            db.add(week)
        return day, week
