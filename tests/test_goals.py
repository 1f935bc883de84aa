"""Tests for daily/weekly goal tracking."""

from datetime import date

from pomoflow.database.db import get_session
from pomoflow.database.models import DailyProgressRow
from pomoflow.goals import GoalsTracker, week_start
from pomoflow.settings import DictSettings


class Clock:
    def __init__(self, day):
        self.day = day

    def __call__(self):
        return self.day


def test_week_start_is_monday():
    assert week_start(date(2024, 3, 7)) == date(2024, 3, 4)
    assert week_start(date(2024, 3, 4)) == date(2024, 3, 4)


class TestCredit:

    def test_first_credit_creates_rows_with_goals(self):
        s = DictSettings({"goals": {"daily_pomodoros": 6, "weekly_pomodoros": 30}})
        g = GoalsTracker(s, today=Clock(date(2024, 3, 6)))
        g.credit_pomodoro()
        g.credit_pomodoro()
        assert g.today_progress().pomodoros_completed == 2
        assert g.today_progress().goal == 6
        week = g.week_progress()
        assert week.week_start == date(2024, 3, 4)
        assert week.pomodoros_completed == 2
        assert week.goal == 30

    def test_week_accumulates_across_days(self):
        clock = Clock(date(2024, 3, 4))
        g = GoalsTracker(DictSettings(), today=clock)
        g.credit_pomodoro()
        clock.day = date(2024, 3, 5)
        g.credit_pomodoro()
        assert g.today_progress().pomodoros_completed == 1
        assert g.week_progress().pomodoros_completed == 2

    def test_disabled_goals_are_not_credited(self):
        s = DictSettings({"goals": {"enable_goals": False}})
        g = GoalsTracker(s, today=Clock(date(2024, 3, 4)))
        g.credit_pomodoro()
        assert g.today_progress() is None

    def test_false_string_disables_goals(self):
        s = DictSettings({"goals": {"enable_goals": "false", "daily_pomodoros": float("inf")}})
        g = GoalsTracker(s, today=Clock(date(2024, 3, 4)))
        assert not g.enabled
        assert g.daily_goal() == 8
        g.credit_pomodoro()
        assert g.today_progress() is None

    def test_defaults(self):
        g = GoalsTracker(DictSettings())
        assert g.daily_goal() == 8
        assert g.weekly_goal() == 40
        assert g.enabled


class TestUpdateGoals:

    def test_refreshes_current_rows(self):
        data = {"goals": {"daily_pomodoros": 4}}
        g = GoalsTracker(DictSettings(data), today=Clock(date(2024, 3, 4)))
        g.credit_pomodoro()
        data["goals"]["daily_pomodoros"] = 10
        g.update_goals()
        assert g.today_progress().goal == 10
        assert g.today_progress().pomodoros_completed == 1


class TestStreak:

    def _day(self, day, done, goal=2):
        with get_session() as db:
            db.add(DailyProgressRow(date=day, pomodoros_completed=done, goal=goal))

    def test_consecutive_met_days(self):
        self._day(date(2024, 3, 1), 2)
        self._day(date(2024, 3, 2), 3)
        self._day(date(2024, 3, 3), 2)
        assert GoalsTracker(DictSettings()).streak() == 3

    def test_missed_day_breaks_streak(self):
        self._day(date(2024, 3, 1), 2)
        self._day(date(2024, 3, 2), 1)
        self._day(date(2024, 3, 3), 2)
        assert GoalsTracker(DictSettings()).streak() == 1

    def test_gap_breaks_streak(self):
        self._day(date(2024, 3, 1), 2)
        self._day(date(2024, 3, 3), 2)
        assert GoalsTracker(DictSettings()).streak() == 1

    def test_empty(self):
        assert GoalsTracker(DictSettings()).streak() == 0
