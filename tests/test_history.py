"""Tests for session history recording and stats."""

from datetime import datetime, timedelta

from pomoflow.history import SessionRecorder
from pomoflow.tasks import TaskRef
from pomoflow.timer.policy import Mode
from pomoflow.timer.transitions import SessionRecord

T0 = datetime(2024, 3, 4, 9, 0, 0)


def rec(mode=Mode.POMODORO, offset_min=0, duration=1500, task=None):
    start = T0 + timedelta(minutes=offset_min)
    return SessionRecord(mode, start, start + timedelta(seconds=duration), duration, task)


class TestRecord:

    def test_returns_increasing_ids(self):
        r = SessionRecorder()
        first = r.record(rec())
        second = r.record(rec(Mode.SHORT_BREAK, 25, 300))
        assert second > first

    def test_task_is_stored(self):
        r = SessionRecorder()
        r.record(rec(task=TaskRef(3, "Write report")))
        row = r.recent(1)[0]
        assert row.task_id == 3
        assert row.task_title == "Write report"
        assert row.mode == "pomodoro"

    def test_trims_to_newest(self):
        r = SessionRecorder(max_sessions=3)
        ids = [r.record(rec(offset_min=i)) for i in range(5)]
        assert [row.id for row in r.recent(10)] == ids[:1:-1]

    def test_clear_history(self):
        r = SessionRecorder()
        r.record(rec())
        r.clear_history()
        assert r.recent() == []


class TestQueries:

    def test_sessions_between_newest_first(self):
        r = SessionRecorder()
        r.record(rec(offset_min=0))
        r.record(rec(offset_min=60))
        r.record(rec(offset_min=24 * 60))
        rows = r.sessions_between(T0, T0 + timedelta(hours=2))
        assert [row.start_time for row in rows] == [
            T0 + timedelta(minutes=60), T0,
        ]

    def test_total_focus_time_counts_pomodoros_only(self):
        r = SessionRecorder()
        r.record(rec(duration=1500))
        r.record(rec(Mode.SHORT_BREAK, duration=300))
        r.record(rec(duration=600))
        assert r.total_focus_time() == 2100

    def test_session_stats(self):
        r = SessionRecorder()
        r.record(rec(duration=1500))
        r.record(rec(duration=500))
        r.record(rec(Mode.LONG_BREAK, duration=900))
        assert r.session_stats() == {
            "total_sessions": 3,
            "pomodoro_sessions": 2,
            "break_sessions": 1,
            "total_focus_time": 2000,
            "average_session_length": 1000,
        }

    def test_session_stats_empty(self):
        stats = SessionRecorder().session_stats()
        assert stats["total_sessions"] == 0
        assert stats["average_session_length"] == 0
