"""Tests for the tick schedulers."""

from datetime import datetime, timedelta

from PyQt6.QtCore import QObject

from pomoflow.timer.scheduler import ManualScheduler, QtTickScheduler


class TestManualScheduler:

    def test_fires_once_per_interval(self):
        s = ManualScheduler()
        fired = []
        s.every(1000, lambda: fired.append(s.now()))
        s.advance(3)
        start = datetime(2024, 1, 1, 9, 0, 0)
        assert fired == [start + timedelta(seconds=n) for n in (1, 2, 3)]

    def test_partial_advance(self):
        s = ManualScheduler()
        fired = []
        s.every(1000, lambda: fired.append(1))
        s.advance(0.5)
        assert fired == []
        s.advance(0.5)
        assert fired == [1]

    def test_cancel_stops_firing(self):
        s = ManualScheduler()
        fired = []
        handle = s.every(1000, lambda: fired.append(1))
        s.advance(2)
        handle.cancel()
        handle.cancel()
        s.advance(5)
        assert len(fired) == 2
        assert not handle.active
        assert s.live_handles == 0

    def test_cancel_from_inside_callback(self):
        s = ManualScheduler()
        fired = []

        def cb():
            fired.append(1)
            handle.cancel()

        handle = s.every(1000, cb)
        s.advance(10)
        assert fired == [1]

    def test_handle_created_in_callback_waits_one_interval(self):
        s = ManualScheduler()
        log = []

        def second():
            log.append(("second", s.now()))

        def first():
            log.append(("first", s.now()))
            first_handle.cancel()
            s.every(1000, second)

        first_handle = s.every(1000, first)
        s.advance(2)
        t0 = datetime(2024, 1, 1, 9, 0, 0)
        assert log == [
            ("first", t0 + timedelta(seconds=1)),
            ("second", t0 + timedelta(seconds=2)),
        ]

    def test_now_lands_on_target(self):
        s = ManualScheduler(start=datetime(2030, 5, 5))
        s.advance(90)
        assert s.now() == datetime(2030, 5, 5, 0, 1, 30)


class TestQtTickScheduler:

    def test_handle_lifecycle(self, qapp):
        owner = QObject()
        s = QtTickScheduler(owner)
        handle = s.every(1000, lambda: None)
        assert handle.active
        handle.cancel()
        assert not handle.active
        handle.cancel()

    def test_now_is_wall_clock(self, qapp):
        before = datetime.now()
        assert QtTickScheduler().now() >= before
