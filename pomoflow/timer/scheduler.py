"""Tick sources for the timer engine.

The engine never talks to ``QTimer`` directly.  It asks a scheduler for a
repeating handle and cancels it again, and it reads the time from the same
scheduler, so tests can swap in ``ManualScheduler`` and advance virtual
seconds instead of waiting on real ones.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer

TICK_INTERVAL_MS = 1000


class TickHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class TickScheduler(Protocol):
    def every(self, interval_ms: int, callback: Callable[[], None]) -> TickHandle: ...

    def now(self) -> datetime: ...


# ── Qt ────────────────────────────────────────────────────────────────────


class _QtTickHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer: QTimer | None = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.stop()
        timer.timeout.disconnect()
        timer.deleteLater()


class QtTickScheduler:
    """Repeating ticks driven by the Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def every(self, interval_ms: int, callback: Callable[[], None]) -> _QtTickHandle:
        timer = QTimer(self._parent)
        timer.setInterval(interval_ms)
        timer.timeout.connect(callback)
        timer.start()
        return _QtTickHandle(timer)

    def now(self) -> datetime:
        return datetime.now()


# ── virtual time ──────────────────────────────────────────────────────────


class _ManualTickHandle:
    def __init__(
        self,
        scheduler: "ManualScheduler",
        interval: timedelta,
        callback: Callable[[], None],
    ) -> None:
        self._scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.due = scheduler.now() + interval
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._scheduler._release(self)


class ManualScheduler:
    """Deterministic scheduler for tests.

    ``advance(seconds)`` fires every due callback in time order, one at a
    time.  A handle created from inside a callback first fires one full
    interval later, exactly like a freshly started ``QTimer``.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, 9, 0, 0)
        self._handles: list[_ManualTickHandle] = []

    def every(self, interval_ms: int, callback: Callable[[], None]) -> _ManualTickHandle:
        handle = _ManualTickHandle(self, timedelta(milliseconds=interval_ms), callback)
        self._handles.append(handle)
        return handle

    def now(self) -> datetime:
        return self._now

    @property
    def live_handles(self) -> int:
        """Number of handles that have not been cancelled."""
        return len(self._handles)

    def advance(self, seconds: float) -> None:
        target = self._now + timedelta(seconds=seconds)
        while True:
            due = [h for h in self._handles if h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self._now = handle.due
            handle.due += handle.interval
            handle.callback()
        self._now = target

    def _release(self, handle: _ManualTickHandle) -> None:
        self._handles.remove(handle)
