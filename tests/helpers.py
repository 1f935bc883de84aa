"""Shared test helpers for Pomoflow."""

from pomoflow.timer.engine import TimerEngine
from pomoflow.timer.scheduler import ManualScheduler


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class RecordingExecutor:
    """Stands in for EffectExecutor and keeps every effect request."""

    def __init__(self):
        self.effects: list = []

    def dispatch(self, effects):
        self.effects.extend(effects)

    def of_type(self, cls) -> list:
        return [e for e in self.effects if isinstance(e, cls)]

    def clear(self):
        self.effects.clear()


class CallLog:
    """Collaborator double that records calls by method name."""

    def __init__(self, fail: set[str] | None = None, returns: dict | None = None):
        self.calls: list[tuple] = []
        self._fail = fail or set()
        self._returns = returns or {}

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.calls.append((name, *args))
            if name in self._fail:
                raise RuntimeError(f"{name} exploded")
            return self._returns.get(name)

        return method

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


def run_segment(engine: TimerEngine, scheduler: ManualScheduler) -> None:
    """Start the current segment and let it run to completion."""
    engine.start()
    scheduler.advance(engine.time_remaining)
