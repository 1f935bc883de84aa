"""Timer engine for Pomoflow.

The engine owns the one ``TimerState`` of the app and the one tick handle
that drives it.  Commands and ticks are turned into ``Transition`` values
by the pure functions in ``transitions``; the engine then

1. tears down the live tick handle when the new state is not running or
   the transition asks for a fresh one, and only then arms a new one,
2. commits the new state and writes its durable subset (mode and
   completed-pomodoro count),
3. hands the effect requests to the ``EffectExecutor``,
4. publishes the committed state (``state_changed``).

Collaborator and persistence failures are logged and never change the
state.  A tick that fails inside the transition logic leaves the engine
stopped with no live tick handle.

Visibility
----------
``visibility_lost()`` pauses a running timer and remembers that it did
so; the next ``visibility_restored()`` resumes it exactly once.  Any
manual command forgets the automatic pause.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from ..database.state_store import TimerStateStore
from ..errors import PersistenceError
from ..settings import SettingsProvider
from . import transitions
from .policy import Mode, Status, duration_for
from .scheduler import TICK_INTERVAL_MS, QtTickScheduler, TickHandle, TickScheduler
from .transitions import Effect, TimerState, Transition

logger = logging.getLogger(__name__)


class EffectDispatcher(Protocol):
    def dispatch(self, effects: Iterable[Effect]) -> None: ...


class TimerEngine(QObject):
    """Pomodoro / short break / long break state machine.

    Signals
    -------
    state_changed(state: TimerState)
        Emitted with a fresh snapshot after every change, ticks included.
    """

    state_changed = pyqtSignal(object)

    def __init__(
        self,
        settings: SettingsProvider,
        *,
        scheduler: TickScheduler | None = None,
        executor: EffectDispatcher | None = None,
        store: TimerStateStore | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._scheduler: TickScheduler = scheduler or QtTickScheduler(self)
        self._executor = executor
        self._store = store

        self._handle: TickHandle | None = None
        self._started_at: datetime | None = None
        self._auto_paused = False

        mode, count = self._restore()
        self._state = TimerState.initial(settings, mode, count)
        self._saved = (self._state.mode, self._state.pomodoros_completed_in_cycle)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def status(self) -> Status:
        return self._state.status

    @property
    def time_remaining(self) -> int:
        return self._state.time_remaining

    @property
    def pomodoros_completed_in_cycle(self) -> int:
        return self._state.pomodoros_completed_in_cycle

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def auto_paused(self) -> bool:
        """True while paused by a visibility loss."""
        return self._auto_paused

    @property
    def has_live_tick(self) -> bool:
        return self._handle is not None

    @property
    def total_duration(self) -> int:
        return duration_for(self._state.mode, self._settings)

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current segment."""
        total = self.total_duration
        elapsed = total - self._state.time_remaining
        return max(0.0, min(1.0, elapsed / total))

    # ══════════════════════════════════════════════════════════════════
    #  COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start or resume.  No-op while running."""
        self._auto_paused = False
        if self._state.is_running:
            return
        self._apply(transitions.start(self._state, self._settings, self._scheduler.now()))
        logger.info(
            "Timer started: mode=%s remaining=%ss",
            self._state.mode.value,
            self._state.time_remaining,
        )

    def pause(self) -> None:
        self._auto_paused = False
        self._pause()

    def reset(self) -> None:
        self._auto_paused = False
        self._apply(transitions.reset(self._state, self._settings))
        logger.info("Timer reset: mode=%s", self._state.mode.value)

    def switch_mode(self, mode: Mode) -> None:
        self._auto_paused = False
        self._apply(transitions.switch_mode(self._state, mode, self._settings))
        logger.info("Timer switched to %s", mode.value)

    def visibility_lost(self) -> None:
        if not self._state.is_running:
            return
        self._pause()
        self._auto_paused = True
        logger.info("Timer auto-paused: application hidden")

    def visibility_restored(self) -> None:
        if not self._auto_paused:
            return
        self._auto_paused = False
        if self._state.status is Status.PAUSED:
            logger.info("Timer auto-resumed: application visible")
            self.start()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: ticking
    # ══════════════════════════════════════════════════════════════════

    def _pause(self) -> None:
        if not self._state.is_running:
            return
        self._apply(transitions.pause(self._state))
        logger.info(
            "Timer paused: mode=%s remaining=%ss",
            self._state.mode.value,
            self._state.time_remaining,
        )

    def _on_tick(self) -> None:
        if not self._state.is_running:
            self._disarm()
            return
        previous_mode = self._state.mode
        try:
            transition = transitions.tick(
                self._state, self._settings, self._scheduler.now(), self._started_at,
            )
        except Exception:
            logger.exception("Timer tick failed; stopping")
            transition = self._stopped_fallback()
        self._apply(transition)
        if self._state.mode is not previous_mode:
            logger.info(
                "Segment %s completed: next=%s status=%s cycle=%s",
                previous_mode.value,
                self._state.mode.value,
                self._state.status.value,
                self._state.pomodoros_completed_in_cycle,
            )

    def _stopped_fallback(self) -> Transition:
        try:
            remaining = duration_for(self._state.mode, self._settings)
        except Exception:
            logger.exception("Duration lookup failed; keeping remaining time")
            remaining = max(1, self._state.time_remaining)
        return Transition(
            replace(self._state, status=Status.STOPPED, time_remaining=remaining),
            (transitions.StopAmbience(),),
        )

    def _arm(self) -> None:
        self._handle = self._scheduler.every(TICK_INTERVAL_MS, self._on_tick)

    def _disarm(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: applying transitions
    # ══════════════════════════════════════════════════════════════════

    def _apply(self, transition: Transition) -> None:
        if transition.arm or not transition.state.is_running:
            self._disarm()
        if transition.arm:
            self._arm()

        self._started_at = transition.started_at
        changed = transition.state != self._state
        self._state = transition.state

        if changed:
            self._persist()
        self._dispatch(transition.effects)
        if changed:
            self.state_changed.emit(self._state)

    def _dispatch(self, effects: Iterable[Effect]) -> None:
        effects = tuple(effects)
        if not effects or self._executor is None:
            return
        try:
            self._executor.dispatch(effects)
        except Exception:
            logger.exception("Effect dispatch failed")

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: persistence
    # ══════════════════════════════════════════════════════════════════

    def _restore(self) -> tuple[Mode, int]:
        if self._store is None:
            return Mode.POMODORO, 0
        try:
            saved = self._store.load()
        except PersistenceError as error:
            logger.warning("Could not restore timer state: %s", error)
            return Mode.POMODORO, 0
        if saved is None:
            return Mode.POMODORO, 0
        return saved

    def _persist(self) -> None:
        durable = (self._state.mode, self._state.pomodoros_completed_in_cycle)
        if self._store is None or durable == self._saved:
            return
        try:
            self._store.save(*durable)
        except PersistenceError as error:
            logger.warning("Could not save timer state: %s", error)
            return
        self._saved = durable
