"""Pure timer transitions.

Each function takes the current ``TimerState`` (plus whatever settings
and clock readings it needs) and returns a ``Transition``: the complete
next state, the effects the transition asks for, and whether the tick
source must be (re-)armed.  Nothing here touches the scheduler or any
collaborator, so the whole work-rest cycle can be exercised without Qt.

Transitions
-----------
STOPPED | PAUSED → RUNNING                  (start)
RUNNING → RUNNING, one second less          (tick)
RUNNING → next mode, RUNNING or STOPPED     (tick reaching 0)
RUNNING → PAUSED                            (pause)
Any → same mode, STOPPED, full duration     (reset)
Any → target mode, STOPPED, full duration   (switch_mode)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Union

from ..settings import SettingsProvider
from .policy import (
    REMINDER_SECONDS,
    Mode,
    Status,
    auto_start_enabled,
    duration_for,
    next_mode_after,
)


# ── state ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerState:
    """Immutable timer snapshot published to observers."""

    mode: Mode
    status: Status
    time_remaining: int
    pomodoros_completed_in_cycle: int = 0

    @classmethod
    def initial(
        cls,
        settings: SettingsProvider,
        mode: Mode = Mode.POMODORO,
        pomodoros_completed_in_cycle: int = 0,
    ) -> "TimerState":
        return cls(
            mode=mode,
            status=Status.STOPPED,
            time_remaining=duration_for(mode, settings),
            pomodoros_completed_in_cycle=max(0, pomodoros_completed_in_cycle),
        )

    @property
    def is_running(self) -> bool:
        return self.status is Status.RUNNING


@dataclass(frozen=True)
class SessionRecord:
    """One completed segment, handed to the session recorder."""

    mode: Mode
    start: datetime
    end: datetime
    duration: int                     # seconds
    task_ref: Any = None


# ── effect requests ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class SessionStarted:
    mode: Mode
    duration: int


@dataclass(frozen=True)
class StartAmbience:
    pass


@dataclass(frozen=True)
class StopAmbience:
    pass


@dataclass(frozen=True)
class OneMinuteReminder:
    mode: Mode


@dataclass(frozen=True)
class SessionCompleted:
    record: SessionRecord
    next_mode: Mode


@dataclass(frozen=True)
class CreditPomodoro:
    pass


@dataclass(frozen=True)
class RefreshBreakActivity:
    pass


@dataclass(frozen=True)
class BreakStarted:
    mode: Mode
    duration: int


Effect = Union[
    SessionStarted,
    StartAmbience,
    StopAmbience,
    OneMinuteReminder,
    SessionCompleted,
    CreditPomodoro,
    RefreshBreakActivity,
    BreakStarted,
]


@dataclass(frozen=True)
class Transition:
    """Result of a transition function.

    ``arm`` means any live tick source must be torn down and exactly one
    new one created.  When ``state`` is not running the engine tears the
    tick source down regardless.  ``started_at`` is the in-flight session
    start timestamp to carry forward (``None`` discards it).
    """

    state: TimerState
    effects: tuple[Effect, ...] = ()
    arm: bool = False
    started_at: datetime | None = None


# ── transition functions ──────────────────────────────────────────────────


def start(
    state: TimerState,
    settings: SettingsProvider,
    now: datetime,
    started_at: datetime | None = None,
) -> Transition:
    """Begin (or resume) counting down.  No-op while already running."""
    if state.is_running:
        return Transition(state, started_at=started_at)

    effects: list[Effect] = [
        SessionStarted(state.mode, duration_for(state.mode, settings)),
    ]
    if state.mode is Mode.POMODORO:
        effects.append(StartAmbience())
    return Transition(
        replace(state, status=Status.RUNNING),
        tuple(effects),
        arm=True,
        started_at=now,
    )


def tick(
    state: TimerState,
    settings: SettingsProvider,
    now: datetime,
    started_at: datetime | None,
) -> Transition:
    """Advance one second.  Completes the segment when time runs out."""
    if not state.is_running:
        return Transition(state, started_at=started_at)

    remaining = max(0, state.time_remaining - 1)
    if remaining <= 0:
        return complete(state, settings, now, started_at)

    effects: tuple[Effect, ...] = ()
    if remaining == REMINDER_SECONDS:
        effects = (OneMinuteReminder(state.mode),)
    return Transition(
        replace(state, time_remaining=remaining),
        effects,
        started_at=started_at,
    )


def complete(
    state: TimerState,
    settings: SettingsProvider,
    now: datetime,
    started_at: datetime | None,
) -> Transition:
    """Finish the current segment and move to the next mode.

    When the next mode auto-starts, the result is the started state with
    the start effects appended, i.e. a re-entry into ``start`` rather than
    a nested schedule.
    """
    completed_mode = state.mode
    duration = duration_for(completed_mode, settings)
    count = state.pomodoros_completed_in_cycle
    if completed_mode is Mode.POMODORO:
        count += 1
    next_mode = next_mode_after(completed_mode, count, settings)

    record = SessionRecord(
        mode=completed_mode,
        start=started_at or now - timedelta(seconds=duration),
        end=now,
        duration=duration,
    )
    effects: list[Effect] = [StopAmbience(), SessionCompleted(record, next_mode)]
    if completed_mode is Mode.POMODORO:
        effects.append(CreditPomodoro())
        effects.append(RefreshBreakActivity())
        effects.append(BreakStarted(next_mode, duration_for(next_mode, settings)))

    stopped = TimerState(
        mode=next_mode,
        status=Status.STOPPED,
        time_remaining=duration_for(next_mode, settings),
        pomodoros_completed_in_cycle=count,
    )
    if not auto_start_enabled(next_mode, settings):
        return Transition(stopped, tuple(effects))

    restarted = start(stopped, settings, now)
    return Transition(
        restarted.state,
        tuple(effects) + restarted.effects,
        arm=True,
        started_at=restarted.started_at,
    )


def pause(state: TimerState) -> Transition:
    if not state.is_running:
        return Transition(state)
    return Transition(replace(state, status=Status.PAUSED), (StopAmbience(),))


def reset(state: TimerState, settings: SettingsProvider) -> Transition:
    return Transition(
        replace(
            state,
            status=Status.STOPPED,
            time_remaining=duration_for(state.mode, settings),
        ),
        (StopAmbience(),),
    )


def switch_mode(
    state: TimerState, target: Mode, settings: SettingsProvider,
) -> Transition:
    effects: list[Effect] = [StopAmbience()]
    if target.is_break:
        effects.append(RefreshBreakActivity())
    return Transition(
        replace(
            state,
            mode=target,
            status=Status.STOPPED,
            time_remaining=duration_for(target, settings),
        ),
        tuple(effects),
    )
