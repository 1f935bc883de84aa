"""Effect executor. Applies the timer's effect requests to collaborators.

The timer engine only *asks* for effects.  This module decides what they
mean (which alarm, which notification text, which webhook event) and
calls the collaborators.  Every collaborator is optional, and every call
is guarded on its own: a failing collaborator is logged and the
remaining calls still run.  Nothing here ever raises back into the
engine.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Protocol

from .settings import SettingsProvider, bool_setting, int_setting
from .timer.policy import Mode
from .timer.transitions import (
    BreakStarted,
    CreditPomodoro,
    Effect,
    OneMinuteReminder,
    RefreshBreakActivity,
    SessionCompleted,
    SessionRecord,
    SessionStarted,
    StartAmbience,
    StopAmbience,
)
from .webhooks import EVENT_BREAK_START, EVENT_SESSION_END, EVENT_SESSION_START

logger = logging.getLogger(__name__)

MODE_LABELS: dict[Mode, str] = {
    Mode.POMODORO: "Pomodoro",
    Mode.SHORT_BREAK: "Short break",
    Mode.LONG_BREAK: "Long break",
}


# ── collaborator contracts ────────────────────────────────────────────────


class AudioNotifier(Protocol):
    def alarm(self, names: list[str], repeat: int, volume: int) -> None: ...
    def start_ambience(self, profile: str, volume: int) -> None: ...
    def stop_ambience(self) -> None: ...


class SystemNotifier(Protocol):
    def show(self, title: str, body: str) -> None: ...


class SessionRecorder(Protocol):
    def record(self, record: SessionRecord) -> Any: ...


class WebhookDispatcher(Protocol):
    def send(self, event: str, mode: Mode, duration: int, session_id: Any = None) -> Any: ...


class GoalsTracker(Protocol):
    def credit_pomodoro(self) -> None: ...


class BreakActivitySuggester(Protocol):
    def refresh(self) -> Any: ...


class TaskProgress(Protocol):
    def active_task_ref(self) -> Any: ...
    def credit_pomodoro(self, ref: Any) -> None: ...


# ── messages ──────────────────────────────────────────────────────────────


def completion_message(completed: Mode, next_mode: Mode) -> tuple[str, str]:
    """Notification title and body for a finished segment."""
    if completed is Mode.POMODORO:
        return (
            "Pomodoro complete!",
            f"Time for a {MODE_LABELS[next_mode].lower()}.",
        )
    return ("Break is over", "Ready to focus?")


def reminder_message(mode: Mode) -> tuple[str, str]:
    return (
        "One minute left",
        f"{MODE_LABELS[mode]} ends in 1 minute.",
    )


# ── executor ──────────────────────────────────────────────────────────────


class EffectExecutor:
    """Dispatches effect requests, at most once each, never raising."""

    def __init__(
        self,
        settings: SettingsProvider,
        *,
        audio: AudioNotifier | None = None,
        notifier: SystemNotifier | None = None,
        recorder: SessionRecorder | None = None,
        webhooks: WebhookDispatcher | None = None,
        goals: GoalsTracker | None = None,
        break_activities: BreakActivitySuggester | None = None,
        tasks: TaskProgress | None = None,
    ) -> None:
        self._settings = settings
        self.audio = audio
        self.notifier = notifier
        self.recorder = recorder
        self.webhooks = webhooks
        self.goals = goals
        self.break_activities = break_activities
        self.tasks = tasks

        self._handlers: dict[type, Callable[[Any], None]] = {
            SessionStarted: self._on_session_started,
            StartAmbience: self._on_start_ambience,
            StopAmbience: self._on_stop_ambience,
            OneMinuteReminder: self._on_reminder,
            SessionCompleted: self._on_session_completed,
            CreditPomodoro: self._on_credit_pomodoro,
            RefreshBreakActivity: self._on_refresh_break_activity,
            BreakStarted: self._on_break_started,
        }

    def dispatch(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            handler = self._handlers.get(type(effect))
            if handler is None:
                logger.warning("No handler for effect %r", effect)
                continue
            try:
                handler(effect)
            except Exception:
                logger.exception("Effect %s failed", type(effect).__name__)

    # ── guarded collaborator calls ────────────────────────────────────

    def _call(self, what: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception:
            logger.exception("%s failed", what)
            return None

    @property
    def _muted(self) -> bool:
        return bool_setting(self._settings, "sound.muted", False)

    # ── handlers ──────────────────────────────────────────────────────

    def _on_session_started(self, effect: SessionStarted) -> None:
        if self.webhooks is not None:
            self._call(
                "Webhook sessionStart", self.webhooks.send,
                EVENT_SESSION_START, effect.mode, effect.duration,
            )

    def _on_start_ambience(self, effect: StartAmbience) -> None:
        if self.audio is None or self._muted:
            return
        profile = self._settings.get("sound.ticking_sound") or "None"
        volume = int_setting(self._settings, "sound.ticking_volume", 50, minimum=0)
        self._call("Ambience start", self.audio.start_ambience, profile, volume)

    def _on_stop_ambience(self, effect: StopAmbience) -> None:
        if self.audio is not None:
            self._call("Ambience stop", self.audio.stop_ambience)

    def _on_reminder(self, effect: OneMinuteReminder) -> None:
        if self.notifier is None:
            return
        if not bool_setting(self._settings, "notifications.reminder", False):
            return
        self._call("Reminder notification", self.notifier.show, *reminder_message(effect.mode))

    def _on_session_completed(self, effect: SessionCompleted) -> None:
        record = effect.record
        if self.tasks is not None:
            ref = self._call("Active task lookup", self.tasks.active_task_ref)
            record = replace(record, task_ref=ref)

        session_id = None
        if self.recorder is not None:
            session_id = self._call("Session recording", self.recorder.record, record)

        if self.webhooks is not None:
            self._call(
                "Webhook sessionEnd", self.webhooks.send,
                EVENT_SESSION_END, record.mode, record.duration, session_id,
            )

        if self.audio is not None and not self._muted:
            name = self._settings.get("sound.alarm_sound") or "Bell"
            repeat = int_setting(self._settings, "sound.alarm_repeat", 1)
            volume = int_setting(self._settings, "sound.alarm_volume", 50, minimum=0)
            self._call("Alarm", self.audio.alarm, [name], repeat, volume)

        if self.notifier is not None and self._notifications_enabled():
            self._call(
                "Completion notification", self.notifier.show,
                *completion_message(record.mode, effect.next_mode),
            )

    def _on_credit_pomodoro(self, effect: CreditPomodoro) -> None:
        if self.tasks is not None:
            ref = self._call("Active task lookup", self.tasks.active_task_ref)
            if ref is not None:
                self._call("Task credit", self.tasks.credit_pomodoro, ref)
        if self.goals is not None:
            self._call("Goals credit", self.goals.credit_pomodoro)

    def _on_refresh_break_activity(self, effect: RefreshBreakActivity) -> None:
        if self.break_activities is not None:
            self._call("Break activity refresh", self.break_activities.refresh)

    def _on_break_started(self, effect: BreakStarted) -> None:
        if self.webhooks is not None:
            self._call(
                "Webhook breakStart", self.webhooks.send,
                EVENT_BREAK_START, effect.mode, effect.duration,
            )

    def _notifications_enabled(self) -> bool:
        return bool_setting(self._settings, "notifications.enabled", True)
