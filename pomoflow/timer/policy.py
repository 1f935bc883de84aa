"""Duration and cycle-policy lookups.

Every function here takes a settings provider (anything with a
``get(path)`` method) and never fails on partial or corrupt settings:
missing fields and non-finite numbers fall back to defaults one at a
time, and non-positive values are clamped to 1.
"""

from __future__ import annotations

from enum import Enum

from ..settings import SettingsProvider, bool_setting, int_setting


class Mode(Enum):
    POMODORO = "pomodoro"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not Mode.POMODORO


class Status(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_MINUTES: dict[Mode, int] = {
    Mode.POMODORO: 25,
    Mode.SHORT_BREAK: 5,
    Mode.LONG_BREAK: 15,
}

DEFAULT_LONG_BREAK_INTERVAL = 4
REMINDER_SECONDS = 60

_MINUTES_PATH: dict[Mode, str] = {
    Mode.POMODORO: "timer.pomodoro",
    Mode.SHORT_BREAK: "timer.short_break",
    Mode.LONG_BREAK: "timer.long_break",
}


def duration_for(mode: Mode, settings: SettingsProvider) -> int:
    """Full length of *mode* in seconds."""
    minutes = int_setting(settings, _MINUTES_PATH[mode], DEFAULT_MINUTES[mode])
    return minutes * 60


def long_break_interval(settings: SettingsProvider) -> int:
    """Completed pomodoros between long breaks (always ≥ 1)."""
    return int_setting(
        settings, "timer.long_break_interval", DEFAULT_LONG_BREAK_INTERVAL,
    )


def auto_start_enabled(mode: Mode, settings: SettingsProvider) -> bool:
    """Whether a segment of *mode* starts by itself after the previous one."""
    path = "timer.auto_start_breaks" if mode.is_break else "timer.auto_start_pomodoros"
    return bool_setting(settings, path, False)


def next_mode_after(
    completed: Mode, pomodoros_completed: int, settings: SettingsProvider,
) -> Mode:
    """Mode that follows *completed*.

    *pomodoros_completed* is the counter value after the completion has been
    counted.  The counter is never reset, so a long break falls on every
    multiple of the interval.
    """
    if completed is not Mode.POMODORO:
        return Mode.POMODORO
    if pomodoros_completed % long_break_interval(settings) == 0:
        return Mode.LONG_BREAK
    return Mode.SHORT_BREAK
