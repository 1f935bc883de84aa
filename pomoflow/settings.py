"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/Pomoflow/settings.json

The file holds one object per settings group (``timer``, ``sound``,
``notifications``, ``integrations``, ``goals``, ``break_activities``).
Collaborators read individual values through dotted paths::

    settings = load_settings()
    settings.get("timer.pomodoro")          # 25
    settings.update("sound.alarm_volume", 80)
    save_settings(settings)

Missing or unknown keys never raise; ``get`` returns ``None`` and the
reader substitutes its own default.
"""

from __future__ import annotations

import json
import math
import logging
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import Any, Mapping, Protocol

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Pomoflow"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

ALARM_SOUNDS = ("Kitchen", "Bell", "Bird", "Digital", "Wood")
TICKING_SOUNDS = ("None", "Ticking Fast", "Ticking Slow", "White Noise", "Brown Noise")
WEBHOOK_EVENTS = ("sessionStart", "sessionEnd", "breakStart")
BREAK_CATEGORIES = ("physical", "mental", "creative", "social", "relaxation")


class SettingsProvider(Protocol):
    """Read-only view used by the timer and its collaborators."""

    def get(self, path: str) -> Any: ...


# ── groups ────────────────────────────────────────────────────────────────


@dataclass
class TimerSettings:
    pomodoro: int = 25                     # minutes
    short_break: int = 5
    long_break: int = 15
    long_break_interval: int = 4
    auto_start_breaks: bool = False
    auto_start_pomodoros: bool = False


@dataclass
class SoundSettings:
    alarm_sound: str = "Bell"
    alarm_volume: int = 50                 # 0-100
    alarm_repeat: int = 1
    ticking_sound: str = "None"
    ticking_volume: int = 50               # 0-100
    muted: bool = False


@dataclass
class NotificationSettings:
    enabled: bool = True
    reminder: bool = False                 # one-minute-remaining reminder


@dataclass
class IntegrationSettings:
    webhook_enabled: bool = False
    webhook_url: str | None = None
    webhook_events: list[str] = field(default_factory=lambda: ["sessionEnd"])


@dataclass
class GoalsSettings:
    daily_pomodoros: int = 8
    weekly_pomodoros: int = 40
    enable_goals: bool = True


@dataclass
class BreakActivitiesSettings:
    enabled: bool = True
    show_duration: bool = True
    categories: list[str] = field(default_factory=lambda: list(BREAK_CATEGORIES))


_GROUPS: dict[str, type] = {
    "timer": TimerSettings,
    "sound": SoundSettings,
    "notifications": NotificationSettings,
    "integrations": IntegrationSettings,
    "goals": GoalsSettings,
    "break_activities": BreakActivitiesSettings,
}


@dataclass
class Settings:
    """All user-configurable preferences."""

    timer: TimerSettings = field(default_factory=TimerSettings)
    sound: SoundSettings = field(default_factory=SoundSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    integrations: IntegrationSettings = field(default_factory=IntegrationSettings)
    goals: GoalsSettings = field(default_factory=GoalsSettings)
    break_activities: BreakActivitiesSettings = field(
        default_factory=BreakActivitiesSettings,
    )

    def get(self, path: str) -> Any:
        """Return the value at a dotted *path*, or ``None`` if absent."""
        node: Any = self
        for part in path.split("."):
            if not hasattr(node, "__dataclass_fields__"):
                return None
            if part not in node.__dataclass_fields__:
                return None
            node = getattr(node, part)
        return node

    def update(self, path: str, value: Any) -> None:
        """Set the field at a dotted ``group.field`` *path*."""
        group_name, _, key = path.partition(".")
        group = getattr(self, group_name, None)
        if group is None or key not in group.__dataclass_fields__:
            raise KeyError(path)
        setattr(group, key, value)


class DictSettings:
    """Settings provider over a plain nested mapping.

    Handy for partial configurations::

        DictSettings({"timer": {"pomodoro": 1}})
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data = data or {}

    def get(self, path: str) -> Any:
        node: Any = self._data
        for part in path.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        return node


# ── typed reads ───────────────────────────────────────────────────────────

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0", ""})


def int_setting(
    settings: SettingsProvider, path: str, default: int, minimum: int = 1,
) -> int:
    """Integer at *path*; *default* when missing or not a finite number.

    Values below *minimum* are clamped to it.
    """
    value: Any = settings.get(path)
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        logger.warning("Setting %s=%r is not a finite number; using %s", path, value, default)
        return default
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Setting %s=%r is not a number; using %s", path, value, default)
        return default
    if number < minimum:
        logger.warning("Setting %s=%r is below %s; clamping", path, value, minimum)
        return minimum
    return number


def bool_setting(settings: SettingsProvider, path: str, default: bool) -> bool:
    """Boolean at *path*.  Accepts real booleans, 0/1 and true/false strings."""
    value: Any = settings.get(path)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    logger.warning("Setting %s=%r is not a boolean; using %s", path, value, default)
    return default


# ── persistence ───────────────────────────────────────────────────────────


def settings_from_dict(data: Mapping[str, Any]) -> Settings:
    """Build ``Settings`` from decoded JSON, keeping only known keys."""
    groups: dict[str, Any] = {}
    for name, cls in _GROUPS.items():
        raw = data.get(name)
        if not isinstance(raw, Mapping):
            continue
        valid_keys = {f.name for f in fields(cls)}
        groups[name] = cls(**{k: v for k, v in raw.items() if k in valid_keys})
    return Settings(**groups)


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return settings_from_dict(data)
            logger.warning("Ignoring settings file %s: not a JSON object", path)
    except (OSError, ValueError, TypeError) as error:
        logger.warning("Failed to load settings from %s: %s", path, error)
    return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
