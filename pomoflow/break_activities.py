"""Break-activity suggestions.

A suggestion is picked at random from the built-in catalogue whenever a
break is about to begin.  Only categories listed in
``break_activities.categories`` are eligible, and the whole feature can be
switched off with ``break_activities.enabled``.

Catalogue
---------
physical     stretch, walk, hydrate, eye exercises, desk cleanup, desk yoga
mental       meditation, gratitude, affirmations, inspirational quote
creative     doodle
social       call a friend
relaxation   deep breathing, music, look at nature
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .settings import BREAK_CATEGORIES, SettingsProvider, bool_setting


@dataclass(frozen=True)
class BreakActivity:
    key: str
    title: str
    description: str
    category: str
    duration: int | None = None       # minutes


ACTIVITIES: tuple[BreakActivity, ...] = (
    BreakActivity(
        "stretch", "Stretch Your Body",
        "Stand up and stretch: reach for the sky, touch your toes, roll your shoulders.",
        "physical", 2,
    ),
    BreakActivity(
        "walk", "Take a Short Walk",
        "Step away from your desk and walk around for a few minutes.",
        "physical", 3,
    ),
    BreakActivity(
        "deep_breathing", "Deep Breathing",
        "Close your eyes and take ten slow, deep breaths.",
        "relaxation", 2,
    ),
    BreakActivity(
        "meditation", "Quick Meditation",
        "Sit comfortably, close your eyes and focus on being present.",
        "mental", 2,
    ),
    BreakActivity(
        "hydrate", "Hydrate",
        "Drink a glass of water.",
        "physical",
    ),
    BreakActivity(
        "eye_exercise", "Eye Exercises",
        "Look at something far away for 20 seconds, then close your eyes for 20 seconds.",
        "physical", 1,
    ),
    BreakActivity(
        "gratitude", "Practice Gratitude",
        "Think of three things you are grateful for today.",
        "mental", 2,
    ),
    BreakActivity(
        "desk_cleanup", "Tidy Your Workspace",
        "Clear the clutter and throw away what you don't need.",
        "physical", 3,
    ),
    BreakActivity(
        "music", "Listen to Music",
        "Put on a favourite song and just listen.",
        "relaxation",
    ),
    BreakActivity(
        "doodle", "Doodle or Sketch",
        "Grab a pen and draw whatever comes to mind.",
        "creative", 3,
    ),
    BreakActivity(
        "call_friend", "Call a Friend",
        "Reach out to a friend or family member for a quick chat.",
        "social",
    ),
    BreakActivity(
        "nature", "Look at Nature",
        "Look out of a window at trees, sky or any natural scenery.",
        "relaxation", 2,
    ),
    BreakActivity(
        "affirmation", "Positive Affirmations",
        "Remind yourself: I am capable, focused and productive.",
        "mental", 1,
    ),
    BreakActivity(
        "desk_yoga", "Desk Yoga",
        "Seated cat-cow, seated twists or slow neck rolls.",
        "physical", 3,
    ),
    BreakActivity(
        "quote", "Read an Inspirational Quote",
        "Find a quote that motivates you for the next session.",
        "mental", 2,
    ),
)


class BreakActivitySuggester:
    """Holds the current suggestion and rolls a new one on ``refresh()``."""

    def __init__(
        self,
        settings: SettingsProvider,
        *,
        activities: tuple[BreakActivity, ...] = ACTIVITIES,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings
        self._activities = activities
        self._rng = rng or random.Random()
        self._current: BreakActivity | None = None

    @property
    def current(self) -> BreakActivity | None:
        return self._current

    @property
    def enabled(self) -> bool:
        return bool_setting(self._settings, "break_activities.enabled", True)

    def eligible(self) -> list[BreakActivity]:
        categories = self._settings.get("break_activities.categories")
        if categories is None:
            categories = BREAK_CATEGORIES
        return [a for a in self._activities if a.category in categories]

    def refresh(self) -> BreakActivity | None:
        if not self.enabled:
            self._current = None
            return None
        pool = self.eligible()
        if len(pool) > 1 and self._current in pool:
            pool.remove(self._current)
        self._current = self._rng.choice(pool) if pool else None
        return self._current
