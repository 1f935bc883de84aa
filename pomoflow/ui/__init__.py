"""UI package."""

from .timer_widget import TimerWidget, format_remaining

__all__ = [
    "TimerWidget",
    "format_remaining",
]
