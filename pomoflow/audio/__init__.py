"""Audio package."""

from .sounds import AudioNotifier, ALARM_NAMES, AMBIENCE_NAMES

__all__ = ["AudioNotifier", "ALARM_NAMES", "AMBIENCE_NAMES"]
