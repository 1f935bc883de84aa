"""Exceptions raised by Pomoflow collaborators."""


class PomoflowError(Exception):
    """Base exception for Pomoflow."""


class PersistenceError(PomoflowError):
    """Raised when the durable timer state cannot be read or written."""


class WebhookError(PomoflowError):
    """Raised when a webhook URL is unusable."""
