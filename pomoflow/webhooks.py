"""Outgoing webhooks for session events.

Payload (JSON, POSTed to ``integrations.webhook_url``)::

    {
        "event": "sessionEnd",
        "mode": "pomodoro",
        "timestamp": "2024-01-01T09:25:00+00:00",
        "duration": 1500,
        "sessionId": 12
    }

Posts run on a single background worker so the timer never waits on the
network.  Delivery is best-effort: failures are logged, never retried.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

import requests

from .errors import WebhookError
from .settings import SettingsProvider, bool_setting
from .timer.policy import Mode

logger = logging.getLogger(__name__)

USER_AGENT = "Pomoflow/1.0"
REQUEST_TIMEOUT = 10  # seconds

EVENT_SESSION_START = "sessionStart"
EVENT_SESSION_END = "sessionEnd"
EVENT_BREAK_START = "breakStart"


def build_payload(
    event: str,
    mode: Mode,
    duration: int,
    session_id: Any = None,
    *,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "event": event,
        "mode": mode.value,
        "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
        "duration": duration,
    }
    if session_id is not None:
        payload["sessionId"] = session_id
    return payload


def _post(url: str, payload: dict[str, Any]) -> requests.Response:
    if not url.startswith(("http://", "https://")):
        raise WebhookError(f"unsupported webhook URL: {url!r}")
    return requests.post(
        url,
        json=payload,
        headers={"User-Agent": USER_AGENT},
        timeout=REQUEST_TIMEOUT,
    )


class WebhookDispatcher:
    """Sends enabled session events to the configured URL."""

    def __init__(
        self,
        settings: SettingsProvider,
        *,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._settings = settings
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="webhook",
        )

    def enabled_for(self, event: str) -> str | None:
        """The target URL if *event* should be sent, else ``None``."""
        if not bool_setting(self._settings, "integrations.webhook_enabled", False):
            return None
        events = self._settings.get("integrations.webhook_events") or ()
        if event not in events:
            return None
        return self._settings.get("integrations.webhook_url") or None

    def send(
        self,
        event: str,
        mode: Mode,
        duration: int,
        session_id: Any = None,
    ) -> Future | None:
        url = self.enabled_for(event)
        if url is None:
            return None
        payload = build_payload(event, mode, duration, session_id)
        return self._executor.submit(self._deliver, url, payload)

    def test_webhook(self, url: str) -> tuple[bool, str | None]:
        """POST a sample ``sessionEnd`` payload and report the outcome."""
        payload = build_payload(EVENT_SESSION_END, Mode.POMODORO, 25 * 60, "test-session")
        try:
            response = _post(url, payload)
        except (requests.RequestException, WebhookError) as error:
            return False, str(error)
        if response.ok:
            return True, None
        return False, f"HTTP {response.status_code}: {response.reason}"

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

    # ── internal ──────────────────────────────────────────────────────

    def _deliver(self, url: str, payload: dict[str, Any]) -> bool:
        try:
            response = _post(url, payload)
        except (requests.RequestException, WebhookError) as error:
            logger.warning("Webhook %s failed: %s", payload["event"], error)
            return False
        if not response.ok:
            logger.warning(
                "Webhook %s failed with status %s: %s",
                payload["event"],
                response.status_code,
                response.reason,
            )
            return False
        logger.info("Webhook sent for %s event", payload["event"])
        return True
