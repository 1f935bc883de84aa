"""Tests for webhook payloads and delivery (network calls are patched)."""

from datetime import datetime, timezone

import pytest
import requests

from pomoflow import webhooks
from pomoflow.settings import DictSettings
from pomoflow.timer.policy import Mode
from pomoflow.webhooks import WebhookDispatcher, build_payload

URL = "https://hooks.example.com/pomodoro"


class FakeResponse:
    def __init__(self, status_code=200, reason="OK"):
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400


class FakePost:
    def __init__(self, response=None, error=None):
        self.calls = []
        self._response = response or FakeResponse()
        self._error = error

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self._error is not None:
            raise self._error
        return self._response


@pytest.fixture
def post(monkeypatch):
    fake = FakePost()
    monkeypatch.setattr(webhooks.requests, "post", fake)
    return fake


def enabled(events=("sessionStart", "sessionEnd", "breakStart"), url=URL):
    return DictSettings({"integrations": {
        "webhook_enabled": True,
        "webhook_url": url,
        "webhook_events": list(events),
    }})


class TestPayload:

    def test_fields(self):
        ts = datetime(2024, 3, 4, 9, 25, tzinfo=timezone.utc)
        assert build_payload("sessionEnd", Mode.POMODORO, 1500, 12, timestamp=ts) == {
            "event": "sessionEnd",
            "mode": "pomodoro",
            "timestamp": "2024-03-04T09:25:00+00:00",
            "duration": 1500,
            "sessionId": 12,
        }

    def test_session_id_omitted_when_unknown(self):
        assert "sessionId" not in build_payload("breakStart", Mode.SHORT_BREAK, 300)


class TestEnabledFor:

    def test_disabled_by_default(self):
        assert WebhookDispatcher(DictSettings()).enabled_for("sessionEnd") is None

    def test_event_not_selected(self):
        d = WebhookDispatcher(enabled(events=["sessionEnd"]))
        assert d.enabled_for("sessionStart") is None
        assert d.enabled_for("sessionEnd") == URL

    def test_missing_url(self):
        assert WebhookDispatcher(enabled(url="")).enabled_for("sessionEnd") is None


class TestSend:

    def test_posts_json_in_background(self, post):
        d = WebhookDispatcher(enabled())
        future = d.send("sessionEnd", Mode.POMODORO, 1500, 3)
        assert future.result(timeout=5) is True
        d.shutdown()

        (url, kwargs), = post.calls
        assert url == URL
        assert kwargs["json"]["event"] == "sessionEnd"
        assert kwargs["json"]["sessionId"] == 3
        assert kwargs["headers"]["User-Agent"] == webhooks.USER_AGENT
        assert kwargs["timeout"] == webhooks.REQUEST_TIMEOUT

    def test_not_sent_when_disabled(self, post):
        assert WebhookDispatcher(DictSettings()).send("sessionEnd", Mode.POMODORO, 1) is None
        assert post.calls == []

    def test_network_error_is_logged_not_raised(self, monkeypatch, caplog):
        monkeypatch.setattr(
            webhooks.requests, "post",
            FakePost(error=requests.ConnectionError("refused")),
        )
        d = WebhookDispatcher(enabled())
        assert d.send("sessionStart", Mode.POMODORO, 1500).result(timeout=5) is False
        d.shutdown()
        assert "refused" in caplog.text

    def test_http_error_status(self, monkeypatch):
        monkeypatch.setattr(
            webhooks.requests, "post", FakePost(FakeResponse(500, "Server Error")),
        )
        d = WebhookDispatcher(enabled())
        assert d.send("breakStart", Mode.SHORT_BREAK, 300).result(timeout=5) is False
        d.shutdown()

    def test_non_http_url_is_rejected(self, post):
        d = WebhookDispatcher(enabled(url="ftp://example.com/hook"))
        assert d.send("sessionEnd", Mode.POMODORO, 1500).result(timeout=5) is False
        d.shutdown()
        assert post.calls == []


class TestTestWebhook:

    def test_success(self, post):
        assert WebhookDispatcher(DictSettings()).test_webhook(URL) == (True, None)
        assert post.calls[0][1]["json"]["sessionId"] == "test-session"

    def test_http_failure(self, monkeypatch):
        monkeypatch.setattr(
            webhooks.requests, "post", FakePost(FakeResponse(404, "Not Found")),
        )
        ok, error = WebhookDispatcher(DictSettings()).test_webhook(URL)
        assert not ok
        assert error == "HTTP 404: Not Found"

    def test_connection_failure(self, monkeypatch):
        monkeypatch.setattr(
            webhooks.requests, "post", FakePost(error=requests.Timeout("slow")),
        )
        assert WebhookDispatcher(DictSettings()).test_webhook(URL) == (False, "slow")
