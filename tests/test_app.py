"""Tests for the desktop shell: timer widget, main window and visibility wiring."""

import pytest
from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QSystemTrayIcon

from pomoflow.app import PomoflowApp, _make_tray_icon
from pomoflow.notifications import TrayNotifier
from pomoflow.settings import Settings
from pomoflow.timer.policy import Mode, Status
from pomoflow.timer.transitions import TimerState
from pomoflow.ui.timer_widget import TimerWidget, format_remaining


@pytest.mark.parametrize("seconds,text", [
    (1500, "25:00"), (61, "01:01"), (0, "00:00"), (-3, "00:00"),
])
def test_format_remaining(seconds, text):
    assert format_remaining(seconds) == text


class TestTimerWidget:

    def test_follows_engine(self, engine, scheduler):
        w = TimerWidget(engine)
        assert w.time_text == "01:00"
        assert w.start_pause_text == "Start"

        w.toggle()
        scheduler.advance(3)
        assert w.time_text == "00:57"
        assert w.start_pause_text == "Pause"

        w.toggle()
        assert w.start_pause_text == "Resume"
        assert engine.status is Status.PAUSED


@pytest.mark.parametrize("status", list(Status))
def test_tray_icon_for_every_state(qapp, status):
    icon = _make_tray_icon(TimerState(Mode.POMODORO, status, 60))
    assert not icon.isNull()


@pytest.fixture
def window(qapp, tmp_path):
    settings = Settings()
    settings.sound.muted = True
    win = PomoflowApp(settings, sounds_dir=tmp_path / "sounds")
    yield win
    win.engine.reset()
    win.deleteLater()


class TestPomoflowApp:

    def test_starts_stopped_in_pomodoro(self, window):
        assert window.engine.state == TimerState(Mode.POMODORO, Status.STOPPED, 25 * 60, 0)
        assert "25:00" in window.windowTitle()

    def test_hidden_application_auto_pauses(self, window):
        window.engine.start()
        window._on_application_state_changed(Qt.ApplicationState.ApplicationHidden)
        assert window.engine.status is Status.PAUSED
        assert window.engine.auto_paused

        window._on_application_state_changed(Qt.ApplicationState.ApplicationActive)
        assert window.engine.status is Status.RUNNING

    def test_activation_without_auto_pause_does_nothing(self, window):
        window._on_application_state_changed(Qt.ApplicationState.ApplicationActive)
        assert window.engine.status is Status.STOPPED

    def test_switch_mode_updates_title(self, window):
        window.engine.switch_mode(Mode.LONG_BREAK)
        assert window.windowTitle().startswith("15:00")


class TestTrayNotifier:

    class FakeTray:
        def __init__(self):
            self.messages = []

        def showMessage(self, title, body):
            self.messages.append((title, body))

    def test_not_granted_shows_nothing(self):
        tray = self.FakeTray()
        TrayNotifier(tray, granted=False).show("t", "b")
        assert tray.messages == []

    def test_granted(self, qapp):
        if not QSystemTrayIcon.supportsMessages():
            pytest.skip("platform has no tray messages")
        tray = self.FakeTray()
        TrayNotifier(tray).show("Pomodoro complete!", "Time for a short break.")
        assert tray.messages == [("Pomodoro complete!", "Time for a short break.")]
