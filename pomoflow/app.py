"""Main application window for Pomoflow."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import Qt, QEvent
from PyQt6.QtGui import QIcon, QImage, QPainter, QColor, QPen, QPixmap
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QStatusBar,
    QSystemTrayIcon, QMenu,
)

from .audio.sounds import AudioNotifier
from .break_activities import BreakActivitySuggester
from .database.state_store import TimerStateStore
from .effects import EffectExecutor
from .goals import GoalsTracker
from .history import SessionRecorder
from .notifications import TrayNotifier
from .settings import Settings, load_settings
from .tasks import TaskProgress
from .timer.engine import TimerEngine
from .timer.policy import Mode, Status
from .timer.scheduler import QtTickScheduler
from .timer.transitions import TimerState
from .ui.timer_widget import MODE_LABELS, TimerWidget, format_remaining
from .webhooks import WebhookDispatcher

logger = logging.getLogger(__name__)


# ── tray‑icon image generation ────────────────────────────────────────────


def _make_tray_icon(state: TimerState) -> QIcon:
    """Generate a 32×32 monochrome template icon for the menu bar.

    - STOPPED:     thin circle outline
    - RUNNING:     filled circle (focus) or outline with dot (break)
    - PAUSED:      two vertical pause bars
    """
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)
    p.setPen(Qt.PenStyle.NoPen)
    p.setBrush(colour)

    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if state.status is Status.PAUSED:
        bar_w, bar_h = 8, 28
        gap = 6
        y = cy - bar_h // 2
        p.drawRoundedRect(cx - gap - bar_w, y, bar_w, bar_h, 3, 3)
        p.drawRoundedRect(cx + gap, y, bar_w, bar_h, 3, 3)
    elif state.status is Status.RUNNING and not state.mode.is_break:
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    else:
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        if state.status is Status.RUNNING:
            p.setPen(Qt.PenStyle.NoPen)
            p.setBrush(colour)
            dot_r = 6
            p.drawEllipse(cx - dot_r, cy - dot_r, dot_r * 2, dot_r * 2)

    p.end()
    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class PomoflowApp(QMainWindow):
    """Main application window.

    Builds every collaborator, hands them to the ``EffectExecutor`` and
    wires application visibility into the timer engine.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Pomoflow")
        self.setMinimumSize(420, 360)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()

        # ── tray icon ─────────────────────────────────────────────────
        self._tray_icon = QSystemTrayIcon(self)

        # ── collaborators ─────────────────────────────────────────────
        self._audio = AudioNotifier(parent=self, sounds_dir=sounds_dir)
        self._notifier = TrayNotifier(
            self._tray_icon,
            granted=QSystemTrayIcon.isSystemTrayAvailable(),
        )
        self._tasks = TaskProgress()
        self._break_activities = BreakActivitySuggester(self._settings)
        self._webhooks = WebhookDispatcher(self._settings)
        self._executor = EffectExecutor(
            self._settings,
            audio=self._audio,
            notifier=self._notifier,
            recorder=SessionRecorder(),
            webhooks=self._webhooks,
            goals=GoalsTracker(self._settings),
            break_activities=self._break_activities,
            tasks=self._tasks,
        )

        # ── engine ────────────────────────────────────────────────────
        self._timer_engine = TimerEngine(
            self._settings,
            scheduler=QtTickScheduler(self),
            executor=self._executor,
            store=TimerStateStore(),
            parent=self,
        )

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)
        self._timer_widget = TimerWidget(self._timer_engine, central)
        layout.addWidget(self._timer_widget)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        self._tray_icon.setIcon(_make_tray_icon(self._timer_engine.state))
        self._build_tray_menu()
        self._tray_icon.show()

        # ── wire signals ──────────────────────────────────────────────
        self._timer_engine.state_changed.connect(self._on_state_changed)
        app = QApplication.instance()
        if app is not None:
            app.applicationStateChanged.connect(self._on_application_state_changed)

        self._on_state_changed(self._timer_engine.state)

    @property
    def engine(self) -> TimerEngine:
        return self._timer_engine

    # ══════════════════════════════════════════════════════════════════
    #  TRAY
    # ══════════════════════════════════════════════════════════════════

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)
        self._tray_start_action = menu.addAction("Start")
        self._tray_start_action.triggered.connect(self._timer_widget.toggle)
        menu.addAction("Reset").triggered.connect(self._timer_engine.reset)
        menu.addSeparator()
        menu.addAction("Quit").triggered.connect(self.close)
        self._tray_icon.setContextMenu(menu)

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        label = MODE_LABELS[state.mode]
        remaining = format_remaining(state.time_remaining)
        self._tray_icon.setIcon(_make_tray_icon(state))
        self._tray_icon.setToolTip(f"Pomoflow — {label} {remaining}")
        self.setWindowTitle(f"{remaining} — {label}")

        messages = {
            Status.RUNNING: "Focusing..." if state.mode is Mode.POMODORO else "On a break",
            Status.PAUSED: "Paused",
            Status.STOPPED: "Ready",
        }
        self._status_bar.showMessage(messages[state.status])
        self._tray_start_action.setText(
            "Pause" if state.status is Status.RUNNING else "Start"
        )

        activity = self._break_activities.current
        if state.mode.is_break and activity is not None:
            self._timer_widget.set_break_activity(
                f"{activity.title} — {activity.description}"
            )

    # ══════════════════════════════════════════════════════════════════
    #  VISIBILITY
    # ══════════════════════════════════════════════════════════════════

    def _on_application_state_changed(self, state: Qt.ApplicationState) -> None:
        if state in (
            Qt.ApplicationState.ApplicationHidden,
            Qt.ApplicationState.ApplicationSuspended,
        ):
            self._timer_engine.visibility_lost()
        elif state == Qt.ApplicationState.ApplicationActive:
            self._timer_engine.visibility_restored()

    def changeEvent(self, event) -> None:  # type: ignore[override]
        if event.type() == QEvent.Type.WindowStateChange:
            if self.isMinimized():
                self._timer_engine.visibility_lost()
            else:
                self._timer_engine.visibility_restored()
        super().changeEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._timer_engine.reset()
        self._webhooks.shutdown()
        self._tray_icon.hide()
        event.accept()
        app = QApplication.instance()
        if app is not None:
            app.quit()
