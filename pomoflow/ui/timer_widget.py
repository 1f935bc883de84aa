"""Main timer display widget.

Layout (top → bottom):
    - Mode tabs (Pomodoro / Short Break / Long Break)
    - Countdown label
    - Start-Pause and Reset buttons
    - Cycle counter and the current break suggestion
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
)

from ..timer.engine import TimerEngine
from ..timer.policy import Mode, Status
from ..timer.transitions import TimerState


MODE_LABELS: dict[Mode, str] = {
    Mode.POMODORO:    "Pomodoro",
    Mode.SHORT_BREAK: "Short Break",
    Mode.LONG_BREAK:  "Long Break",
}


def format_remaining(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


class TimerWidget(QWidget):
    """Countdown card bound to a ``TimerEngine``."""

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._refresh(engine.state)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── mode tabs ────────────────────────────────────────────────
        mode_row = QHBoxLayout()
        self._mode_buttons: dict[Mode, QPushButton] = {}
        for mode, label in MODE_LABELS.items():
            btn = QPushButton(label, card)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, m=mode: self._engine.switch_mode(m))
            mode_row.addWidget(btn)
            self._mode_buttons[mode] = btn
        layout.addLayout(mode_row)

        # ── countdown ────────────────────────────────────────────────
        self._time_label = QLabel(card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")
        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("secondaryButton")
        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._reset_btn)
        layout.addLayout(btn_row)

        # ── footer ───────────────────────────────────────────────────
        self._cycle_label = QLabel(card)
        self._cycle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._cycle_label)

        self._activity_label = QLabel(card)
        self._activity_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._activity_label.setWordWrap(True)
        layout.addWidget(self._activity_label)

    def _connect_signals(self) -> None:
        self._engine.state_changed.connect(self._refresh)
        self._start_pause_btn.clicked.connect(self.toggle)
        self._reset_btn.clicked.connect(self._engine.reset)

    # ── public ────────────────────────────────────────────────────────────

    def toggle(self) -> None:
        """Start when stopped or paused, pause when running."""
        if self._engine.is_running:
            self._engine.pause()
        else:
            self._engine.start()

    def set_break_activity(self, text: str) -> None:
        self._activity_label.setText(text)

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def start_pause_text(self) -> str:
        return self._start_pause_btn.text()

    # ── refresh ───────────────────────────────────────────────────────────

    def _refresh(self, state: TimerState) -> None:
        self._time_label.setText(format_remaining(state.time_remaining))
        for mode, btn in self._mode_buttons.items():
            btn.setChecked(mode is state.mode)
        if state.status is Status.RUNNING:
            self._start_pause_btn.setText("Pause")
        elif state.status is Status.PAUSED:
            self._start_pause_btn.setText("Resume")
        else:
            self._start_pause_btn.setText("Start")
        self._cycle_label.setText(f"#{state.pomodoros_completed_in_cycle + 1}")
        if not state.mode.is_break:
            self._activity_label.clear()
