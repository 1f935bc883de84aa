"""System notifications via the tray icon."""

from __future__ import annotations

from PyQt6.QtWidgets import QSystemTrayIcon


class TrayNotifier:
    """Shows a tray balloon when notifications have been granted."""

    def __init__(self, tray_icon: QSystemTrayIcon, *, granted: bool = True) -> None:
        self._tray_icon = tray_icon
        self.granted = granted

    def show(self, title: str, body: str) -> None:
        if not self.granted:
            return
        if not QSystemTrayIcon.supportsMessages():
            return
        self._tray_icon.showMessage(title, body)
