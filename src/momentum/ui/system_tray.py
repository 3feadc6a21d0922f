"""System tray icon with show/hide, bridge status and start/stop.

Usage:
    from momentum.ui.system_tray import SystemTrayManager

    tray = SystemTrayManager(window, controller)
    tray.show()
"""

from __future__ import annotations

import contextlib
import logging
from typing import cast

from PySide6.QtCore import QObject, Qt
from PySide6.QtGui import QAction, QBrush, QColor, QIcon, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QApplication, QMainWindow, QMenu, QSystemTrayIcon

from momentum.core.bridge_controller import BridgeController, BridgeState
from momentum.ui.theme import theme_manager

logger = logging.getLogger(__name__)

_ICON_SIZE = 64

_STATUS_LABELS = {
    BridgeState.NOT_STARTED: "Bridge: Stopped",
    BridgeState.STARTING: "Bridge: Starting...",
    BridgeState.RUNNING: "Bridge: Running",
    BridgeState.STOPPING: "Bridge: Stopping...",
}


class SystemTrayManager(QObject):
    """Manages the system tray icon and its context menu.

    Features:
    - Show/Hide window toggle (double-click or menu)
    - Bridge status line and Start/Stop action
    - Quit action (stops a running bridge first)

    The menu is rebuilt whenever the bridge state changes.

    Example:
        tray = SystemTrayManager(window, controller)
        tray.show()
    """

    def __init__(
        self,
        window: QMainWindow,
        controller: BridgeController,
        icon: QIcon | None = None,
    ) -> None:
        """Initialize the system tray manager.

        Args:
            window: The main application window.
            controller: Bridge controller shown and driven from the menu.
            icon: Optional icon for the tray. Falls back to the app icon.
        """
        super().__init__()
        self._window = window
        self._controller = controller

        if icon is None:
            raw_app = QApplication.instance()
            icon = cast(QApplication, raw_app).windowIcon() if raw_app is not None else QIcon()
        self._base_icon = icon

        self._tray = QSystemTrayIcon(self._build_status_icon())
        self._tray.activated.connect(self._on_activated)

        self._menu = QMenu()
        self._tray.setContextMenu(self._menu)
        self._rebuild_menu()
        self._update_tooltip()

        self._controller.state_changed.connect(self._on_state_changed)

    @property
    def available(self) -> bool:
        """Return True if system tray is available on this platform."""
        return QSystemTrayIcon.isSystemTrayAvailable()

    @property
    def menu(self) -> QMenu:
        """Return the context menu."""
        return self._menu

    def show(self) -> None:
        """Show the tray icon."""
        if self.available:
            self._tray.show()
            logger.info("System tray icon shown")
        else:
            logger.warning("System tray not available on this platform")

    def hide(self) -> None:
        """Hide the tray icon."""
        self._tray.hide()

    def _rebuild_menu(self) -> None:
        """Rebuild the tray context menu from current state."""
        self._menu.clear()

        toggle_action = QAction(
            "Hide Momentum" if self._window.isVisible() else "Show Momentum",
            self._menu,
        )
        toggle_action.triggered.connect(self._toggle_window)
        self._menu.addAction(toggle_action)

        self._menu.addSeparator()

        state = self._controller.state
        status_action = QAction(_STATUS_LABELS[state], self._menu)
        status_action.setEnabled(False)
        self._menu.addAction(status_action)

        if state == BridgeState.RUNNING:
            stop_action = QAction("Stop Bridge", self._menu)
            stop_action.triggered.connect(self._on_stop_bridge)
            self._menu.addAction(stop_action)
        elif state == BridgeState.NOT_STARTED:
            start_action = QAction("Start Bridge", self._menu)
            start_action.triggered.connect(self._on_start_bridge)
            self._menu.addAction(start_action)

        self._menu.addSeparator()
        quit_action = QAction("Quit", self._menu)
        quit_action.triggered.connect(self._on_quit)
        self._menu.addAction(quit_action)

    def _on_state_changed(self, _state: str) -> None:
        self._rebuild_menu()
        self._tray.setIcon(self._build_status_icon())
        self._update_tooltip()

    def _update_tooltip(self) -> None:
        running = self._controller.state == BridgeState.RUNNING
        self._tray.setToolTip("Momentum: bridge running" if running else "Momentum: bridge stopped")

    def _on_start_bridge(self) -> None:
        logger.info("Starting bridge from tray")
        self._controller.start()

    def _on_stop_bridge(self) -> None:
        logger.info("Stopping bridge from tray")
        self._controller.stop()

    def _build_status_icon(self) -> QIcon:
        """Build a tray icon with a bridge status dot overlay.

        Returns:
            QIcon with a green (running) or grey (stopped) dot at bottom-right.
        """
        p = theme_manager.palette
        pixmap = self._base_icon.pixmap(_ICON_SIZE, _ICON_SIZE)
        if pixmap.isNull():
            # No app icon: plain accent disc
            pixmap = QPixmap(_ICON_SIZE, _ICON_SIZE)
            pixmap.fill(Qt.GlobalColor.transparent)
            painter = QPainter(pixmap)
            try:
                painter.setRenderHint(QPainter.RenderHint.Antialiasing)
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QBrush(QColor(p.accent)))
                painter.drawEllipse(4, 4, _ICON_SIZE - 8, _ICON_SIZE - 8)
            finally:
                painter.end()

        painter = QPainter(pixmap)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            dot_radius = 8
            dot_x = _ICON_SIZE - dot_radius * 2 - 2
            dot_y = _ICON_SIZE - dot_radius * 2 - 2
            running = self._controller.state == BridgeState.RUNNING
            color = QColor(p.success) if running else QColor(p.text_disabled)
            painter.setPen(QPen(QColor(p.background), 2))
            painter.setBrush(QBrush(color))
            painter.drawEllipse(dot_x, dot_y, dot_radius * 2, dot_radius * 2)
        finally:
            painter.end()

        return QIcon(pixmap)

    def _toggle_window(self) -> None:
        """Toggle main window visibility."""
        if self._window.isVisible():
            self._window.hide()
        else:
            self._window.show()
            self._window.raise_()
            self._window.activateWindow()
        self._rebuild_menu()

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        """Handle tray icon activation (click/double-click).

        Args:
            reason: The activation reason.
        """
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self._toggle_window()

    def cleanup(self) -> None:
        """Disconnect from the controller and release the menu.

        Must be called before app.quit() or during aboutToQuit handling.
        """
        with contextlib.suppress(RuntimeError):
            self._controller.state_changed.disconnect(self._on_state_changed)
        self._menu.clear()

    def _on_quit(self) -> None:
        """Stop a running bridge, then quit the application.

        The application entry point terminates the bridge process
        synchronously once the event loop has returned.
        """
        if self._controller.is_running:
            logger.info("Stopping bridge before quit")
            self._controller.stop()

        self.cleanup()

        app = QApplication.instance()
        if app:
            app.quit()
