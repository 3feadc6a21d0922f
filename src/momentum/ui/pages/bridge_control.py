"""Bridge control page: start, watch the live log, copy the URL, stop."""

from __future__ import annotations

from collections.abc import Iterable

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from momentum.core.bridge_controller import BridgeState, LogEntry
from momentum.ui.theme import theme_manager
from momentum.ui.tokens import sizing, spacing, typography
from momentum.ui.widgets.page_header import PageHeader

COPIED_FEEDBACK_MS = 2000

# (text, palette attribute) per state
_STATUS_TEXT: dict[BridgeState, tuple[str, str]] = {
    BridgeState.NOT_STARTED: ("Not running", "text_secondary"),
    BridgeState.STARTING: ("Starting...", "warning"),
    BridgeState.RUNNING: ("🚀 Bridge Running", "success"),
    BridgeState.STOPPING: ("Stopping...", "warning"),
}


class BridgeControlPage(QWidget):
    """Passive view of the bridge controller.

    The main window pushes controller state in and forwards the button
    signals back to the controller.

    Signals:
        back_clicked: Back pressed.
        start_clicked: "Start Bridge" pressed.
        stop_clicked: "Stop Bridge" pressed.
        copy_url_clicked: The URL badge was pressed.
    """

    back_clicked = Signal()
    start_clicked = Signal()
    stop_clicked = Signal()
    copy_url_clicked = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._state = BridgeState.NOT_STARTED
        self._log_count = 0
        self._url = ""
        self._setup_ui()
        self._apply_style()
        self.set_state(BridgeState.NOT_STARTED)
        theme_manager.theme_changed.connect(self._apply_style)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(spacing.xl, spacing.md, spacing.xl, spacing.xl)
        layout.setSpacing(spacing.md)

        self._header = PageHeader("Bridge")
        self._header.back_clicked.connect(self.back_clicked.emit)
        layout.addWidget(self._header)

        # Start prompt (not started only)
        self._prompt = QFrame()
        prompt_layout = QVBoxLayout(self._prompt)
        prompt_layout.setSpacing(spacing.sm)
        self._prompt_title = QLabel("Ready to Start")
        self._prompt_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        prompt_layout.addWidget(self._prompt_title)
        self._prompt_text = QLabel(
            "Click the button below to start the bridge and begin receiving notifications."
        )
        self._prompt_text.setWordWrap(True)
        self._prompt_text.setAlignment(Qt.AlignmentFlag.AlignCenter)
        prompt_layout.addWidget(self._prompt_text)
        layout.addWidget(self._prompt)

        status_row = QHBoxLayout()
        self._status_dot = QLabel("●")
        status_row.addWidget(self._status_dot)
        self._status_label = QLabel()
        status_row.addWidget(self._status_label)
        status_row.addStretch()
        layout.addLayout(status_row)

        self._url_btn = QPushButton()
        self._url_btn.setToolTip("Copy public URL")
        self._url_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self._url_btn.clicked.connect(self.copy_url_clicked.emit)
        self._url_btn.setVisible(False)
        layout.addWidget(self._url_btn)

        # Live log console
        self._console = QFrame()
        console_layout = QVBoxLayout(self._console)
        console_layout.setContentsMargins(0, 0, 0, 0)
        console_layout.setSpacing(spacing.xs)
        console_header = QHBoxLayout()
        self._console_title = QLabel("Live Logs")
        console_header.addWidget(self._console_title)
        console_header.addStretch()
        self._count_label = QLabel("0 entries")
        console_header.addWidget(self._count_label)
        console_layout.addLayout(console_header)
        self._log_view = QPlainTextEdit()
        self._log_view.setReadOnly(True)
        self._log_view.setMinimumHeight(sizing.console_min_height)
        console_layout.addWidget(self._log_view)
        layout.addWidget(self._console, stretch=1)

        self._start_btn = QPushButton("Start Bridge")
        self._start_btn.setProperty("primary", True)
        self._start_btn.clicked.connect(self.start_clicked.emit)
        layout.addWidget(self._start_btn)

        self._stop_btn = QPushButton("■  Stop Bridge")
        self._stop_btn.clicked.connect(self.stop_clicked.emit)
        layout.addWidget(self._stop_btn)

    @property
    def state(self) -> BridgeState:
        """Return the state currently displayed."""
        return self._state

    @property
    def start_button(self) -> QPushButton:
        """Return the "Start Bridge" button."""
        return self._start_btn

    @property
    def stop_button(self) -> QPushButton:
        """Return the "Stop Bridge" button."""
        return self._stop_btn

    @property
    def url_button(self) -> QPushButton:
        """Return the public URL badge."""
        return self._url_btn

    @property
    def status_text(self) -> str:
        """Return the status line text."""
        return self._status_label.text()

    @property
    def log_count(self) -> int:
        """Return the number of log lines shown."""
        return self._log_count

    def log_text(self) -> str:
        """Return the console contents."""
        return self._log_view.toPlainText()

    def set_state(self, state: BridgeState) -> None:
        """Show ``state``: which buttons are available and the status line."""
        self._state = BridgeState(state)
        not_started = self._state == BridgeState.NOT_STARTED

        self._prompt.setVisible(not_started)
        self._start_btn.setVisible(not_started)
        self._start_btn.setEnabled(not_started)
        self._stop_btn.setVisible(not not_started)
        self._stop_btn.setEnabled(self._state == BridgeState.RUNNING)
        self._stop_btn.setText(
            "Stopping..." if self._state == BridgeState.STOPPING else "■  Stop Bridge"
        )
        self._update_console_visibility()
        self._update_status()

    def set_logs(self, entries: Iterable[LogEntry]) -> None:
        """Replace the console contents."""
        self._log_view.clear()
        self._log_count = 0
        self._count_label.setText("0 entries")
        for entry in entries:
            self._write_entry(entry)
        self._update_console_visibility()

    def append_log(self, entry: LogEntry) -> None:
        """Append one line and scroll to it."""
        self._write_entry(entry)
        self._update_console_visibility()

    def set_public_url(self, url: str) -> None:
        """Show the URL badge, or hide it when ``url`` is empty."""
        self._url = url
        self._url_btn.setText(f"🔗 {url}  ⧉" if url else "")
        self._url_btn.setVisible(bool(url))

    def show_copied(self) -> None:
        """Briefly confirm that the URL was copied."""
        if not self._url:
            return
        self._url_btn.setText(f"🔗 {self._url}  ✓")
        QTimer.singleShot(COPIED_FEEDBACK_MS, self, self._restore_url_badge)

    def _restore_url_badge(self) -> None:
        self.set_public_url(self._url)

    def _write_entry(self, entry: LogEntry) -> None:
        self._log_view.appendPlainText(f"{entry.time_label}  {entry.message}")
        self._log_count += 1
        self._count_label.setText(f"{self._log_count} entries")

    def _update_console_visibility(self) -> None:
        # Logs of a failed start stay visible on the start prompt
        self._console.setVisible(self._state != BridgeState.NOT_STARTED or self._log_count > 0)

    def _update_status(self) -> None:
        p = theme_manager.palette
        text, color_attr = _STATUS_TEXT[self._state]
        color = getattr(p, color_attr)
        self._status_label.setText(text)
        self._status_label.setStyleSheet(f"color: {color}; font-weight: bold;")
        self._status_dot.setStyleSheet(f"color: {color}; font-size: {typography.body}pt;")

    def _apply_style(self) -> None:
        p = theme_manager.palette
        self._prompt_title.setStyleSheet(
            f"font-size: {typography.title}pt; font-weight: bold; color: {p.text};"
        )
        self._prompt_text.setStyleSheet(f"color: {p.text_secondary};")
        self._url_btn.setStyleSheet(
            f"QPushButton {{ background-color: {p.surface}; color: {p.accent};"
            f" border: 1px solid {p.accent}; border-radius: {sizing.border_radius_md}px;"
            f" font-family: {typography.mono_family}; font-size: {typography.small}pt;"
            f" text-align: left; padding: {spacing.xs}px {spacing.sm}px; }}"
        )
        self._console_title.setStyleSheet(f"font-weight: bold; color: {p.text};")
        self._count_label.setStyleSheet(
            f"color: {p.text_secondary}; font-size: {typography.caption}pt;"
        )
        self._log_view.setStyleSheet(
            f"QPlainTextEdit {{ background-color: {p.console}; color: {p.text};"
            f" border: 1px solid {p.border}; border-radius: {sizing.border_radius_md}px;"
            f" font-family: {typography.mono_family}; font-size: {typography.small}pt; }}"
        )
        self._stop_btn.setStyleSheet(
            f"QPushButton {{ color: {p.error}; border: 1px solid {p.error}; }}"
            f" QPushButton:disabled {{ color: {p.text_disabled}; border-color: {p.border}; }}"
        )
        self._update_status()
