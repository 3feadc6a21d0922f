"""Settings page: appearance, bridge and window preferences.

Changes are saved as soon as they are made; there is no OK/Cancel.
"""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from momentum.core.bridge_binary import find_bridge, validate_bridge
from momentum.core.preferences import MAX_STOP_GRACE_MS, MIN_STOP_GRACE_MS, PreferencesManager
from momentum.ui.theme import theme_manager
from momentum.ui.tokens import spacing, typography
from momentum.ui.widgets.page_header import PageHeader


class SettingsPage(QWidget):
    """Preferences form backed by PreferencesManager.

    Signals:
        back_clicked: Back pressed.
        settings_changed: A preference was saved.
    """

    back_clicked = Signal()
    settings_changed = Signal()

    def __init__(self, prefs: PreferencesManager, parent: QWidget | None = None) -> None:
        """Initialize the page.

        Args:
            prefs: Preferences read on load and written on every change.
            parent: Parent widget.
        """
        super().__init__(parent)
        self._prefs = prefs
        self._loading = False
        self._setup_ui()
        self.load()
        theme_manager.theme_changed.connect(self._apply_style)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(spacing.xl, spacing.md, spacing.xl, spacing.xl)
        layout.setSpacing(spacing.md)

        header = PageHeader("Settings")
        header.back_clicked.connect(self.back_clicked.emit)
        layout.addWidget(header)

        form = QFormLayout()
        form.setSpacing(spacing.md)

        self._theme_combo = QComboBox()
        self._theme_combo.addItem("System", "system")
        self._theme_combo.addItem("Dark", "dark")
        self._theme_combo.addItem("Light", "light")
        self._theme_combo.currentIndexChanged.connect(self._on_theme_changed)
        form.addRow("Theme:", self._theme_combo)

        self._grace_spin = QSpinBox()
        self._grace_spin.setRange(MIN_STOP_GRACE_MS, MAX_STOP_GRACE_MS)
        self._grace_spin.setSingleStep(500)
        self._grace_spin.setSuffix(" ms")
        self._grace_spin.valueChanged.connect(self._on_grace_changed)
        form.addRow("Stop timeout:", self._grace_spin)

        path_row = QHBoxLayout()
        self._binary_input = QLineEdit()
        self._binary_input.setPlaceholderText("Auto-detect")
        self._binary_input.editingFinished.connect(self._on_binary_changed)
        path_row.addWidget(self._binary_input)
        browse_btn = QPushButton("Browse...")
        browse_btn.clicked.connect(self._browse_binary)
        path_row.addWidget(browse_btn)
        check_btn = QPushButton("Check")
        check_btn.clicked.connect(self.check_binary)
        path_row.addWidget(check_btn)
        form.addRow("Bridge binary:", path_row)

        self._binary_status = QLabel()
        self._binary_status.setWordWrap(True)
        form.addRow("", self._binary_status)

        self._tray_check = QCheckBox("Keep running in the tray when the window is closed")
        self._tray_check.toggled.connect(self._on_tray_toggled)
        form.addRow("", self._tray_check)

        layout.addLayout(form)
        layout.addStretch()
        self._apply_style()

    def load(self) -> None:
        """Load current preferences into the widgets."""
        self._loading = True
        try:
            idx = self._theme_combo.findData(self._prefs.get_theme())
            self._theme_combo.setCurrentIndex(max(idx, 0))
            self._grace_spin.setValue(self._prefs.get_stop_grace_ms())
            self._binary_input.setText(self._prefs.get_bridge_binary_path())
            self._tray_check.setChecked(self._prefs.get_close_to_tray())
        finally:
            self._loading = False
        self._binary_status.clear()

    def check_binary(self) -> bool:
        """Locate and validate the bridge executable, showing the result.

        Returns:
            True if a valid executable was found.
        """
        binary = find_bridge(self._binary_input.text().strip() or None)
        if binary is None:
            self._show_binary_status("Bridge executable not found", ok=False)
            return False
        ok, version_or_error = validate_bridge(binary)
        if ok:
            self._show_binary_status(f"Found version {version_or_error} at {binary}", ok=True)
        else:
            self._show_binary_status(version_or_error, ok=False)
        return ok

    def _saved(self) -> None:
        self._prefs.sync()
        self.settings_changed.emit()

    def _on_theme_changed(self) -> None:
        if self._loading:
            return
        theme = self._theme_combo.currentData()
        if isinstance(theme, str):
            self._prefs.set_theme(theme)
            theme_manager.apply_preference(theme)
            self._saved()

    def _on_grace_changed(self, value: int) -> None:
        if self._loading:
            return
        self._prefs.set_stop_grace_ms(value)
        self._saved()

    def _on_binary_changed(self) -> None:
        if self._loading:
            return
        path = self._binary_input.text().strip()
        if path == self._prefs.get_bridge_binary_path():
            return
        self._prefs.set_bridge_binary_path(path)
        self._saved()

    def _on_tray_toggled(self, checked: bool) -> None:
        if self._loading:
            return
        self._prefs.set_close_to_tray(checked)
        self._saved()

    def _browse_binary(self) -> None:
        """Open a file dialog to select the bridge executable."""
        start = self._binary_input.text() or str(Path.home())
        path, _ = QFileDialog.getOpenFileName(self, "Select bridge executable", start)
        if path:
            self._binary_input.setText(path)
            self._on_binary_changed()

    def _show_binary_status(self, text: str, *, ok: bool) -> None:
        p = theme_manager.palette
        self._binary_status.setText(text)
        self._binary_status.setStyleSheet(
            f"color: {p.success if ok else p.error}; font-size: {typography.small}pt;"
        )

    def _apply_style(self) -> None:
        p = theme_manager.palette
        self._tray_check.setStyleSheet(f"color: {p.text};")
