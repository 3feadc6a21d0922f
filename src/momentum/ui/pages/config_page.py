"""Credentials form for the selected channel plus the shared ngrok token."""

from __future__ import annotations

from collections.abc import Mapping

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QFormLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget

from momentum.core.config_store import is_valid
from momentum.models.channel import ChannelInfo, ChannelKind
from momentum.ui.theme import theme_manager
from momentum.ui.tokens import spacing, typography
from momentum.ui.widgets.page_header import PageHeader

_NGROK_HINT = "Required for remote access • Get from ngrok.com"


class ConfigPage(QWidget):
    """Config form.

    "Complete Setup" is enabled only while the ngrok token and every
    required channel field are non-blank. Save errors are shown inline
    and the entered values are kept.

    Signals:
        back_clicked: Back pressed.
        submitted: "Complete Setup" pressed (fields dict, ngrok token).
    """

    back_clicked = Signal()
    submitted = Signal(dict, str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._kind: ChannelKind | None = None
        self._inputs: dict[str, QLineEdit] = {}
        self._hints: list[QLabel] = []
        self._setup_ui()
        self._apply_style()
        theme_manager.theme_changed.connect(self._apply_style)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(spacing.xl, spacing.md, spacing.xl, spacing.xl)
        layout.setSpacing(spacing.md)

        self._header = PageHeader(
            "Configure",
            subtitle="Enter your credentials to enable notifications",
            step="Step 3 of 3",
        )
        self._header.back_clicked.connect(self.back_clicked.emit)
        layout.addWidget(self._header)

        self._ngrok_input = QLineEdit()
        self._ngrok_input.setPlaceholderText("Your ngrok authtoken")
        self._ngrok_input.setEchoMode(QLineEdit.EchoMode.Password)
        self._ngrok_input.textChanged.connect(self._on_changed)
        ngrok_form = QFormLayout()
        ngrok_form.setSpacing(spacing.xs)
        ngrok_form.addRow("Ngrok Auth Token", self._ngrok_input)
        self._ngrok_hint = QLabel(_NGROK_HINT)
        ngrok_form.addRow("", self._ngrok_hint)
        layout.addLayout(ngrok_form)

        self._fields_form = QFormLayout()
        self._fields_form.setSpacing(spacing.xs)
        layout.addLayout(self._fields_form)

        self._error_label = QLabel()
        self._error_label.setWordWrap(True)
        self._error_label.setVisible(False)
        layout.addWidget(self._error_label)

        self._submit_btn = QPushButton("Complete Setup")
        self._submit_btn.setProperty("primary", True)
        self._submit_btn.setEnabled(False)
        self._submit_btn.clicked.connect(self._on_submit)
        layout.addWidget(self._submit_btn)

        layout.addStretch()

    @property
    def channel(self) -> ChannelKind | None:
        """Return the channel the form was loaded for."""
        return self._kind

    @property
    def submit_button(self) -> QPushButton:
        """Return the "Complete Setup" button."""
        return self._submit_btn

    @property
    def ngrok_input(self) -> QLineEdit:
        """Return the ngrok token input."""
        return self._ngrok_input

    @property
    def error_text(self) -> str:
        """Return the inline error ("" if none is shown)."""
        return self._error_label.text() if self._error_label.isVisibleTo(self) else ""

    def field_input(self, key: str) -> QLineEdit:
        """Return the input for channel field ``key``.

        Raises:
            KeyError: If the loaded channel has no such field.
        """
        return self._inputs[key]

    def load(
        self,
        info: ChannelInfo,
        fields: Mapping[str, str],
        ngrok_token: str,
        editing_recent: bool = False,
    ) -> None:
        """Rebuild the form for ``info`` and fill it.

        Args:
            info: Channel catalogue entry (labels, placeholders, secrets).
            fields: Stored values to pre-populate, keyed by JSON key.
            ngrok_token: Stored ngrok token.
            editing_recent: True when resuming a recent channel (no step caption).
        """
        self._kind = info.kind
        self._header.set_title(f"Configure {info.name}")
        self._header.set_step("" if editing_recent else "Step 3 of 3")

        while self._fields_form.rowCount():
            self._fields_form.removeRow(0)
        self._inputs.clear()
        self._hints.clear()

        for field_spec in info.fields:
            edit = QLineEdit(fields.get(field_spec.key, ""))
            edit.setPlaceholderText(field_spec.placeholder)
            if field_spec.secret:
                edit.setEchoMode(QLineEdit.EchoMode.Password)
            edit.textChanged.connect(self._on_changed)
            self._fields_form.addRow(field_spec.label, edit)
            self._inputs[field_spec.key] = edit
            if field_spec.hint:
                hint = QLabel(field_spec.hint)
                self._fields_form.addRow("", hint)
                self._hints.append(hint)

        self._ngrok_input.blockSignals(True)
        self._ngrok_input.setText(ngrok_token)
        self._ngrok_input.blockSignals(False)

        self.clear_error()
        self._apply_style()
        self._on_changed()

    def values(self) -> dict[str, str]:
        """Return the entered channel field values."""
        return {key: edit.text() for key, edit in self._inputs.items()}

    def show_error(self, message: str) -> None:
        """Show an inline error below the form."""
        self._error_label.setText(message)
        self._error_label.setVisible(True)

    def clear_error(self) -> None:
        """Hide the inline error."""
        self._error_label.clear()
        self._error_label.setVisible(False)

    def _on_changed(self) -> None:
        valid = self._kind is not None and is_valid(
            self._kind, self.values(), self._ngrok_input.text()
        )
        self._submit_btn.setEnabled(valid)

    def _on_submit(self) -> None:
        self.clear_error()
        self.submitted.emit(self.values(), self._ngrok_input.text())

    def _apply_style(self) -> None:
        p = theme_manager.palette
        hint_style = f"color: {p.text_secondary}; font-size: {typography.caption}pt;"
        self._ngrok_hint.setStyleSheet(hint_style)
        for hint in self._hints:
            hint.setStyleSheet(hint_style)
        self._error_label.setStyleSheet(f"color: {p.error}; font-size: {typography.small}pt;")
