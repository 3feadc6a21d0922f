"""Page header with a back button, a title and an optional step caption."""

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from momentum.ui.theme import theme_manager
from momentum.ui.tokens import spacing, typography


class PageHeader(QWidget):
    """Header row shared by every page except Welcome.

    Signals:
        back_clicked: The back button was pressed.
    """

    back_clicked = Signal()

    def __init__(
        self,
        title: str,
        subtitle: str = "",
        step: str = "",
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, spacing.md)
        layout.setSpacing(spacing.xs)

        top_row = QHBoxLayout()
        self._back_btn = QPushButton("← Back")
        self._back_btn.setFlat(True)
        self._back_btn.setToolTip("Back")
        self._back_btn.clicked.connect(self.back_clicked.emit)
        top_row.addWidget(self._back_btn)
        top_row.addStretch()
        self._step_label = QLabel(step)
        self._step_label.setVisible(bool(step))
        top_row.addWidget(self._step_label)
        layout.addLayout(top_row)

        self._title_label = QLabel(title)
        layout.addWidget(self._title_label)

        self._subtitle_label = QLabel(subtitle)
        self._subtitle_label.setWordWrap(True)
        self._subtitle_label.setVisible(bool(subtitle))
        layout.addWidget(self._subtitle_label)

        self._apply_style()
        theme_manager.theme_changed.connect(self._apply_style)

    @property
    def back_button(self) -> QPushButton:
        """Return the back button."""
        return self._back_btn

    def set_title(self, title: str) -> None:
        """Replace the title text."""
        self._title_label.setText(title)

    def set_subtitle(self, subtitle: str) -> None:
        """Replace the subtitle text (hidden when empty)."""
        self._subtitle_label.setText(subtitle)
        self._subtitle_label.setVisible(bool(subtitle))

    def set_step(self, step: str) -> None:
        """Replace the step caption (hidden when empty)."""
        self._step_label.setText(step)
        self._step_label.setVisible(bool(step))

    def _apply_style(self) -> None:
        p = theme_manager.palette
        self._back_btn.setStyleSheet(
            f"QPushButton {{ border: none; background: transparent; color: {p.text_secondary}; }}"
            f" QPushButton:hover {{ color: {p.text}; }}"
        )
        self._step_label.setStyleSheet(f"color: {p.text_secondary}; font-size: {typography.small}pt;")
        self._title_label.setStyleSheet(
            f"font-size: {typography.title}pt; font-weight: bold; color: {p.text};"
        )
        self._subtitle_label.setStyleSheet(
            f"color: {p.text_secondary}; font-size: {typography.body}pt;"
        )
