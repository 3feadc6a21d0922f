"""Clickable card used for source, channel and recent-channel choices."""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeyEvent, QMouseEvent
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from momentum.ui.theme import theme_manager
from momentum.ui.tokens import sizing, spacing, typography


class ChoiceCard(QFrame):
    """Card with an icon, a title, a subtitle and an optional badge.

    Uses QFrame for proper stylesheet support (background, border).
    Activated by a left click or by Enter/Space when focused.

    Signals:
        clicked: Emitted when the card is activated.

    Example:
        card = ChoiceCard("✈️", "Telegram", "Instant messaging via bot", badge="Recommended")
        card.clicked.connect(lambda: wizard.choose_channel(ChannelKind.TELEGRAM))
    """

    clicked = Signal()

    def __init__(
        self,
        icon: str,
        title: str,
        subtitle: str = "",
        badge: str = "",
        trailing: str = "",
        parent: QWidget | None = None,
    ) -> None:
        """Initialize the card.

        Args:
            icon: Emoji or short glyph shown on the left.
            title: Main label.
            subtitle: Secondary line (omitted if empty).
            badge: Small pill next to the title (omitted if empty).
            trailing: Right-aligned caption, e.g. a relative age.
            parent: Parent widget.
        """
        super().__init__(parent)
        self._title = title
        self.setObjectName("choiceCard")
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumHeight(sizing.card_min_height)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(spacing.md, spacing.md, spacing.md, spacing.md)
        layout.setSpacing(spacing.md)

        self._icon_label = QLabel(icon)
        self._icon_label.setFixedWidth(sizing.icon_lg)
        self._icon_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._icon_label)

        text_col = QVBoxLayout()
        text_col.setSpacing(2)
        title_row = QHBoxLayout()
        title_row.setSpacing(spacing.sm)
        self._title_label = QLabel(title)
        title_row.addWidget(self._title_label)
        self._badge_label = QLabel(badge)
        self._badge_label.setVisible(bool(badge))
        title_row.addWidget(self._badge_label)
        title_row.addStretch()
        text_col.addLayout(title_row)

        self._subtitle_label = QLabel(subtitle)
        self._subtitle_label.setWordWrap(True)
        self._subtitle_label.setVisible(bool(subtitle))
        text_col.addWidget(self._subtitle_label)
        layout.addLayout(text_col, stretch=1)

        self._trailing_label = QLabel(trailing)
        self._trailing_label.setVisible(bool(trailing))
        layout.addWidget(self._trailing_label)

        self._apply_style()
        theme_manager.theme_changed.connect(self._apply_style)

    @property
    def title(self) -> str:
        """Return the card title."""
        return self._title

    @property
    def badge(self) -> str:
        """Return the badge text ("" if none)."""
        return self._badge_label.text()

    @property
    def trailing(self) -> str:
        """Return the trailing caption ("" if none)."""
        return self._trailing_label.text()

    def set_trailing(self, text: str) -> None:
        """Update the trailing caption."""
        self._trailing_label.setText(text)
        self._trailing_label.setVisible(bool(text))

    def _apply_style(self) -> None:
        p = theme_manager.palette
        self.setStyleSheet(f"""
            QFrame#choiceCard {{
                background-color: {p.surface};
                border: 1px solid {p.border};
                border-radius: {sizing.border_radius_lg}px;
            }}
            QFrame#choiceCard:hover, QFrame#choiceCard:focus {{
                background-color: {p.surface_hover};
                border-color: {p.accent};
            }}
            QLabel {{
                background: transparent;
            }}
        """)
        self._icon_label.setStyleSheet(f"font-size: {typography.title}pt;")
        self._title_label.setStyleSheet(
            f"font-size: {typography.subtitle}pt; font-weight: bold; color: {p.text};"
        )
        self._badge_label.setStyleSheet(
            f"background-color: {p.badge}; color: {p.accent_text};"
            f" font-size: {typography.caption}pt;"
            f" border-radius: {sizing.border_radius_sm}px; padding: 1px {spacing.xs}px;"
        )
        self._subtitle_label.setStyleSheet(
            f"font-size: {typography.small}pt; color: {p.text_secondary};"
        )
        self._trailing_label.setStyleSheet(
            f"font-size: {typography.caption}pt; color: {p.text_secondary};"
        )

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        """Emit clicked on a left click."""
        super().mousePressEvent(event)
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        """Emit clicked on Enter or Space."""
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space):
            self.clicked.emit()
            return
        super().keyPressEvent(event)
