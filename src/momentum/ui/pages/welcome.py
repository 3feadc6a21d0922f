"""Welcome page: start a setup, open settings, resume a recent channel."""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from momentum.models.config import RecentChannelEntry
from momentum.ui.theme import theme_manager
from momentum.ui.tokens import sizing, spacing, typography
from momentum.ui.widgets.choice_card import ChoiceCard


class WelcomePage(QWidget):
    """Landing page.

    Signals:
        start_clicked: "Start" pressed.
        settings_clicked: Settings gear pressed.
        recent_selected: A recent channel card was clicked (RecentChannelEntry).
        view_bridge_clicked: "View running bridge" pressed.
    """

    start_clicked = Signal()
    settings_clicked = Signal()
    recent_selected = Signal(object)
    view_bridge_clicked = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._recent_cards: list[ChoiceCard] = []
        self._setup_ui()
        self._apply_style()
        theme_manager.theme_changed.connect(self._apply_style)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(spacing.xl, spacing.md, spacing.xl, spacing.xl)
        layout.setSpacing(spacing.md)

        top_row = QHBoxLayout()
        top_row.addStretch()
        self._settings_btn = QPushButton("⚙")
        self._settings_btn.setFlat(True)
        self._settings_btn.setToolTip("Settings")
        self._settings_btn.clicked.connect(self.settings_clicked.emit)
        top_row.addWidget(self._settings_btn)
        layout.addLayout(top_row)

        layout.addSpacing(spacing.xxl)

        self._logo = QLabel("⚡")
        self._logo.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._logo)

        self._title = QLabel("Momentum")
        self._title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._title)

        self._slogan = QLabel("Your Agent, Unchained.")
        self._slogan.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._slogan)

        layout.addSpacing(spacing.lg)

        self._start_btn = QPushButton("Start")
        self._start_btn.setProperty("primary", True)
        self._start_btn.clicked.connect(self.start_clicked.emit)
        layout.addWidget(self._start_btn)

        self._view_bridge_btn = QPushButton("View running bridge")
        self._view_bridge_btn.clicked.connect(self.view_bridge_clicked.emit)
        self._view_bridge_btn.setVisible(False)
        layout.addWidget(self._view_bridge_btn)

        layout.addSpacing(spacing.lg)

        self._recents_header = QLabel("Recent channels")
        self._recents_header.setVisible(False)
        layout.addWidget(self._recents_header)

        self._recents_layout = QVBoxLayout()
        self._recents_layout.setSpacing(spacing.sm)
        layout.addLayout(self._recents_layout)

        layout.addStretch()

    @property
    def recent_cards(self) -> list[ChoiceCard]:
        """Return the cards currently shown for recent channels."""
        return list(self._recent_cards)

    @property
    def view_bridge_button(self) -> QPushButton:
        """Return the "View running bridge" button."""
        return self._view_bridge_btn

    def set_recents(self, items: list[tuple[RecentChannelEntry, str]]) -> None:
        """Show recent channels.

        Args:
            items: (entry, relative age) pairs, most recent first.
        """
        for card in self._recent_cards:
            self._recents_layout.removeWidget(card)
            card.deleteLater()
        self._recent_cards.clear()

        for entry, age in items:
            card = ChoiceCard(entry.icon, entry.name, trailing=age)
            card.clicked.connect(lambda e=entry: self.recent_selected.emit(e))
            self._recents_layout.addWidget(card)
            self._recent_cards.append(card)
        self._recents_header.setVisible(bool(items))

    def set_bridge_running(self, running: bool) -> None:
        """Show or hide the shortcut to a running bridge."""
        self._view_bridge_btn.setVisible(running)

    def _apply_style(self) -> None:
        p = theme_manager.palette
        self._settings_btn.setStyleSheet(
            f"QPushButton {{ border: none; background: transparent;"
            f" font-size: {typography.title}pt; color: {p.text_secondary}; }}"
            f" QPushButton:hover {{ color: {p.text}; }}"
        )
        self._logo.setStyleSheet(f"font-size: {sizing.logo // 2}pt; color: {p.accent};")
        self._title.setStyleSheet(
            f"font-size: {typography.display}pt; font-weight: bold; color: {p.text};"
        )
        self._slogan.setStyleSheet(
            f"font-size: {typography.subtitle}pt; color: {p.text_secondary};"
        )
        self._recents_header.setStyleSheet(
            f"font-size: {typography.small}pt; font-weight: bold; color: {p.text_secondary};"
        )
