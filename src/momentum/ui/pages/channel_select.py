"""Channel selection page: where notifications are delivered."""

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QVBoxLayout, QWidget

from momentum.models.channel import CHANNELS, ChannelKind
from momentum.ui.tokens import spacing
from momentum.ui.widgets.choice_card import ChoiceCard
from momentum.ui.widgets.page_header import PageHeader


class ChannelSelectPage(QWidget):
    """One row per supported channel, with its badge.

    Signals:
        back_clicked: Back pressed.
        channel_chosen: A channel row was clicked (ChannelKind).
    """

    back_clicked = Signal()
    channel_chosen = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(spacing.xl, spacing.md, spacing.xl, spacing.xl)
        layout.setSpacing(spacing.sm)

        self._header = PageHeader(
            "Choose Your Channel",
            subtitle="Where should we send notifications when your Agent needs you?",
            step="Step 2 of 3",
        )
        self._header.back_clicked.connect(self.back_clicked.emit)
        layout.addWidget(self._header)

        self._cards: dict[ChannelKind, ChoiceCard] = {}
        for kind, info in CHANNELS.items():
            card = ChoiceCard(info.icon, info.name, info.description, badge=info.badge)
            card.clicked.connect(lambda k=kind: self.channel_chosen.emit(k))
            layout.addWidget(card)
            self._cards[kind] = card

        layout.addStretch()

    def card(self, kind: ChannelKind) -> ChoiceCard:
        """Return the row for ``kind``."""
        return self._cards[kind]
