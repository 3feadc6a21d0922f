"""Source selection page: where do requests come from."""

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QVBoxLayout, QWidget

from momentum.models.config import SourceKind
from momentum.ui.tokens import spacing
from momentum.ui.widgets.choice_card import ChoiceCard
from momentum.ui.widgets.page_header import PageHeader

_SOURCES = (
    (SourceKind.AGENT, "🤖", "AI Agent", "VS Code Copilot, Cursor, Windsurf"),
    (SourceKind.MCP, "🖥️", "MCP Server", "Claude Desktop, Custom Tools"),
)


class SourceSelectPage(QWidget):
    """Two cards, one per request source.

    Signals:
        back_clicked: Back pressed.
        source_chosen: A source card was clicked (SourceKind).
    """

    back_clicked = Signal()
    source_chosen = Signal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(spacing.xl, spacing.md, spacing.xl, spacing.xl)
        layout.setSpacing(spacing.lg)

        self._header = PageHeader(
            "Select Input Source",
            subtitle="Where is the request coming from?",
            step="Step 1 of 3",
        )
        self._header.back_clicked.connect(self.back_clicked.emit)
        layout.addWidget(self._header)

        self._cards: dict[SourceKind, ChoiceCard] = {}
        for kind, icon, title, subtitle in _SOURCES:
            card = ChoiceCard(icon, title, subtitle)
            card.clicked.connect(lambda k=kind: self.source_chosen.emit(k))
            layout.addWidget(card)
            self._cards[kind] = card

        layout.addStretch()

    def card(self, kind: SourceKind) -> ChoiceCard:
        """Return the card for ``kind``."""
        return self._cards[kind]
