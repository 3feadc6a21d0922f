"""Tests for reusable widgets."""

from PySide6.QtCore import Qt
from pytestqt.qtbot import QtBot

from momentum.ui.widgets import ChoiceCard, PageHeader


class TestChoiceCard:
    """Test the clickable card."""

    def test_labels(self, qtbot: QtBot) -> None:
        """Title, badge and trailing caption are shown."""
        card = ChoiceCard("✈️", "Telegram", "Instant bot notifications", badge="Recommended")
        qtbot.addWidget(card)

        assert card.title == "Telegram"
        assert card.badge == "Recommended"
        assert card.trailing == ""

    def test_set_trailing(self, qtbot: QtBot) -> None:
        """The trailing caption can be updated."""
        card = ChoiceCard("✉️", "Gmail", trailing="5m ago")
        qtbot.addWidget(card)
        assert card.trailing == "5m ago"

        card.set_trailing("1h ago")
        assert card.trailing == "1h ago"

    def test_left_click_emits(self, qtbot: QtBot) -> None:
        """A left click activates the card."""
        card = ChoiceCard("📱", "SMS")
        qtbot.addWidget(card)
        with qtbot.waitSignal(card.clicked, timeout=1000):
            qtbot.mouseClick(card, Qt.MouseButton.LeftButton)

    def test_right_click_ignored(self, qtbot: QtBot) -> None:
        """Other buttons do nothing."""
        card = ChoiceCard("📱", "SMS")
        qtbot.addWidget(card)
        with qtbot.assertNotEmitted(card.clicked):
            qtbot.mouseClick(card, Qt.MouseButton.RightButton)

    def test_keyboard_activation(self, qtbot: QtBot) -> None:
        """Enter and Space activate the card."""
        card = ChoiceCard("📞", "WhatsApp")
        qtbot.addWidget(card)
        with qtbot.waitSignal(card.clicked, timeout=1000):
            qtbot.keyClick(card, Qt.Key.Key_Return)
        with qtbot.waitSignal(card.clicked, timeout=1000):
            qtbot.keyClick(card, Qt.Key.Key_Space)


class TestPageHeader:
    """Test the page header."""

    def test_back_button(self, qtbot: QtBot) -> None:
        """The back button emits back_clicked."""
        header = PageHeader("Settings")
        qtbot.addWidget(header)

        assert header.back_button.text() == "← Back"
        with qtbot.waitSignal(header.back_clicked, timeout=1000):
            qtbot.mouseClick(header.back_button, Qt.MouseButton.LeftButton)

    def test_step_hidden_when_empty(self, qtbot: QtBot) -> None:
        """The step caption only shows when set."""
        header = PageHeader("Configure", step="Step 3 of 3")
        qtbot.addWidget(header)
        step_label = header._step_label  # pyright: ignore[reportPrivateUsage]
        assert step_label.isVisibleTo(header)

        header.set_step("")
        assert not step_label.isVisibleTo(header)
