"""Tests for the setup wizard state machine."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from conftest import NGROK_TOKEN, TELEGRAM_FIELDS
from pytestqt.qtbot import QtBot

from momentum.core.config_store import ConfigStore
from momentum.core.errors import PersistenceError, ValidationError, WizardTransitionError
from momentum.core.wizard import View, WizardStateMachine
from momentum.models.channel import ChannelKind, TelegramConfig
from momentum.models.config import ConfigUpdate, PersistedConfig, RecentChannelEntry, SourceKind


def _at_config(
    store: ConfigStore, channel: ChannelKind = ChannelKind.TELEGRAM
) -> WizardStateMachine:
    wizard = WizardStateMachine(store)
    wizard.start()
    wizard.choose_source(SourceKind.AGENT)
    wizard.choose_channel(channel)
    return wizard


class TestForwardFlow:
    """Test the happy path from Welcome to BridgeControl."""

    def test_initial_view(self, store: ConfigStore) -> None:
        """The wizard starts on Welcome."""
        wizard = WizardStateMachine(store)
        assert wizard.view is View.WELCOME
        assert wizard.channel is None
        assert wizard.source is SourceKind.AGENT

    def test_start_to_config(self, store: ConfigStore, qtbot: QtBot) -> None:
        """Start, pick a source and a channel to reach Config."""
        wizard = WizardStateMachine(store)
        views: list[View] = []
        wizard.view_changed.connect(views.append)

        wizard.start()
        wizard.choose_source(SourceKind.MCP)
        wizard.choose_channel(ChannelKind.GMAIL)

        assert views == [View.SOURCE_SELECT, View.CHANNEL_SELECT, View.CONFIG]
        assert wizard.source is SourceKind.MCP
        assert wizard.channel is ChannelKind.GMAIL
        assert wizard.editing_recent is False

    def test_submit_saves_and_moves_on(self, store: ConfigStore, qtbot: QtBot) -> None:
        """A valid submit persists and shows BridgeControl."""
        wizard = _at_config(store)
        with qtbot.waitSignal(wizard.config_saved) as blocker:
            wizard.submit_config(TELEGRAM_FIELDS, NGROK_TOKEN)

        assert wizard.view is View.BRIDGE_CONTROL
        assert wizard.return_target is View.CONFIG
        saved = blocker.args[0]
        assert isinstance(saved, PersistedConfig)
        assert store.load().get_channel(ChannelKind.TELEGRAM) == TelegramConfig(**TELEGRAM_FIELDS)

    def test_back_from_control_returns_to_config(self, store: ConfigStore) -> None:
        """Back after a save returns to Config with the channel still selected."""
        wizard = _at_config(store)
        wizard.submit_config(TELEGRAM_FIELDS, NGROK_TOKEN)

        wizard.back()

        assert wizard.view is View.CONFIG
        assert wizard.channel is ChannelKind.TELEGRAM
        assert wizard.config_fields() == TELEGRAM_FIELDS

    def test_stop_confirmed_returns_to_welcome(self, store: ConfigStore) -> None:
        """A confirmed stop leaves the control screen for Welcome."""
        wizard = _at_config(store)
        wizard.submit_config(TELEGRAM_FIELDS, NGROK_TOKEN)

        wizard.stop_confirmed()
        assert wizard.view is View.WELCOME


class TestValidation:
    """Test that invalid configs never leave Config."""

    def test_missing_field(self, store: ConfigStore) -> None:
        """Missing fields raise and keep the view."""
        wizard = _at_config(store)
        with pytest.raises(ValidationError, match="Please fill in: chat_id") as exc_info:
            wizard.submit_config({"bot_token": "t", "chat_id": " "}, NGROK_TOKEN)

        assert exc_info.value.missing == ("chat_id",)
        assert wizard.view is View.CONFIG
        assert not store.path.exists()

    def test_missing_token(self, store: ConfigStore) -> None:
        """A blank ngrok token is rejected."""
        wizard = _at_config(store)
        with pytest.raises(ValidationError, match="ngrokToken"):
            wizard.submit_config(TELEGRAM_FIELDS, "")
        assert wizard.view is View.CONFIG

    def test_write_failure_keeps_view(self, store: ConfigStore) -> None:
        """A persistence failure propagates and keeps Config."""
        wizard = _at_config(store)
        with (
            patch.object(store, "save", side_effect=PersistenceError("Error saving config")),
            pytest.raises(PersistenceError),
        ):
            wizard.submit_config(TELEGRAM_FIELDS, NGROK_TOKEN)
        assert wizard.view is View.CONFIG

    def test_can_submit(self, store: ConfigStore) -> None:
        """The gate matches the channel schema."""
        wizard = _at_config(store)
        assert wizard.can_submit(TELEGRAM_FIELDS, NGROK_TOKEN)
        assert not wizard.can_submit(TELEGRAM_FIELDS, "")
        assert not WizardStateMachine(store).can_submit(TELEGRAM_FIELDS, NGROK_TOKEN)


class TestRecents:
    """Test resuming a recently configured channel."""

    def test_select_recent_prepopulates(self, saved_store: ConfigStore) -> None:
        """Choosing a recent opens Config with the stored values."""
        saved_store.save(
            ConfigUpdate(TelegramConfig(**TELEGRAM_FIELDS), NGROK_TOKEN, SourceKind.MCP)
        )
        wizard = WizardStateMachine(saved_store)
        entry = saved_store.recent_channels()[0]

        wizard.select_recent(entry)

        assert wizard.view is View.CONFIG
        assert wizard.channel is ChannelKind.TELEGRAM
        assert wizard.source is SourceKind.MCP
        assert wizard.editing_recent is True
        assert wizard.config_fields() == TELEGRAM_FIELDS
        assert wizard.stored_ngrok_token() == NGROK_TOKEN

    def test_recent_without_stored_block(self, store: ConfigStore) -> None:
        """A recent whose credentials are gone opens an empty form."""
        wizard = WizardStateMachine(store)
        entry = RecentChannelEntry.for_kind(ChannelKind.SMS, datetime(2024, 1, 1, tzinfo=UTC))

        wizard.select_recent(entry)

        assert wizard.view is View.CONFIG
        assert wizard.config_fields() == {}
        assert wizard.stored_ngrok_token() == ""

    def test_back_from_recent_goes_to_channel_select(self, saved_store: ConfigStore) -> None:
        """Back from Config always leads to ChannelSelect."""
        wizard = WizardStateMachine(saved_store)
        wizard.select_recent(saved_store.recent_channels()[0])

        wizard.back()
        assert wizard.view is View.CHANNEL_SELECT

    def test_choose_channel_clears_editing_recent(self, saved_store: ConfigStore) -> None:
        """Picking a channel from the list is a fresh edit."""
        wizard = WizardStateMachine(saved_store)
        wizard.select_recent(saved_store.recent_channels()[0])
        wizard.back()

        wizard.choose_channel(ChannelKind.GMAIL)
        assert wizard.editing_recent is False
        assert wizard.config_fields() == {}


class TestBackNavigation:
    """Test the fixed back targets."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (["start"], View.WELCOME),
            (["open_settings"], View.WELCOME),
            (["start", "agent"], View.SOURCE_SELECT),
            (["start", "agent", "telegram"], View.CHANNEL_SELECT),
        ],
    )
    def test_back_targets(self, store: ConfigStore, path: list[str], expected: View) -> None:
        """Each view goes back one step up the chain."""
        wizard = WizardStateMachine(store)
        for step in path:
            if step == "start":
                wizard.start()
            elif step == "open_settings":
                wizard.open_settings()
            elif step == "agent":
                wizard.choose_source(SourceKind.AGENT)
            else:
                wizard.choose_channel(ChannelKind(step))

        wizard.back()
        assert wizard.view is expected

    def test_back_from_welcome_raises(self, store: ConfigStore) -> None:
        """Welcome has no back."""
        wizard = WizardStateMachine(store)
        with pytest.raises(WizardTransitionError, match="Cannot go back"):
            wizard.back()

    def test_view_bridge_returns_to_welcome(self, store: ConfigStore) -> None:
        """Back from a bridge opened on Welcome goes to Welcome."""
        wizard = WizardStateMachine(store)
        wizard.view_bridge()
        assert wizard.view is View.BRIDGE_CONTROL

        wizard.back()
        assert wizard.view is View.WELCOME


class TestIllegalTransitions:
    """Test that triggers from the wrong view raise and change nothing."""

    def test_choose_source_from_welcome(self, store: ConfigStore) -> None:
        """A source cannot be chosen before Start."""
        wizard = WizardStateMachine(store)
        with pytest.raises(WizardTransitionError, match="only from source_select"):
            wizard.choose_source(SourceKind.AGENT)
        assert wizard.view is View.WELCOME

    def test_choose_channel_from_source_select(self, store: ConfigStore) -> None:
        """A channel cannot be chosen before a source."""
        wizard = WizardStateMachine(store)
        wizard.start()
        with pytest.raises(WizardTransitionError):
            wizard.choose_channel(ChannelKind.SMS)
        assert wizard.channel is None

    def test_submit_outside_config(self, store: ConfigStore) -> None:
        """Saving is only possible on Config."""
        wizard = WizardStateMachine(store)
        with pytest.raises(WizardTransitionError):
            wizard.submit_config(TELEGRAM_FIELDS, NGROK_TOKEN)
        assert not store.path.exists()

    def test_stop_confirmed_outside_control(self, store: ConfigStore) -> None:
        """Stop confirmation is only accepted on BridgeControl."""
        wizard = WizardStateMachine(store)
        wizard.start()
        with pytest.raises(WizardTransitionError):
            wizard.stop_confirmed()
        assert wizard.view is View.SOURCE_SELECT

    def test_start_twice(self, store: ConfigStore) -> None:
        """Start is only available on Welcome."""
        wizard = WizardStateMachine(store)
        wizard.start()
        with pytest.raises(WizardTransitionError):
            wizard.start()
