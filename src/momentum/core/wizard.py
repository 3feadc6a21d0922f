"""Setup wizard state machine.

Views and the triggers that move between them:

    Welcome --start--> SourceSelect --choose source--> ChannelSelect
    Welcome --settings--> Settings
    Welcome --recent--> Config            (editing_recent)
    Welcome --view bridge--> BridgeControl (bridge already running)
    ChannelSelect --choose channel--> Config
    Config --save--> BridgeControl
    BridgeControl --stop confirmed--> Welcome
    BridgeControl --back--> whichever view led into it

Every other ``back`` goes one step up the chain. The view that led into
BridgeControl is captured when the transition happens, so ``back`` from
the control screen never guesses.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from PySide6.QtCore import QObject, Signal

from momentum.core.config_store import ConfigStore, missing_fields
from momentum.core.errors import ValidationError, WizardTransitionError
from momentum.models.channel import ChannelKind, make_channel_config
from momentum.models.config import ConfigUpdate, RecentChannelEntry, SourceKind

logger = logging.getLogger(__name__)


class View(StrEnum):
    """Wizard views (one page each in the main window)."""

    WELCOME = "welcome"
    SOURCE_SELECT = "source_select"
    SETTINGS = "settings"
    CHANNEL_SELECT = "channel_select"
    CONFIG = "config"
    BRIDGE_CONTROL = "bridge_control"


# Fixed back targets; BRIDGE_CONTROL uses the captured return target
_BACK_TARGETS: dict[View, View] = {
    View.SOURCE_SELECT: View.WELCOME,
    View.SETTINGS: View.WELCOME,
    View.CHANNEL_SELECT: View.SOURCE_SELECT,
    View.CONFIG: View.CHANNEL_SELECT,
}


@dataclass
class WizardSession:
    """Ephemeral wizard state, discarded on exit.

    Attributes:
        view: Current view.
        return_target: View that ``back`` returns to from BridgeControl.
        source: Selected request source.
        channel: Selected channel kind, None until one is picked.
        editing_recent: True when Config was entered from the recents list.
    """

    view: View = View.WELCOME
    return_target: View = View.WELCOME
    source: SourceKind = SourceKind.AGENT
    channel: ChannelKind | None = None
    editing_recent: bool = False


class WizardStateMachine(QObject):
    """Drives the user from Welcome to BridgeControl.

    Triggers that are not allowed from the current view raise
    WizardTransitionError and leave the session unchanged.

    Signals:
        view_changed: Emitted with the new View after each transition.
        config_saved: Emitted with the saved PersistedConfig.

    Example:
        wizard = WizardStateMachine(store)
        wizard.view_changed.connect(window.show_view)
        wizard.start()
        wizard.choose_source(SourceKind.AGENT)
        wizard.choose_channel(ChannelKind.TELEGRAM)
        wizard.submit_config({"bot_token": "...", "chat_id": "42"}, ngrok_token="...")
    """

    view_changed = Signal(object)
    config_saved = Signal(object)

    def __init__(self, store: ConfigStore, parent: QObject | None = None) -> None:
        """Initialize the wizard on the Welcome view.

        Args:
            store: Config store read for pre-population and written on save.
            parent: Qt parent object.
        """
        super().__init__(parent)
        self._store = store
        self._session = WizardSession()

    @property
    def session(self) -> WizardSession:
        """Return the live session (read it, don't mutate it)."""
        return self._session

    @property
    def view(self) -> View:
        """Return the current view."""
        return self._session.view

    @property
    def return_target(self) -> View:
        """Return the view ``back`` leads to from BridgeControl."""
        return self._session.return_target

    @property
    def source(self) -> SourceKind:
        """Return the selected source."""
        return self._session.source

    @property
    def channel(self) -> ChannelKind | None:
        """Return the selected channel kind."""
        return self._session.channel

    @property
    def editing_recent(self) -> bool:
        """Return True if Config was entered from the recents list."""
        return self._session.editing_recent

    # -- Welcome -------------------------------------------------------------

    def start(self) -> None:
        """Begin a new setup (Welcome -> SourceSelect)."""
        self._require(View.WELCOME, "start")
        self._go(View.SOURCE_SELECT)

    def open_settings(self) -> None:
        """Open the settings screen (Welcome -> Settings)."""
        self._require(View.WELCOME, "open settings")
        self._go(View.SETTINGS)

    def select_recent(self, entry: RecentChannelEntry) -> None:
        """Resume editing a recently configured channel (Welcome -> Config).

        The source comes from the stored config (``agent`` if never saved).
        """
        self._require(View.WELCOME, "select a recent channel")
        self._session.channel = entry.config_key
        self._session.source = self._store.load().source
        self._session.editing_recent = True
        self._go(View.CONFIG)

    def view_bridge(self) -> None:
        """Jump to the control screen of an already running bridge."""
        self._require(View.WELCOME, "view the bridge")
        self._session.return_target = View.WELCOME
        self._go(View.BRIDGE_CONTROL)

    # -- Selection -----------------------------------------------------------

    def choose_source(self, source: SourceKind) -> None:
        """Pick the request source (SourceSelect -> ChannelSelect)."""
        self._require(View.SOURCE_SELECT, "choose a source")
        self._session.source = SourceKind(source)
        self._go(View.CHANNEL_SELECT)

    def choose_channel(self, channel: ChannelKind) -> None:
        """Pick the notification channel (ChannelSelect -> Config)."""
        self._require(View.CHANNEL_SELECT, "choose a channel")
        self._session.channel = ChannelKind(channel)
        self._session.editing_recent = False
        self._go(View.CONFIG)

    # -- Config --------------------------------------------------------------

    def config_fields(self) -> dict[str, str]:
        """Return the stored credentials of the selected channel.

        Used to pre-populate the Config form; empty if never saved.
        """
        if self._session.channel is None:
            return {}
        stored = self._store.load().get_channel(self._session.channel)
        return stored.to_dict() if stored is not None else {}

    def stored_ngrok_token(self) -> str:
        """Return the saved ngrok token, or an empty string."""
        return self._store.load().ngrok_token

    def can_submit(self, fields: Mapping[str, str], ngrok_token: str) -> bool:
        """Return True if ``fields`` and ``ngrok_token`` pass the validity gate."""
        if self._session.channel is None:
            return False
        return not missing_fields(self._session.channel, fields, ngrok_token)

    def submit_config(self, fields: Mapping[str, str], ngrok_token: str) -> None:
        """Validate, save and move on to the control screen (Config -> BridgeControl).

        Nothing is persisted and the view does not change if validation or
        the write fails.

        Args:
            fields: Channel credential values keyed by JSON key.
            ngrok_token: Shared ngrok token.

        Raises:
            WizardTransitionError: If not on the Config view.
            ValidationError: If the token or a required field is empty.
            PersistenceError: If the config could not be written.
        """
        self._require(View.CONFIG, "save the configuration")
        channel = self._session.channel
        if channel is None:
            msg = "No channel selected"
            raise WizardTransitionError(msg)

        missing = missing_fields(channel, fields, ngrok_token)
        if missing:
            msg = f"Please fill in: {', '.join(missing)}"
            raise ValidationError(msg, missing)

        update = ConfigUpdate(
            channel=make_channel_config(channel, dict(fields)),
            ngrok_token=ngrok_token,
            source=self._session.source,
        )
        saved = self._store.save(update)
        self.config_saved.emit(saved)

        self._session.return_target = View.CONFIG
        self._go(View.BRIDGE_CONTROL)

    # -- Bridge control ------------------------------------------------------

    def stop_confirmed(self) -> None:
        """Return to Welcome after the bridge stopped (BridgeControl -> Welcome)."""
        self._require(View.BRIDGE_CONTROL, "confirm a stop")
        self._session.return_target = View.WELCOME
        self._go(View.WELCOME)

    # -- Navigation ----------------------------------------------------------

    def back(self) -> None:
        """Go back one step.

        Raises:
            WizardTransitionError: On Welcome, which has no back.
        """
        view = self._session.view
        if view == View.BRIDGE_CONTROL:
            target = self._session.return_target
        elif view in _BACK_TARGETS:
            target = _BACK_TARGETS[view]
        else:
            msg = f"Cannot go back from {view}"
            raise WizardTransitionError(msg)
        self._go(target)

    def _require(self, expected: View, action: str) -> None:
        if self._session.view != expected:
            msg = f"Cannot {action} from {self._session.view} (only from {expected})"
            raise WizardTransitionError(msg)

    def _go(self, view: View) -> None:
        if view == View.CONFIG and self._session.channel is None:
            msg = "Cannot enter config without a selected channel"
            raise WizardTransitionError(msg)
        logger.debug("Wizard: %s -> %s", self._session.view, view)
        self._session.view = view
        self.view_changed.emit(view)
