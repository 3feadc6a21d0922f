"""Main application window: one stacked page per wizard view.

The window holds no navigation or lifecycle logic of its own. Page
signals are forwarded to the wizard and the bridge controller, and their
signals are rendered back into the pages.
"""

import logging

from PySide6.QtCore import Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QMainWindow, QStackedWidget, QWidget

from momentum.core.bridge_controller import BridgeController, BridgeState, LogEntry
from momentum.core.errors import PersistenceError, ValidationError
from momentum.core.preferences import PreferencesManager
from momentum.core.recents import RecentChannelsIndex
from momentum.core.wizard import View, WizardStateMachine
from momentum.models.channel import ChannelKind, channel_info
from momentum.models.config import RecentChannelEntry, SourceKind
from momentum.ui.pages.bridge_control import BridgeControlPage
from momentum.ui.pages.channel_select import ChannelSelectPage
from momentum.ui.pages.config_page import ConfigPage
from momentum.ui.pages.settings import SettingsPage
from momentum.ui.pages.source_select import SourceSelectPage
from momentum.ui.pages.welcome import WelcomePage
from momentum.ui.tokens import sizing

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main application window.

    Example:
        wizard = WizardStateMachine(store)
        controller = BridgeController(BridgeProcess(store))
        window = MainWindow(wizard, controller, RecentChannelsIndex(store), prefs)
        window.show()
    """

    preferences_applied = Signal()

    def __init__(
        self,
        wizard: WizardStateMachine,
        controller: BridgeController,
        recents: RecentChannelsIndex,
        prefs: PreferencesManager,
    ) -> None:
        """Initialize the main window.

        Polls the bridge once so an already running bridge is offered on
        the Welcome page.

        Args:
            wizard: Navigation state machine.
            controller: Bridge lifecycle controller.
            recents: Recent channels for the Welcome page.
            prefs: Application preferences (Settings page, close-to-tray).
        """
        super().__init__()
        self._wizard = wizard
        self._controller = controller
        self._recents = recents
        self._prefs = prefs
        self._hide_to_tray = prefs.get_close_to_tray()

        self._setup_ui()
        self._connect_signals()

        self._controller.refresh_from_backend()
        self.show_view(self._wizard.view)

    def _setup_ui(self) -> None:
        """Set up the user interface."""
        self.setWindowTitle("Momentum")
        self.setMinimumSize(sizing.window_min_width, sizing.window_min_height)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._welcome = WelcomePage()
        self._source_select = SourceSelectPage()
        self._settings = SettingsPage(self._prefs)
        self._channel_select = ChannelSelectPage()
        self._config = ConfigPage()
        self._bridge = BridgeControlPage()

        self._pages: dict[View, QWidget] = {
            View.WELCOME: self._welcome,
            View.SOURCE_SELECT: self._source_select,
            View.SETTINGS: self._settings,
            View.CHANNEL_SELECT: self._channel_select,
            View.CONFIG: self._config,
            View.BRIDGE_CONTROL: self._bridge,
        }
        for page in self._pages.values():
            self._stack.addWidget(page)

    def _connect_signals(self) -> None:
        """Connect page, wizard and controller signals."""
        self._wizard.view_changed.connect(self.show_view)

        self._welcome.start_clicked.connect(self._wizard.start)
        self._welcome.settings_clicked.connect(self._wizard.open_settings)
        self._welcome.recent_selected.connect(self._on_recent_selected)
        self._welcome.view_bridge_clicked.connect(self._wizard.view_bridge)

        self._source_select.back_clicked.connect(self._wizard.back)
        self._source_select.source_chosen.connect(self._on_source_chosen)

        self._settings.back_clicked.connect(self._wizard.back)
        self._settings.settings_changed.connect(self._on_settings_changed)

        self._channel_select.back_clicked.connect(self._wizard.back)
        self._channel_select.channel_chosen.connect(self._on_channel_chosen)

        self._config.back_clicked.connect(self._wizard.back)
        self._config.submitted.connect(self._on_config_submitted)

        self._bridge.back_clicked.connect(self._wizard.back)
        self._bridge.start_clicked.connect(self._controller.start)
        self._bridge.stop_clicked.connect(self._controller.stop)
        self._bridge.copy_url_clicked.connect(self._on_copy_url)

        self._controller.state_changed.connect(self._on_bridge_state_changed)
        self._controller.log_appended.connect(self._on_log_appended)
        self._controller.public_url_changed.connect(self._bridge.set_public_url)
        self._controller.stopped.connect(self._on_bridge_stopped)

    # -- Accessors -------------------------------------------------------------

    @property
    def wizard(self) -> WizardStateMachine:
        """Return the wizard."""
        return self._wizard

    @property
    def controller(self) -> BridgeController:
        """Return the bridge controller."""
        return self._controller

    @property
    def welcome_page(self) -> WelcomePage:
        """Return the Welcome page."""
        return self._welcome

    @property
    def source_select_page(self) -> SourceSelectPage:
        """Return the SourceSelect page."""
        return self._source_select

    @property
    def settings_page(self) -> SettingsPage:
        """Return the Settings page."""
        return self._settings

    @property
    def channel_select_page(self) -> ChannelSelectPage:
        """Return the ChannelSelect page."""
        return self._channel_select

    @property
    def config_page(self) -> ConfigPage:
        """Return the Config page."""
        return self._config

    @property
    def bridge_page(self) -> BridgeControlPage:
        """Return the BridgeControl page."""
        return self._bridge

    def current_page(self) -> QWidget:
        """Return the page currently shown."""
        return self._stack.currentWidget()

    # -- View rendering ----------------------------------------------------------

    def show_view(self, view: View) -> None:
        """Show the page for ``view`` and refresh its contents."""
        if view == View.WELCOME:
            self._refresh_welcome()
        elif view == View.SETTINGS:
            self._settings.load()
        elif view == View.CONFIG:
            self._load_config_form()
        elif view == View.BRIDGE_CONTROL:
            self._sync_bridge_page()
        self._stack.setCurrentWidget(self._pages[view])
        logger.debug("Showing %s page", view)

    def _refresh_welcome(self) -> None:
        entries = self._recents.list()
        self._welcome.set_recents([(e, self._recents.relative_age(e)) for e in entries])
        self._welcome.set_bridge_running(self._controller.state != BridgeState.NOT_STARTED)

    def _load_config_form(self) -> None:
        channel = self._wizard.channel
        if channel is None:
            return
        self._config.load(
            channel_info(channel),
            self._wizard.config_fields(),
            self._wizard.stored_ngrok_token(),
            editing_recent=self._wizard.editing_recent,
        )

    def _sync_bridge_page(self) -> None:
        self._bridge.set_state(self._controller.state)
        self._bridge.set_logs(self._controller.logs)
        self._bridge.set_public_url(self._controller.public_url or "")

    # -- Page handlers -----------------------------------------------------------

    def _on_recent_selected(self, entry: RecentChannelEntry) -> None:
        self._wizard.select_recent(entry)

    def _on_source_chosen(self, source: SourceKind) -> None:
        self._wizard.choose_source(source)

    def _on_channel_chosen(self, channel: ChannelKind) -> None:
        self._wizard.choose_channel(channel)

    def _on_config_submitted(self, fields: dict[str, str], ngrok_token: str) -> None:
        """Save the form; keep the page and show the error if that fails."""
        try:
            self._wizard.submit_config(fields, ngrok_token)
        except ValidationError as e:
            logger.info("Config rejected: %s", e)
            self._config.show_error(str(e))
        except PersistenceError as e:
            logger.error("Config not saved: %s", e)
            self._config.show_error(str(e))

    def _on_settings_changed(self) -> None:
        self._controller.set_stop_grace_ms(self._prefs.get_stop_grace_ms())
        self.set_hide_to_tray(self._prefs.get_close_to_tray())
        self.preferences_applied.emit()

    def _on_copy_url(self) -> None:
        if self._controller.copy_public_url():
            self._bridge.show_copied()

    # -- Controller handlers -----------------------------------------------------

    def _on_bridge_state_changed(self, state: str) -> None:
        self._bridge.set_state(BridgeState(state))
        if state == BridgeState.STARTING:
            self._bridge.set_logs(self._controller.logs)
        if self._wizard.view == View.WELCOME:
            self._welcome.set_bridge_running(state != BridgeState.NOT_STARTED)

    def _on_log_appended(self, entry: LogEntry) -> None:
        self._bridge.append_log(entry)

    def _on_bridge_stopped(self) -> None:
        """Leave the control screen once the bridge has stopped."""
        self._bridge.set_logs(())
        if self._wizard.view == View.BRIDGE_CONTROL:
            self._wizard.stop_confirmed()
        elif self._wizard.view == View.WELCOME:
            self._refresh_welcome()

    # -- Window behaviour --------------------------------------------------------

    def set_hide_to_tray(self, enabled: bool) -> None:
        """Enable or disable hiding to tray on close.

        Args:
            enabled: Whether closing the window hides it instead of quitting.
        """
        self._hide_to_tray = enabled

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        """Hide to tray if enabled, otherwise close.

        Args:
            event: The close event.
        """
        if self._hide_to_tray:
            event.ignore()
            self.hide()
        else:
            super().closeEvent(event)

    def toggle_visibility(self) -> None:
        """Toggle window visibility (for tray icon)."""
        if self.isVisible():
            self.hide()
        else:
            self.show()
            self.raise_()
            self.activateWindow()
