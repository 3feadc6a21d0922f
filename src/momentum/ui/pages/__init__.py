"""One page per wizard view."""

from momentum.ui.pages.bridge_control import BridgeControlPage
from momentum.ui.pages.channel_select import ChannelSelectPage
from momentum.ui.pages.config_page import ConfigPage
from momentum.ui.pages.settings import SettingsPage
from momentum.ui.pages.source_select import SourceSelectPage
from momentum.ui.pages.welcome import WelcomePage

__all__ = [
    "BridgeControlPage",
    "ChannelSelectPage",
    "ConfigPage",
    "SettingsPage",
    "SourceSelectPage",
    "WelcomePage",
]
