"""Core application logic.

Everything here is UI-agnostic: the wizard and bridge state machines,
persistence and the bridge subprocess. The UI layer only connects to
their signals and calls their methods.

Classes:
    ConfigStore: JSON persistence for credentials and recent channels.
    WizardStateMachine: Navigation between setup views.
    BridgeController: Bridge start/stop lifecycle, logs and public URL.
    BridgeProcess: Default bridge collaborator (QProcess).
    BridgeEvents: Event channel (log, publicURL, stopped).
    PreferencesManager: QSettings wrapper for application preferences.
"""

from momentum.core.backend import BridgeBackend, BridgeOutcome
from momentum.core.bridge_controller import BridgeController, BridgeState, LogEntry
from momentum.core.bridge_process import BridgeProcess
from momentum.core.config_store import ConfigStore, is_valid, missing_fields
from momentum.core.events import BridgeEvents
from momentum.core.preferences import PreferencesManager
from momentum.core.recents import RecentChannelsIndex, format_relative_age
from momentum.core.wizard import View, WizardStateMachine

__all__ = [
    "BridgeBackend",
    "BridgeController",
    "BridgeEvents",
    "BridgeOutcome",
    "BridgeProcess",
    "BridgeState",
    "ConfigStore",
    "LogEntry",
    "PreferencesManager",
    "RecentChannelsIndex",
    "View",
    "WizardStateMachine",
    "format_relative_age",
    "is_valid",
    "missing_fields",
]
