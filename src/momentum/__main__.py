"""Main entry point for the Momentum application."""

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication

from momentum import __version__
from momentum.core.bridge_controller import BridgeController
from momentum.core.bridge_process import BridgeProcess
from momentum.core.config_store import ConfigStore
from momentum.core.preferences import PreferencesManager
from momentum.core.recents import RecentChannelsIndex
from momentum.core.wizard import WizardStateMachine
from momentum.ui.main_window import MainWindow
from momentum.ui.system_tray import SystemTrayManager
from momentum.ui.theme import theme_manager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="momentum",
        description="Momentum: set up and run the notification bridge for your AI agent",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="path to bridge-config.json (default: per-user config directory)",
    )
    parser.add_argument(
        "--bridge-binary",
        default=None,
        help="path to the momentum-bridge executable (overrides the saved preference)",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main() -> int:
    """Run the Momentum application.

    Returns:
        Exit code (0 for success).
    """
    # Set app metadata before creating QApplication (required for macOS)
    QApplication.setApplicationName("Momentum")
    QApplication.setApplicationDisplayName("Momentum")
    QApplication.setOrganizationName("Momentum")
    QApplication.setApplicationVersion(__version__)

    app = QApplication(sys.argv)
    parsed = build_parser().parse_args(app.arguments()[1:])

    logging.basicConfig(
        level=logging.DEBUG if parsed.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    prefs = PreferencesManager()
    theme_manager.apply_preference(prefs.get_theme())

    # Create core components
    store = ConfigStore(parsed.config)
    logger.info("Using config file %s", store.path)
    binary_path = parsed.bridge_binary or prefs.get_bridge_binary_path() or None
    process = BridgeProcess(store, configured_binary_path=binary_path)
    stale_pid = process.kill_stale_bridge()
    if stale_pid is not None:
        logger.info("Stopped bridge left over from a previous session (pid %d)", stale_pid)
    controller = BridgeController(process, stop_grace_ms=prefs.get_stop_grace_ms())
    wizard = WizardStateMachine(store)

    window = MainWindow(wizard, controller, RecentChannelsIndex(store), prefs)

    def on_preferences_applied() -> None:
        if not parsed.bridge_binary:
            process.set_configured_binary_path(prefs.get_bridge_binary_path())

    window.preferences_applied.connect(on_preferences_applied)

    # Set app icon
    icon_path = Path(__file__).parent.parent.parent / "resources" / "icon.svg"
    if icon_path.exists():
        app.setWindowIcon(QIcon(str(icon_path)))
        window.setWindowIcon(QIcon(str(icon_path)))

    window.show()

    # Set up system tray
    tray = SystemTrayManager(window, controller)
    if tray.available:
        tray.show()
    else:
        # Nowhere to hide to
        window.set_hide_to_tray(False)

    # Run the application
    exit_code = app.exec()

    # Cleanup
    tray.cleanup()
    controller.close()
    process.shutdown()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
