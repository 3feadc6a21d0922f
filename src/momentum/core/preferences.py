"""Application preferences using QSettings for persistent storage.

Credentials and recent channels live in the JSON config file
(see ``config_store``); this module only holds UI and runtime preferences.
"""

import logging

from PySide6.QtCore import QSettings

from momentum.core.bridge_controller import DEFAULT_STOP_GRACE_MS

logger = logging.getLogger(__name__)

# Appearance
_KEY_THEME = "appearance/theme"
_THEMES = ("system", "dark", "light")

# Bridge
_KEY_BRIDGE_BINARY_PATH = "bridge/binary_path"
_KEY_STOP_GRACE_MS = "bridge/stop_grace_ms"
MIN_STOP_GRACE_MS = 500
MAX_STOP_GRACE_MS = 30_000

# Window
_KEY_CLOSE_TO_TRAY = "window/close_to_tray"


class PreferencesManager:
    """Wrapper around QSettings for type-safe preference access.

    QSettings stores preferences in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\Momentum\\Momentum
    - macOS: ~/Library/Preferences/com.Momentum.Momentum.plist
    - Linux: ~/.config/Momentum/Momentum.conf

    Example:
        prefs = PreferencesManager()
        controller.set_stop_grace_ms(prefs.get_stop_grace_ms())
    """

    def __init__(self, organization: str = "Momentum", application: str = "Momentum") -> None:
        """Initialize the preferences manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Appearance ------------------------------------------------------------

    def get_theme(self) -> str:
        """Return the theme preference.

        Returns:
            One of "system", "dark", "light". Default "system".
        """
        value = self._settings.value(_KEY_THEME, "system", str)
        return str(value) if value in _THEMES else "system"

    def set_theme(self, theme: str) -> None:
        """Set the theme preference.

        Args:
            theme: One of "system", "dark", "light".

        Raises:
            ValueError: If the theme is not recognized.
        """
        if theme not in _THEMES:
            msg = f"Unknown theme {theme!r} (expected one of {_THEMES})"
            raise ValueError(msg)
        self._settings.setValue(_KEY_THEME, theme)

    # -- Bridge ----------------------------------------------------------------

    def get_bridge_binary_path(self) -> str:
        """Return the user-configured bridge executable path.

        Returns:
            Path string, or empty string for auto-detection.
        """
        value = self._settings.value(_KEY_BRIDGE_BINARY_PATH, "", str)
        return str(value) if value else ""

    def set_bridge_binary_path(self, path: str) -> None:
        """Set a custom bridge executable path.

        Args:
            path: Path to the executable, or empty string for auto-detection.
        """
        self._settings.setValue(_KEY_BRIDGE_BINARY_PATH, path.strip())

    def get_stop_grace_ms(self) -> int:
        """Return how long to wait for the bridge to confirm a stop.

        Returns:
            Milliseconds (default 3000).
        """
        value = self._settings.value(_KEY_STOP_GRACE_MS, DEFAULT_STOP_GRACE_MS, int)
        return max(MIN_STOP_GRACE_MS, min(MAX_STOP_GRACE_MS, int(value)))  # type: ignore[arg-type]

    def set_stop_grace_ms(self, ms: int) -> None:
        """Set the stop confirmation grace period.

        Args:
            ms: Milliseconds (500-30000).
        """
        self._settings.setValue(
            _KEY_STOP_GRACE_MS, max(MIN_STOP_GRACE_MS, min(MAX_STOP_GRACE_MS, ms))
        )

    # -- Window ----------------------------------------------------------------

    def get_close_to_tray(self) -> bool:
        """Return whether closing the window hides it to the tray.

        Returns:
            True to keep running in the tray (default True).
        """
        return bool(self._settings.value(_KEY_CLOSE_TO_TRAY, True, bool))

    def set_close_to_tray(self, enabled: bool) -> None:
        """Enable or disable close-to-tray."""
        self._settings.setValue(_KEY_CLOSE_TO_TRAY, enabled)

    # -- General ---------------------------------------------------------------

    def clear(self) -> None:
        """Clear all preferences (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force preferences to be written to disk."""
        self._settings.sync()
