"""Tests for PreferencesManager using QSettings."""

import pytest

from momentum.core.bridge_controller import DEFAULT_STOP_GRACE_MS
from momentum.core.preferences import MAX_STOP_GRACE_MS, MIN_STOP_GRACE_MS, PreferencesManager


class TestDefaults:
    """Test values before anything is saved."""

    def test_theme(self, prefs: PreferencesManager) -> None:
        """Theme follows the system by default."""
        assert prefs.get_theme() == "system"

    def test_bridge_binary_path(self, prefs: PreferencesManager) -> None:
        """No custom path means auto-detection."""
        assert prefs.get_bridge_binary_path() == ""

    def test_stop_grace(self, prefs: PreferencesManager) -> None:
        """The grace period defaults to the controller default."""
        assert prefs.get_stop_grace_ms() == DEFAULT_STOP_GRACE_MS

    def test_close_to_tray(self, prefs: PreferencesManager) -> None:
        """Closing hides to tray by default."""
        assert prefs.get_close_to_tray() is True


class TestTheme:
    """Test the theme preference."""

    @pytest.mark.parametrize("theme", ["system", "dark", "light"])
    def test_round_trip(self, prefs: PreferencesManager, theme: str) -> None:
        """Known themes are stored."""
        prefs.set_theme(theme)
        assert prefs.get_theme() == theme

    def test_rejects_unknown(self, prefs: PreferencesManager) -> None:
        """Unknown themes raise ValueError."""
        with pytest.raises(ValueError, match="Unknown theme"):
            prefs.set_theme("solarized")

    def test_garbage_value_reads_as_system(self, prefs: PreferencesManager) -> None:
        """A corrupted stored value falls back to system."""
        prefs.settings.setValue("appearance/theme", "neon")
        assert prefs.get_theme() == "system"


class TestBridgePreferences:
    """Test bridge-related preferences."""

    def test_binary_path_is_stripped(self, prefs: PreferencesManager) -> None:
        """Surrounding whitespace is dropped."""
        prefs.set_bridge_binary_path("  /opt/momentum-bridge \n")
        assert prefs.get_bridge_binary_path() == "/opt/momentum-bridge"

    def test_stop_grace_round_trip(self, prefs: PreferencesManager) -> None:
        """An in-range value is kept."""
        prefs.set_stop_grace_ms(5000)
        assert prefs.get_stop_grace_ms() == 5000

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, MIN_STOP_GRACE_MS), (-10, MIN_STOP_GRACE_MS), (10**6, MAX_STOP_GRACE_MS)],
    )
    def test_stop_grace_clamped(self, prefs: PreferencesManager, value: int, expected: int) -> None:
        """Out-of-range values are clamped."""
        prefs.set_stop_grace_ms(value)
        assert prefs.get_stop_grace_ms() == expected


class TestWindowPreferences:
    """Test window preferences."""

    def test_close_to_tray_disabled(self, prefs: PreferencesManager) -> None:
        """Close-to-tray can be turned off."""
        prefs.set_close_to_tray(False)
        prefs.sync()
        assert prefs.get_close_to_tray() is False

    def test_clear_resets(self, prefs: PreferencesManager) -> None:
        """Clearing restores defaults."""
        prefs.set_close_to_tray(False)
        prefs.set_theme("dark")
        prefs.clear()
        assert prefs.get_close_to_tray() is True
        assert prefs.get_theme() == "system"
