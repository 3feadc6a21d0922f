"""Theme system with dark/light mode detection and a preference override.

Provides a ThemeManager singleton that detects the system color scheme,
exposes named color palettes and emits a signal on theme changes.

Usage:
    from momentum.ui.theme import theme_manager

    theme_manager.apply_preference("system")
    palette = theme_manager.palette
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from momentum.ui.tokens import sizing, spacing, typography

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThemePalette:
    """Named color palette for UI theming.

    All values are CSS color strings.
    """

    name: str  # "dark" or "light"

    # Backgrounds
    background: str  # Window background
    surface: str  # Cards, inputs
    surface_hover: str  # Card hover state
    console: str  # Log console background

    # Borders
    border: str
    border_focus: str  # Focused input

    # Text
    text: str
    text_secondary: str
    text_disabled: str

    # Status
    success: str  # Bridge running
    error: str  # Validation and start errors
    warning: str  # Stopping

    # Brand
    accent: str  # Primary buttons, links
    accent_hover: str
    accent_text: str  # Text on accent
    badge: str  # Channel badges ("Recommended")

    scrollbar: str
    scrollbar_hover: str


DARK_PALETTE = ThemePalette(
    name="dark",
    background="#18181b",
    surface="#27272a",
    surface_hover="#3f3f46",
    console="#0f0f12",
    border="#3f3f46",
    border_focus="#667eea",
    text="#e0e0e0",
    text_secondary="#a1a1aa",
    text_disabled="#52525b",
    success="#4CAF50",
    error="#F44336",
    warning="#FBBC05",
    accent="#667eea",
    accent_hover="#5568d3",
    accent_text="#ffffff",
    badge="#764ba2",
    scrollbar="#52525b",
    scrollbar_hover="#71717a",
)

LIGHT_PALETTE = ThemePalette(
    name="light",
    background="#f8f9fa",
    surface="#ffffff",
    surface_hover="#eef0ff",
    console="#f1f3f5",
    border="#dee2e6",
    border_focus="#5568d3",
    text="#1a1a1a",
    text_secondary="#555555",
    text_disabled="#aaaaaa",
    success="#388E3C",
    error="#D32F2F",
    warning="#E65100",
    accent="#5568d3",
    accent_hover="#4453b8",
    accent_text="#ffffff",
    badge="#653a8a",
    scrollbar="#bbbbbb",
    scrollbar_hover="#999999",
)

_PALETTES = {"dark": DARK_PALETTE, "light": LIGHT_PALETTE}


class ThemeManager(QObject):
    """Manages the application theme and reacts to system changes.

    The preference is one of "system", "dark" or "light". With "system" the
    palette follows the OS color scheme, including runtime changes.

    Example:
        theme_manager.apply_preference(prefs.get_theme())
        theme_manager.theme_changed.connect(page.refresh_style)
    """

    theme_changed = Signal()

    def __init__(self) -> None:
        super().__init__()
        self._palette = DARK_PALETTE
        self._preference = "system"
        self._listening = False

    @property
    def palette(self) -> ThemePalette:
        """Return the current color palette."""
        return self._palette

    @property
    def preference(self) -> str:
        """Return the active preference ("system", "dark" or "light")."""
        return self._preference

    @property
    def is_dark(self) -> bool:
        """Return True if the current theme is dark."""
        return self._palette.name == "dark"

    def detect_system_theme(self) -> ThemePalette:
        """Detect the system color scheme and return the matching palette.

        Falls back to dark if detection is unavailable.
        """
        raw_app = QGuiApplication.instance()
        if raw_app is None:
            return DARK_PALETTE
        app = cast(QGuiApplication, raw_app)
        try:
            scheme = app.styleHints().colorScheme()
        except AttributeError:
            logger.debug("System theme detection not available, using dark theme")
            return DARK_PALETTE
        return LIGHT_PALETTE if scheme == Qt.ColorScheme.Light else DARK_PALETTE

    def apply_preference(self, preference: str) -> None:
        """Apply a theme preference.

        Args:
            preference: "system", "dark" or "light". Unknown values fall
                back to "system".
        """
        if preference not in ("system", *_PALETTES):
            logger.warning("Unknown theme preference %r, using system", preference)
            preference = "system"
        self._preference = preference
        if preference == "system":
            self.connect_system_theme_changes()
            self.apply_theme(self.detect_system_theme())
        else:
            self.apply_theme(_PALETTES[preference])

    def apply_theme(self, palette: ThemePalette) -> None:
        """Apply a palette to the application."""
        old_name = self._palette.name
        self._palette = palette
        logger.info("Theme applied: %s", palette.name)

        raw_app = QApplication.instance()
        if raw_app is not None:
            qapp = cast(QApplication, raw_app)
            qapp.setStyleSheet(self._global_stylesheet())

        if palette.name != old_name:
            self.theme_changed.emit()

    def connect_system_theme_changes(self) -> None:
        """Listen for runtime system theme changes (connects once)."""
        if self._listening:
            return
        raw_app = QGuiApplication.instance()
        if raw_app is None:
            return
        app = cast(QGuiApplication, raw_app)
        try:
            app.styleHints().colorSchemeChanged.connect(self._on_system_theme_changed)
        except AttributeError:
            logger.debug("System theme change signal not available")
            return
        self._listening = True
        logger.debug("Connected to system theme change signal")

    def _on_system_theme_changed(self) -> None:
        if self._preference != "system":
            return
        logger.info("System theme changed, re-applying")
        self.apply_theme(self.detect_system_theme())

    def _global_stylesheet(self) -> str:
        """Generate the application-wide stylesheet."""
        p = self._palette
        return f"""
            QWidget {{
                background-color: {p.background};
                color: {p.text};
                font-family: {typography.font_family};
                font-size: {typography.body}pt;
            }}
            QLineEdit, QSpinBox, QComboBox {{
                background-color: {p.surface};
                border: 1px solid {p.border};
                border-radius: {sizing.border_radius_sm}px;
                padding: {spacing.xs}px {spacing.sm}px;
            }}
            QLineEdit:focus, QSpinBox:focus, QComboBox:focus {{
                border-color: {p.border_focus};
            }}
            QPushButton {{
                background-color: {p.surface};
                border: 1px solid {p.border};
                border-radius: {sizing.border_radius_md}px;
                padding: {spacing.xs}px {spacing.md}px;
                min-height: {sizing.button_height - 2 * spacing.xs}px;
            }}
            QPushButton:hover {{
                background-color: {p.surface_hover};
            }}
            QPushButton:disabled {{
                color: {p.text_disabled};
            }}
            QPushButton[primary="true"] {{
                background-color: {p.accent};
                color: {p.accent_text};
                border: none;
                font-weight: bold;
            }}
            QPushButton[primary="true"]:hover {{
                background-color: {p.accent_hover};
            }}
            QPushButton[primary="true"]:disabled {{
                background-color: {p.surface_hover};
                color: {p.text_disabled};
            }}
            QToolTip {{
                background-color: {p.surface};
                color: {p.text};
                border: 1px solid {p.border};
                padding: {spacing.xs}px;
            }}
            QScrollBar:vertical {{
                background: {p.background};
                width: {sizing.scrollbar_width}px;
            }}
            QScrollBar::handle:vertical {{
                background: {p.scrollbar};
                min-height: {sizing.scrollbar_min_handle}px;
                border-radius: {sizing.scrollbar_width // 2}px;
            }}
            QScrollBar::handle:vertical:hover {{
                background: {p.scrollbar_hover};
            }}
            QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical {{
                height: 0px;
            }}
        """


# Module-level singleton, import this in widgets
theme_manager = ThemeManager()
