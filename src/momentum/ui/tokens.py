"""Design tokens for spacing, sizing and typography.

Color tokens live in theme.py (ThemePalette). Layout tokens live here.

Usage:
    from momentum.ui.tokens import spacing, typography, sizing

    layout.setContentsMargins(spacing.xl, spacing.xl, spacing.xl, spacing.xl)
    title.setStyleSheet(f"font-size: {typography.display}pt;")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SpacingTokens:
    """Spacing scale based on a 4px base unit."""

    xs: int = 4  # Inside badges, icon gaps
    sm: int = 8  # Between form rows
    md: int = 12  # Card padding
    lg: int = 16  # Between cards
    xl: int = 24  # Page margins
    xxl: int = 40  # Above the Welcome title


@dataclass(frozen=True)
class TypographyTokens:
    """Font size scale in points and font family stacks."""

    font_family: str = "'Inter', 'SF Pro Text', 'Segoe UI', 'Helvetica Neue', sans-serif"
    mono_family: str = "'JetBrains Mono', 'SF Mono', 'Consolas', monospace"
    caption: int = 9  # Log timestamps, ages
    small: int = 10  # Hints, badges
    body: int = 11  # Default body text
    subtitle: int = 13  # Card titles
    title: int = 18  # Page titles
    display: int = 28  # Welcome title


@dataclass(frozen=True)
class SizingTokens:
    """Widget sizing constants in pixels."""

    border_radius_sm: int = 4  # Badges, inputs
    border_radius_md: int = 8  # Buttons
    border_radius_lg: int = 12  # Cards
    icon_lg: int = 32  # Card icons
    logo: int = 64  # Welcome logo
    button_height: int = 36  # Primary buttons
    card_min_height: int = 64  # Channel and source cards
    console_min_height: int = 180  # Live log console
    scrollbar_width: int = 8  # Scrollbar track width
    scrollbar_min_handle: int = 20  # Min scrollbar handle length
    window_min_width: int = 480
    window_min_height: int = 560


# Module-level singletons, import these in widgets
spacing = SpacingTokens()
typography = TypographyTokens()
sizing = SizingTokens()
