"""Tests for design tokens."""

import pytest

from momentum.ui.tokens import (
    SizingTokens,
    SpacingTokens,
    TypographyTokens,
    sizing,
    spacing,
    typography,
)


class TestSpacingTokens:
    """Test the spacing scale."""

    def test_scale_is_increasing(self) -> None:
        """Spacing grows monotonically from xs to xxl."""
        values = [spacing.xs, spacing.sm, spacing.md, spacing.lg, spacing.xl, spacing.xxl]
        assert values == sorted(values)
        assert len(set(values)) == len(values)

    def test_frozen(self) -> None:
        """Tokens are immutable."""
        with pytest.raises(AttributeError):
            spacing.sm = 999  # type: ignore[misc]

    def test_singleton_type(self) -> None:
        """The module-level instance is a SpacingTokens."""
        assert isinstance(spacing, SpacingTokens)


class TestTypographyTokens:
    """Test the type scale."""

    def test_scale_is_increasing(self) -> None:
        """Sizes grow from caption to display."""
        values = [
            typography.caption,
            typography.small,
            typography.body,
            typography.subtitle,
            typography.title,
            typography.display,
        ]
        assert values == sorted(values)

    def test_families_have_fallback(self) -> None:
        """Font stacks end with a generic family."""
        assert typography.font_family.endswith("sans-serif")
        assert typography.mono_family.endswith("monospace")
        assert isinstance(typography, TypographyTokens)


class TestSizingTokens:
    """Test sizing constants."""

    def test_radii_increasing(self) -> None:
        """Card corners are rounder than button and badge corners."""
        assert sizing.border_radius_sm < sizing.border_radius_md < sizing.border_radius_lg

    def test_window_minimum(self) -> None:
        """The window is taller than it is wide."""
        assert sizing.window_min_height > sizing.window_min_width
        assert isinstance(sizing, SizingTokens)
