"""Tests for the command line parser."""

from pathlib import Path

import pytest

from momentum import __version__
from momentum.__main__ import build_parser


class TestBuildParser:
    """Test command line options."""

    def test_defaults(self) -> None:
        """No options means per-user config and auto-detected bridge."""
        parsed = build_parser().parse_args([])
        assert parsed.config is None
        assert parsed.bridge_binary is None
        assert parsed.debug is False

    def test_options(self) -> None:
        """Paths and debug are parsed."""
        parsed = build_parser().parse_args(
            ["--config", "/tmp/bridge-config.json", "--bridge-binary", "/opt/bridge", "--debug"]
        )
        assert parsed.config == Path("/tmp/bridge-config.json")
        assert parsed.bridge_binary == "/opt/bridge"
        assert parsed.debug is True

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--version prints the application version."""
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out
