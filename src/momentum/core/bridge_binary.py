"""Bridge executable discovery and validation.

Locates the ``momentum-bridge`` executable: the user-configured path
first, then the copy bundled with the application, then the system PATH.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

BRIDGE_BINARY_NAME = "momentum-bridge"

# Version line pattern: "momentum-bridge v1.0.0"
VERSION_PREFIX = f"{BRIDGE_BINARY_NAME} v"
VERSION_TIMEOUT_S = 5


def bundled_bridge_path() -> Path:
    """Return the expected path for a bundled bridge executable.

    In a frozen build the executable ships in ``bin/`` next to the
    application. From source this points at ``<project>/bin``, which
    usually does not exist (caller should check).
    """
    if getattr(sys, "frozen", False):
        base = Path(sys._MEIPASS).resolve()  # type: ignore[attr-defined]  # noqa: SLF001
    else:
        base = Path(__file__).resolve().parents[3]
    return base / "bin" / BRIDGE_BINARY_NAME


def find_bridge(configured_path: str | None = None) -> Path | None:
    """Find the bridge executable.

    An explicitly configured path wins. A configured path that does not
    exist is reported and the usual locations are tried instead.

    Args:
        configured_path: Optional path from ``--bridge-binary`` or Settings.

    Returns:
        Path to the executable if found, None otherwise.
    """
    for source, candidate in _candidates(configured_path):
        if candidate.is_file():
            logger.debug("Using %s bridge: %s", source, candidate)
            return candidate
        if source == "configured":
            logger.warning("Configured bridge not found: %s", candidate)

    logger.info("%s executable not found", BRIDGE_BINARY_NAME)
    return None


def _candidates(configured_path: str | None) -> list[tuple[str, Path]]:
    """Return (source, path) pairs in lookup order."""
    candidates: list[tuple[str, Path]] = []
    if configured_path:
        candidates.append(("configured", Path(configured_path).expanduser()))
    candidates.append(("bundled", bundled_bridge_path()))
    system = shutil.which(BRIDGE_BINARY_NAME)
    if system is not None:
        candidates.append(("system", Path(system)))
    return candidates


def validate_bridge(path: Path) -> tuple[bool, str]:
    """Validate a bridge executable by running ``--version``.

    Args:
        path: Path to the executable.

    Returns:
        Tuple of (is_valid, version_string). On failure the second item
        is the error message.
    """
    if not path.is_file():
        return False, f"Invalid bridge path (not found): {path}"

    try:
        result = subprocess.run(
            [str(path.resolve(strict=True)), "--version"],
            capture_output=True,
            text=True,
            timeout=VERSION_TIMEOUT_S,
            check=False,
        )
    except FileNotFoundError:
        return False, f"Bridge not executable: {path}"
    except subprocess.TimeoutExpired:
        return False, "Timed out running --version"
    except OSError as e:
        return False, f"OS error: {e}"

    output = ((result.stdout or "") + (result.stderr or "")).strip()
    first_line = output.splitlines()[0] if output else ""
    if first_line.startswith(VERSION_PREFIX):
        version = first_line[len(VERSION_PREFIX) :].strip()
        logger.info("Validated %s %s at %s", BRIDGE_BINARY_NAME, version, path)
        return True, version
    return False, f"Unexpected output: {first_line}"
