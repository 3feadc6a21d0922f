"""Contract between the bridge controller and the bridge collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Self

from momentum.core.events import BridgeEvents

# Legacy collaborators report failure by returning a message containing this
_ERROR_MARKER = "Error"


@dataclass(frozen=True)
class BridgeOutcome:
    """Result of a bridge start request.

    Attributes:
        ok: Whether the bridge started.
        message: Human-readable outcome, kept for diagnostics.
    """

    ok: bool
    message: str = ""

    @classmethod
    def success(cls, message: str = "Bridge started successfully") -> Self:
        """Create a successful outcome."""
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str) -> Self:
        """Create a failed outcome."""
        return cls(ok=False, message=message)

    @classmethod
    def from_message(cls, message: str) -> Self:
        """Adapt a string-only result where "Error" in the text means failure."""
        return cls(ok=_ERROR_MARKER not in message, message=message)


class BridgeBackend(Protocol):
    """What the controller needs from whatever actually runs the bridge.

    ``start_bridge`` may block briefly (bounded) but ``stop_bridge`` must
    return immediately; stop completion is reported through the
    ``stopped`` event.
    """

    @property
    def events(self) -> BridgeEvents:
        """Event channel carrying log, publicURL and stopped events."""
        ...

    def start_bridge(self) -> BridgeOutcome:
        """Start the bridge and report whether it came up."""
        ...

    def stop_bridge(self) -> None:
        """Request the bridge to stop."""
        ...

    def is_running(self) -> bool:
        """Return True if a bridge is currently running."""
        ...
