"""Recently configured channels, for the one-click resume list on Welcome."""

from __future__ import annotations

import builtins
from datetime import UTC, datetime

from momentum.core.config_store import ConfigStore
from momentum.models.config import RecentChannelEntry

# Time thresholds for relative age display (in seconds)
_SECONDS_PER_MINUTE = 60
_SECONDS_PER_HOUR = 3600
_SECONDS_PER_DAY = 86400


def format_relative_age(last_used: datetime, now: datetime | None = None) -> str:
    """Format the age of ``last_used`` as a short human-readable string.

    Buckets: under a minute "just now", under an hour "Nm ago", under a
    day "Nh ago", otherwise "Nd ago". Timestamps in the future (clock
    skew) count as "just now".

    Args:
        last_used: Timezone-aware instant.
        now: Reference instant; defaults to the current time.
    """
    if now is None:
        now = datetime.now(UTC)
    seconds = int((now - last_used).total_seconds())
    if seconds < _SECONDS_PER_MINUTE:
        return "just now"
    if seconds < _SECONDS_PER_HOUR:
        return f"{seconds // _SECONDS_PER_MINUTE}m ago"
    if seconds < _SECONDS_PER_DAY:
        return f"{seconds // _SECONDS_PER_HOUR}h ago"
    return f"{seconds // _SECONDS_PER_DAY}d ago"


class RecentChannelsIndex:
    """Read-only view over the config store's recent channels.

    Nothing is cached: every call re-reads the store, and ages are
    computed at call time.
    """

    def __init__(self, store: ConfigStore) -> None:
        self._store = store

    def list(self) -> builtins.list[RecentChannelEntry]:
        """Return recent channels, most recently used first."""
        return self._store.recent_channels()

    def relative_age(self, entry: RecentChannelEntry, now: datetime | None = None) -> str:
        """Return how long ago ``entry`` was last used ("5m ago")."""
        return format_relative_age(entry.last_used, now)
