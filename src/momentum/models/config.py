"""Persisted configuration and recent-channel models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Self

from momentum.models.channel import ChannelConfig, ChannelKind, channel_info, parse_kind


class SourceKind(StrEnum):
    """Where agent requests come from."""

    AGENT = "agent"
    MCP = "mcp"


@dataclass(frozen=True)
class RecentChannelEntry:
    """A previously configured channel offered as a one-click resume.

    Attributes:
        name: Display name ("Telegram").
        icon: Icon glyph.
        config_key: Channel kind; join key into the credential blocks.
        last_used: Timezone-aware instant of the last successful save.
    """

    name: str
    icon: str
    config_key: ChannelKind
    last_used: datetime

    @classmethod
    def for_kind(cls, kind: ChannelKind, last_used: datetime) -> Self:
        """Create an entry using the catalogue name and icon for ``kind``."""
        info = channel_info(kind)
        return cls(name=info.name, icon=info.icon, config_key=kind, last_used=last_used)

    def to_dict(self) -> dict[str, str]:
        """Convert to JSON-serializable dict."""
        return {
            "name": self.name,
            "icon": self.icon,
            "config_key": str(self.config_key),
            "last_used": self.last_used.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Create an entry from its JSON dict.

        Naive timestamps are read as UTC.

        Raises:
            KeyError: If ``config_key`` or ``last_used`` is missing.
            ValueError: If the key or timestamp cannot be parsed.
        """
        kind = parse_kind(str(data["config_key"]))
        last_used = datetime.fromisoformat(str(data["last_used"]))
        if last_used.tzinfo is None:
            last_used = last_used.replace(tzinfo=UTC)
        info = channel_info(kind)
        return cls(
            name=str(data.get("name") or info.name),
            icon=str(data.get("icon") or info.icon),
            config_key=kind,
            last_used=last_used,
        )


@dataclass(frozen=True)
class ConfigUpdate:
    """A partial update produced by the Config page.

    Attributes:
        channel: Credentials for the channel being saved.
        ngrok_token: Shared ngrok auth token.
        source: Selected request source.
    """

    channel: ChannelConfig
    ngrok_token: str
    source: SourceKind = SourceKind.AGENT

    @property
    def kind(self) -> ChannelKind:
        """Return the kind of the channel being saved."""
        return self.channel.kind


@dataclass(frozen=True)
class PersistedConfig:
    """Everything the config store keeps on disk.

    Attributes:
        channels: Credential blocks, only for kinds the user configured.
        ngrok_token: Shared ngrok auth token (empty if never set).
        recent_channels: Most-recently-used first, one entry per kind.
        channel: Kind of the last saved channel, if any.
        source: Source selected at the last save.
    """

    channels: Mapping[ChannelKind, ChannelConfig] = field(default_factory=dict)
    ngrok_token: str = ""
    recent_channels: tuple[RecentChannelEntry, ...] = ()
    channel: ChannelKind | None = None
    source: SourceKind = SourceKind.AGENT

    @property
    def is_empty(self) -> bool:
        """Return True if nothing has been configured yet."""
        return not self.channels and not self.ngrok_token and not self.recent_channels

    def get_channel(self, kind: ChannelKind) -> ChannelConfig | None:
        """Return the stored credentials for ``kind``, or None."""
        return self.channels.get(kind)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk JSON document."""
        data: dict[str, Any] = {str(kind): cfg.to_dict() for kind, cfg in self.channels.items()}
        data["ngrokToken"] = self.ngrok_token
        if self.channel is not None:
            data["channel"] = str(self.channel)
        data["source"] = str(self.source)
        data["recentChannels"] = [entry.to_dict() for entry in self.recent_channels]
        return data
