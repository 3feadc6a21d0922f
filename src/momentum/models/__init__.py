"""Data models for channels, persisted configuration and recents."""

from momentum.models.channel import (
    CHANNELS,
    ChannelConfig,
    ChannelInfo,
    ChannelKind,
    FieldSpec,
    GmailConfig,
    SMSConfig,
    TelegramConfig,
    WhatsAppConfig,
    channel_info,
    make_channel_config,
    parse_kind,
)
from momentum.models.config import ConfigUpdate, PersistedConfig, RecentChannelEntry, SourceKind

__all__ = [
    "CHANNELS",
    "ChannelConfig",
    "ChannelInfo",
    "ChannelKind",
    "ConfigUpdate",
    "FieldSpec",
    "GmailConfig",
    "PersistedConfig",
    "RecentChannelEntry",
    "SMSConfig",
    "SourceKind",
    "TelegramConfig",
    "WhatsAppConfig",
    "channel_info",
    "make_channel_config",
    "parse_kind",
]
