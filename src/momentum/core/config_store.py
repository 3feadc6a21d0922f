"""JSON-backed store for channel credentials and recent channels.

The store is the only writer of ``bridge-config.json``. Reads are lenient
(a missing or corrupt file yields an empty config) and writes are atomic
(temp file + rename), so callers never observe a half-written document.

Usage:
    from momentum.core.config_store import ConfigStore

    store = ConfigStore()
    config = store.load()
    store.save(ConfigUpdate(TelegramConfig("123:abc", "42"), ngrok_token="tok"))
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any, cast

from PySide6.QtCore import QStandardPaths

from momentum.core.errors import PersistenceError, ValidationError
from momentum.models.channel import ChannelConfig, ChannelKind, channel_info, make_channel_config
from momentum.models.config import ConfigUpdate, PersistedConfig, RecentChannelEntry, SourceKind

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "bridge-config.json"
MAX_RECENT_CHANNELS = 5

# Top-level keys that are not channel blocks
_KEY_NGROK_TOKEN = "ngrokToken"
_KEY_RECENTS = "recentChannels"
_KEY_CHANNEL = "channel"
_KEY_SOURCE = "source"


def default_config_path() -> Path:
    """Return the per-user location of the config file.

    - Windows: %APPDATA%/Momentum/bridge-config.json
    - macOS: ~/Library/Preferences/Momentum/bridge-config.json
    - Linux: ~/.config/Momentum/bridge-config.json
    """
    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppConfigLocation)
    base = Path(location) if location else Path.home() / ".config" / "Momentum"
    return base / CONFIG_FILENAME


def missing_fields(
    kind: ChannelKind | str,
    fields: Mapping[str, str],
    ngrok_token: str,
) -> tuple[str, ...]:
    """Return the keys that are empty or whitespace-only.

    Args:
        kind: Channel whose schema applies.
        fields: Field values keyed by JSON key.
        ngrok_token: Shared ngrok token.

    Returns:
        Missing keys in form order, ``"ngrokToken"`` first if the token is empty.
    """
    missing: list[str] = []
    if not ngrok_token.strip():
        missing.append(_KEY_NGROK_TOKEN)
    required = channel_info(kind).required_keys
    missing.extend(key for key in required if not fields.get(key, "").strip())
    return tuple(missing)


def is_valid(kind: ChannelKind | str, fields: Mapping[str, str], ngrok_token: str) -> bool:
    """Return True if the token and every required field of ``kind`` are non-empty."""
    return not missing_fields(kind, fields, ngrok_token)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_or(enum_cls: type[StrEnum], value: object, default: Any) -> Any:
    """Return ``enum_cls(value)``, or ``default`` for unknown values."""
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return default


class ConfigStore:
    """Load, merge and persist the bridge configuration.

    Example:
        store = ConfigStore(tmp_path / "bridge-config.json")
        store.save(update)
        assert store.load().get_channel(ChannelKind.TELEGRAM) == update.channel
    """

    def __init__(
        self,
        path: Path | str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the store.

        Args:
            path: Config file location. Defaults to the per-user config dir.
            clock: Source of "now" for recent-channel timestamps.
        """
        self._path = Path(path) if path is not None else default_config_path()
        self._clock = clock

    @property
    def path(self) -> Path:
        """Return the config file path."""
        return self._path

    def load(self) -> PersistedConfig:
        """Read the stored configuration.

        Returns:
            The parsed config, or an empty one if the file is missing or
            unreadable. Malformed channel blocks and recents are skipped.
        """
        raw = self._read_raw()
        if raw is None:
            return PersistedConfig()
        return self._parse(raw)

    def save(self, update: ConfigUpdate) -> PersistedConfig:
        """Merge ``update`` into the stored config and write it to disk.

        Other channels' credential blocks are kept as they are. The saved
        channel moves to the front of the recents list.

        Args:
            update: Channel credentials, ngrok token and source to save.

        Returns:
            The config as written.

        Raises:
            ValidationError: If the token or a required field is empty.
            PersistenceError: If the file could not be written. The
                previous file is left intact.
        """
        kind = update.kind
        missing = missing_fields(kind, update.channel.to_dict(), update.ngrok_token)
        if missing:
            msg = f"Cannot save {kind}: missing {', '.join(missing)}"
            raise ValidationError(msg, missing)

        current = self.load()
        channels: dict[ChannelKind, ChannelConfig] = dict(current.channels)
        channels[kind] = update.channel

        entry = RecentChannelEntry.for_kind(kind, self._clock())
        others = [r for r in current.recent_channels if r.config_key != kind]
        recents = (entry, *others)[:MAX_RECENT_CHANNELS]

        merged = PersistedConfig(
            channels=channels,
            ngrok_token=update.ngrok_token,
            recent_channels=recents,
            channel=kind,
            source=update.source,
        )
        self._write(merged.to_dict())
        logger.info("Saved %s configuration to %s", kind, self._path)
        return merged

    def recent_channels(self) -> list[RecentChannelEntry]:
        """Return recent channels, most recently used first."""
        return list(self.load().recent_channels)

    def clear(self) -> None:
        """Delete the config file (useful for testing or reset).

        Raises:
            PersistenceError: If the file exists but could not be removed.
        """
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            msg = f"Error removing config: {e}"
            raise PersistenceError(msg) from e

    def _read_raw(self) -> dict[str, Any] | None:
        """Read and decode the JSON document, or None if unusable."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read config %s: %s", self._path, e)
            return None

        if not text.strip():
            return None
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring malformed config %s: %s", self._path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not an object", self._path)
            return None
        return cast(dict[str, Any], data)

    def _parse(self, raw: dict[str, Any]) -> PersistedConfig:
        """Build a PersistedConfig, dropping entries that fail to parse."""
        channels: dict[ChannelKind, ChannelConfig] = {}
        for kind in ChannelKind:
            block = raw.get(str(kind))
            if block is None:
                continue
            if not isinstance(block, dict):
                logger.warning("Skipping %s block: not an object", kind)
                continue
            try:
                config = make_channel_config(kind, cast(dict[str, Any], block))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping invalid %s block: %s", kind, e)
                continue
            # Blank blocks written by older versions are not "configured"
            if any(config.to_dict().values()):
                channels[kind] = config

        recents: list[RecentChannelEntry] = []
        seen: set[ChannelKind] = set()
        raw_recents = raw.get(_KEY_RECENTS, [])
        if isinstance(raw_recents, list):
            for raw_entry in cast(list[object], raw_recents):
                if not isinstance(raw_entry, dict):
                    continue
                try:
                    entry = RecentChannelEntry.from_dict(cast(dict[str, Any], raw_entry))
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning("Skipping invalid recent channel entry: %s", e)
                    continue
                if entry.config_key in seen:
                    continue
                seen.add(entry.config_key)
                recents.append(entry)

        token = raw.get(_KEY_NGROK_TOKEN, "")
        channel_val = raw.get(_KEY_CHANNEL)
        source_val = raw.get(_KEY_SOURCE)
        return PersistedConfig(
            channels=channels,
            ngrok_token=token if isinstance(token, str) else "",
            recent_channels=tuple(recents[:MAX_RECENT_CHANNELS]),
            channel=_enum_or(ChannelKind, channel_val, None),
            source=_enum_or(SourceKind, source_val, SourceKind.AGENT),
        )

    def _write(self, data: dict[str, Any]) -> None:
        """Atomically replace the config file with ``data``.

        The temp file is created by mkstemp, so the credentials file ends
        up readable by the current user only.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".bridge-config-", suffix=".tmp", dir=self._path.parent
            )
        except OSError as e:
            msg = f"Error saving config: {e}"
            raise PersistenceError(msg) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            Path(tmp_name).replace(self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                Path(tmp_name).unlink()
            msg = f"Error saving config: {e}"
            raise PersistenceError(msg) from e
