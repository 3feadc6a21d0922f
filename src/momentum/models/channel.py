"""Notification channel catalogue and credential models.

Each channel kind has its own credential schema. The schema drives both
the validity gate in the config store and the form rendered on the
Config page, so field keys here are also the on-disk JSON keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Any, ClassVar, Self


class ChannelKind(StrEnum):
    """Supported notification channels (value is the persisted key)."""

    TELEGRAM = "telegram"
    WHATSAPP = "whatsapp"
    GMAIL = "gmail"
    SMS = "sms"


@dataclass(frozen=True)
class FieldSpec:
    """One credential input of a channel schema.

    Attributes:
        key: JSON key of the field in the channel block.
        label: Form label.
        placeholder: Example value shown in the empty input.
        hint: Short help text under the input.
        secret: Whether the input should be masked.
    """

    key: str
    label: str
    placeholder: str = ""
    hint: str = ""
    secret: bool = False


@dataclass(frozen=True)
class ChannelInfo:
    """Display metadata and credential schema for a channel kind.

    Attributes:
        kind: Channel kind.
        name: Display name.
        icon: Icon glyph used in lists and recents.
        description: One-line description for the channel picker.
        badge: Optional tag ("Recommended", "Popular").
        fields: Required credential fields, in form order.
    """

    kind: ChannelKind
    name: str
    icon: str
    description: str
    badge: str = ""
    fields: tuple[FieldSpec, ...] = ()

    @property
    def required_keys(self) -> tuple[str, ...]:
        """Return the JSON keys that must be non-empty."""
        return tuple(f.key for f in self.fields)


CHANNELS: dict[ChannelKind, ChannelInfo] = {
    ChannelKind.TELEGRAM: ChannelInfo(
        kind=ChannelKind.TELEGRAM,
        name="Telegram",
        icon="✈️",
        description="Instant bot notifications",
        badge="Recommended",
        fields=(
            FieldSpec(
                "bot_token",
                "Bot Token",
                "123456:ABC-DEF1234ghIkl-zyx57W2v",
                "Get this from @BotFather on Telegram",
                secret=True,
            ),
            FieldSpec("chat_id", "Chat ID", "123456789", "Your Telegram user/group ID"),
        ),
    ),
    ChannelKind.WHATSAPP: ChannelInfo(
        kind=ChannelKind.WHATSAPP,
        name="WhatsApp",
        icon="📞",
        description="Via CallMeBot API",
        badge="Popular",
        fields=(
            FieldSpec("api_key", "CallMeBot API Key", "123456", "Get this from callmebot.com"),
            FieldSpec("phone", "Your Phone Number", "+1234567890", "Include country code"),
        ),
    ),
    ChannelKind.GMAIL: ChannelInfo(
        kind=ChannelKind.GMAIL,
        name="Gmail",
        icon="✉️",
        description="Email notifications",
        fields=(
            FieldSpec("email", "Your Gmail Address", "you@gmail.com"),
            FieldSpec(
                "app_password",
                "App Password",
                "••••••••••••",
                "Generate in Google Account settings",
                secret=True,
            ),
        ),
    ),
    ChannelKind.SMS: ChannelInfo(
        kind=ChannelKind.SMS,
        name="SMS",
        icon="📱",
        description="Via Twilio",
        fields=(
            FieldSpec("twilio_sid", "Twilio Account SID", "ACxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx"),
            FieldSpec("twilio_token", "Auth Token", "••••••••••••", secret=True),
            FieldSpec("from", "Twilio Phone Number", "+1234567890", "Your Twilio number"),
            FieldSpec("to", "Your Phone Number", "+1234567890", "Where to send SMS"),
        ),
    ),
}


def parse_kind(value: str) -> ChannelKind:
    """Convert a persisted channel key to a ChannelKind.

    Raises:
        ValueError: If the key does not name a supported channel.
    """
    try:
        return ChannelKind(value)
    except ValueError:
        msg = f"Unknown channel kind: {value!r}"
        raise ValueError(msg) from None


def channel_info(kind: ChannelKind | str) -> ChannelInfo:
    """Return display metadata and schema for a channel kind."""
    return CHANNELS[parse_kind(kind)]


@dataclass(frozen=True)
class ChannelConfig:
    """Base class for per-channel credential blocks.

    Subclasses declare one string attribute per schema field. Attributes
    whose JSON key differs from the Python name carry ``metadata={"key": ...}``.
    """

    kind: ClassVar[ChannelKind]

    def to_dict(self) -> dict[str, str]:
        """Convert to the persisted JSON block."""
        return {f.metadata.get("key", f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a config from a persisted JSON block.

        Missing keys become empty strings; unknown keys are ignored.

        Raises:
            TypeError: If a present value is not a string.
        """
        kwargs: dict[str, str] = {}
        for f in fields(cls):
            value = data.get(f.metadata.get("key", f.name), "")
            if not isinstance(value, str):
                msg = f"{cls.kind} field {f.name!r} must be a string, got {type(value).__name__}"
                raise TypeError(msg)
            kwargs[f.name] = value
        return cls(**kwargs)

    @property
    def is_complete(self) -> bool:
        """Return True if every field is non-empty after trimming."""
        return all(value.strip() for value in self.to_dict().values())


@dataclass(frozen=True)
class TelegramConfig(ChannelConfig):
    """Telegram bot credentials."""

    kind: ClassVar[ChannelKind] = ChannelKind.TELEGRAM

    bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class WhatsAppConfig(ChannelConfig):
    """CallMeBot WhatsApp credentials."""

    kind: ClassVar[ChannelKind] = ChannelKind.WHATSAPP

    api_key: str = ""
    phone: str = ""


@dataclass(frozen=True)
class GmailConfig(ChannelConfig):
    """Gmail address and app password."""

    kind: ClassVar[ChannelKind] = ChannelKind.GMAIL

    email: str = ""
    app_password: str = ""


@dataclass(frozen=True)
class SMSConfig(ChannelConfig):
    """Twilio SMS credentials."""

    kind: ClassVar[ChannelKind] = ChannelKind.SMS

    twilio_sid: str = ""
    twilio_token: str = ""
    from_number: str = field(default="", metadata={"key": "from"})
    to_number: str = field(default="", metadata={"key": "to"})


_CONFIG_TYPES: dict[ChannelKind, type[ChannelConfig]] = {
    ChannelKind.TELEGRAM: TelegramConfig,
    ChannelKind.WHATSAPP: WhatsAppConfig,
    ChannelKind.GMAIL: GmailConfig,
    ChannelKind.SMS: SMSConfig,
}


def make_channel_config(kind: ChannelKind | str, data: dict[str, Any]) -> ChannelConfig:
    """Build the typed credential block for ``kind`` from a JSON-style dict.

    Raises:
        ValueError: If ``kind`` is not a supported channel.
        TypeError: If a field value is not a string.
    """
    return _CONFIG_TYPES[parse_kind(kind)].from_dict(data)
