"""Shared fixtures for momentum tests."""

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from PySide6.QtWidgets import QApplication

from momentum.core.backend import BridgeOutcome
from momentum.core.config_store import ConfigStore
from momentum.core.events import BridgeEvents
from momentum.core.preferences import PreferencesManager
from momentum.models.channel import TelegramConfig
from momentum.models.config import ConfigUpdate

TELEGRAM_FIELDS = {"bot_token": "123456:ABC-DEF", "chat_id": "42"}
NGROK_TOKEN = "2abcNgrokToken"


class FakeClock:
    """Deterministic clock that advances only when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeBackend:
    """In-memory bridge collaborator recording every call."""

    def __init__(self, outcome: BridgeOutcome | None = None) -> None:
        self._events = BridgeEvents()
        self.outcome = outcome or BridgeOutcome.success()
        self.running = False
        self.start_calls = 0
        self.stop_calls = 0
        self.confirm_stop = True
        self.start_error: Exception | None = None

    @property
    def events(self) -> BridgeEvents:
        return self._events

    def start_bridge(self) -> BridgeOutcome:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error
        self.running = self.outcome.ok
        return self.outcome

    def stop_bridge(self) -> None:
        self.stop_calls += 1
        if self.confirm_stop:
            self.running = False
            self._events.emit_stopped()

    def is_running(self) -> bool:
        return self.running


@pytest.fixture(autouse=True)
def ensure_qapp(qapp: QApplication) -> QApplication:
    """Make sure a QApplication exists for timers and signals."""
    return qapp


@pytest.fixture
def clock() -> FakeClock:
    """Return a fixed clock starting at 2024-05-01 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Return a config file path inside a temp directory."""
    return tmp_path / "bridge-config.json"


@pytest.fixture
def store(config_path: Path, clock: FakeClock) -> ConfigStore:
    """Return a ConfigStore writing to a temp file."""
    return ConfigStore(config_path, clock=clock)


@pytest.fixture
def saved_store(store: ConfigStore) -> ConfigStore:
    """Return a store with a saved Telegram channel and ngrok token."""
    store.save(ConfigUpdate(TelegramConfig(**TELEGRAM_FIELDS), NGROK_TOKEN))
    return store


@pytest.fixture
def backend() -> FakeBackend:
    """Return a fake bridge collaborator that starts and stops cleanly."""
    return FakeBackend()


@pytest.fixture
def prefs() -> Generator[PreferencesManager, None, None]:
    """Return a fresh PreferencesManager for each test."""
    # Use unique organization/app to avoid touching real preferences
    manager = PreferencesManager("MomentumTest", "TestPreferences")
    manager.clear()
    yield manager
    manager.clear()
