"""Tests for the bridge lifecycle controller."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from conftest import FakeBackend, FakeClock
from PySide6.QtGui import QGuiApplication
from pytestqt.qtbot import QtBot

from momentum.core.backend import BridgeOutcome
from momentum.core.bridge_controller import (
    DEFAULT_STOP_GRACE_MS,
    BridgeController,
    BridgeState,
    LogEntry,
)

URL = "https://abc123.ngrok-free.app"


def _running(controller: BridgeController, qtbot: QtBot) -> None:
    with qtbot.waitSignal(controller.started, timeout=1000):
        assert controller.start()


class TestBridgeOutcome:
    """Test outcome construction."""

    def test_from_message(self) -> None:
        """A message containing "Error" is a failure."""
        assert BridgeOutcome.from_message("Bridge started successfully").ok
        assert not BridgeOutcome.from_message("Error: ngrok token missing").ok

    def test_factories(self) -> None:
        """success/failure set ok accordingly."""
        assert BridgeOutcome.success().ok
        failed = BridgeOutcome.failure("Error: boom")
        assert not failed.ok
        assert failed.message == "Error: boom"


class TestBridgeControllerInit:
    """Test defaults."""

    def test_initial_state(self, backend: FakeBackend) -> None:
        """Controller starts stopped with no logs or URL."""
        controller = BridgeController(backend)
        assert controller.state is BridgeState.NOT_STARTED
        assert controller.is_running is False
        assert controller.logs == ()
        assert controller.public_url is None
        assert controller.stop_grace_ms == DEFAULT_STOP_GRACE_MS

    def test_invalid_grace(self, backend: FakeBackend) -> None:
        """The grace period must be positive."""
        controller = BridgeController(backend)
        with pytest.raises(ValueError, match="must be positive"):
            controller.set_stop_grace_ms(0)
        assert controller.stop_grace_ms == DEFAULT_STOP_GRACE_MS

    def test_refresh_adopts_running_bridge(self, backend: FakeBackend) -> None:
        """A bridge that is already up is shown as running."""
        backend.running = True
        controller = BridgeController(backend)

        assert controller.refresh_from_backend() is True
        assert controller.state is BridgeState.RUNNING

    def test_refresh_when_stopped(self, backend: FakeBackend) -> None:
        """Nothing changes if the collaborator reports no bridge."""
        controller = BridgeController(backend)
        assert controller.refresh_from_backend() is False
        assert controller.state is BridgeState.NOT_STARTED


class TestBridgeControllerStart:
    """Test start requests."""

    def test_start_is_deferred(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """start() returns before the collaborator is called."""
        controller = BridgeController(backend)
        states: list[str] = []
        controller.state_changed.connect(states.append)

        with qtbot.waitSignal(controller.started, timeout=1000):
            assert controller.start() is True
            assert controller.state is BridgeState.STARTING
            assert backend.start_calls == 0

        assert controller.state is BridgeState.RUNNING
        assert states == ["starting", "running"]
        assert backend.start_calls == 1

    def test_double_start_calls_backend_once(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """A second start while starting is ignored."""
        controller = BridgeController(backend)
        with qtbot.waitSignal(controller.started, timeout=1000):
            assert controller.start() is True
            assert controller.start() is False

        assert controller.start() is False
        assert backend.start_calls == 1

    def test_start_failure(self, qtbot: QtBot, clock: FakeClock) -> None:
        """A failed start returns to NOT_STARTED and logs the reason."""
        backend = FakeBackend(BridgeOutcome.failure("Error: ngrok token is not configured"))
        controller = BridgeController(backend, clock=clock)

        with qtbot.waitSignal(controller.start_failed, timeout=1000) as blocker:
            controller.start()

        assert blocker.args == ["Error: ngrok token is not configured"]
        assert controller.state is BridgeState.NOT_STARTED
        assert [e.message for e in controller.logs] == ["❌ Error: ngrok token is not configured"]

    def test_start_exception_is_a_failure(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """An exception from the collaborator is reported like a failed start."""
        backend.start_error = RuntimeError("boom")
        controller = BridgeController(backend)

        with qtbot.waitSignal(controller.start_failed, timeout=1000) as blocker:
            controller.start()

        assert blocker.args == ["Error starting bridge: boom"]
        assert controller.state is BridgeState.NOT_STARTED

    def test_exit_during_start(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """A bridge that exits while starting ends up stopped, not running."""
        real_start = backend.start_bridge

        def start_then_exit() -> BridgeOutcome:
            outcome = real_start()
            backend.events.emit_stopped()
            return outcome

        backend.start_bridge = start_then_exit  # type: ignore[method-assign]
        controller = BridgeController(backend)

        with qtbot.waitSignal(controller.stopped, timeout=1000):
            controller.start()
        qtbot.wait(10)

        assert controller.state is BridgeState.NOT_STARTED


class TestBridgeControllerEvents:
    """Test log and public URL handling."""

    def test_logs_stamped_in_order(
        self, backend: FakeBackend, clock: FakeClock, qtbot: QtBot
    ) -> None:
        """Log lines are kept in arrival order with receipt time."""
        controller = BridgeController(backend, clock=clock)
        _running(controller, qtbot)
        appended: list[LogEntry] = []
        controller.log_appended.connect(appended.append)

        backend.events.emit_log("first")
        clock.advance(seconds=1)
        backend.events.emit_log("second")

        assert [e.message for e in controller.logs] == ["first", "second"]
        assert controller.logs[1].received_at == clock.now
        assert appended == list(controller.logs)

    def test_time_label(self) -> None:
        """The label is local HH:MM:SS."""
        at = datetime(2024, 5, 1, 12, 34, 56, tzinfo=UTC)
        entry = LogEntry(at, "hello")
        assert entry.time_label == at.astimezone().strftime("%H:%M:%S")

    def test_public_url_while_running(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """The URL is recorded while the bridge runs."""
        controller = BridgeController(backend)
        _running(controller, qtbot)

        with qtbot.waitSignal(controller.public_url_changed) as blocker:
            backend.events.emit_public_url(f"  {URL} ")

        assert blocker.args == [URL]
        assert controller.public_url == URL

    def test_late_url_ignored(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """A URL arriving while stopped is dropped."""
        controller = BridgeController(backend)
        with qtbot.assertNotEmitted(controller.public_url_changed):
            backend.events.emit_public_url(URL)
        assert controller.public_url is None

    def test_copy_public_url(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """The URL goes to the clipboard."""
        controller = BridgeController(backend)
        assert controller.copy_public_url() is False

        _running(controller, qtbot)
        backend.events.emit_public_url(URL)
        assert controller.copy_public_url() is True
        assert QGuiApplication.clipboard().text() == URL

    def test_close_unsubscribes(self, backend: FakeBackend) -> None:
        """After close, bridge events are no longer observed."""
        controller = BridgeController(backend)
        controller.close()
        backend.events.emit_log("ignored")
        assert controller.logs == ()


class TestBridgeControllerStop:
    """Test stop requests and confirmation."""

    def test_stop_when_not_running(self, backend: FakeBackend) -> None:
        """Stop is ignored unless running."""
        controller = BridgeController(backend)
        assert controller.stop() is False
        assert backend.stop_calls == 0

    def test_confirmed_stop(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """A confirmed stop clears logs and URL."""
        controller = BridgeController(backend)
        _running(controller, qtbot)
        backend.events.emit_log("Tunnel Live: " + URL)
        backend.events.emit_public_url(URL)

        with qtbot.waitSignal(controller.stopped, timeout=1000):
            assert controller.stop() is True
            assert controller.state is BridgeState.STOPPING
            assert controller.stop() is False

        assert controller.state is BridgeState.NOT_STARTED
        assert controller.logs == ()
        assert controller.public_url is None
        assert controller.last_stop_timeout is None
        assert backend.stop_calls == 1

    def test_forced_stop_after_grace(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """Without confirmation the grace timer finalizes the stop."""
        backend.confirm_stop = False
        controller = BridgeController(backend, stop_grace_ms=50)
        _running(controller, qtbot)
        backend.events.emit_public_url(URL)

        with qtbot.waitSignal(controller.stopped, timeout=2000):
            controller.stop()

        assert controller.state is BridgeState.NOT_STARTED
        assert controller.public_url is None
        assert controller.last_stop_timeout is not None
        assert "50 ms" in str(controller.last_stop_timeout)

    def test_late_stopped_event_is_ignored(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """A stopped event after a forced stop does not stop twice."""
        backend.confirm_stop = False
        controller = BridgeController(backend, stop_grace_ms=50)
        _running(controller, qtbot)
        with qtbot.waitSignal(controller.stopped, timeout=2000):
            controller.stop()

        with qtbot.assertNotEmitted(controller.stopped):
            backend.events.emit_stopped()
        assert controller.state is BridgeState.NOT_STARTED

    def test_unexpected_exit(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """A bridge exiting on its own is treated as stopped."""
        controller = BridgeController(backend)
        _running(controller, qtbot)

        with qtbot.waitSignal(controller.stopped, timeout=1000):
            backend.events.emit_stopped()
        assert controller.state is BridgeState.NOT_STARTED

    def test_restart_after_stop(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """The bridge can be started again after a stop."""
        controller = BridgeController(backend)
        _running(controller, qtbot)
        with qtbot.waitSignal(controller.stopped, timeout=1000):
            controller.stop()

        _running(controller, qtbot)
        assert backend.start_calls == 2

    def test_late_log_from_previous_run_is_dropped(
        self, backend: FakeBackend, qtbot: QtBot
    ) -> None:
        """Output arriving after the stop does not leak into the next run."""
        controller = BridgeController(backend)
        _running(controller, qtbot)
        with qtbot.waitSignal(controller.stopped, timeout=1000):
            controller.stop()

        with qtbot.assertNotEmitted(controller.log_appended):
            backend.events.emit_log("old run: shutting down tunnel")
        assert controller.logs == ()

        _running(controller, qtbot)
        assert controller.logs == ()

    def test_retry_clears_failed_start_logs(self, backend: FakeBackend, qtbot: QtBot) -> None:
        """Starting again discards the log of the failed attempt."""
        backend.outcome = BridgeOutcome.failure("Error: ngrok token is not configured")
        controller = BridgeController(backend)
        with qtbot.waitSignal(controller.start_failed, timeout=1000):
            controller.start()
        assert len(controller.logs) == 1

        backend.outcome = BridgeOutcome.success("Bridge started (pid 1)")
        _running(controller, qtbot)
        assert controller.logs == ()
