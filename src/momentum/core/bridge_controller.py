"""Bridge lifecycle controller.

Owns the runtime state of the bridge (not started, starting, running,
stopping), the live log and the discovered public URL. Start and stop
requests return immediately; the collaborator is called on the next
event-loop turn and results come back through its event channel.

Stopping is confirmed either by the bridge's ``stopped`` event or by the
grace timer, whichever comes first. Both paths end in ``_finalize_stop``,
which runs at most once per stop. A forced stop only means the UI moved
on: the bridge process may still be alive.

Usage:
    controller = BridgeController(BridgeProcess(store))
    controller.stopped.connect(wizard.stop_confirmed)
    controller.start()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtGui import QGuiApplication

from momentum.core.backend import BridgeBackend, BridgeOutcome
from momentum.core.errors import BridgeStartError, BridgeStopTimeout
from momentum.core.events import TOPIC_LOG, TOPIC_PUBLIC_URL, TOPIC_STOPPED, Unsubscribe

logger = logging.getLogger(__name__)

DEFAULT_STOP_GRACE_MS = 3000


class BridgeState(StrEnum):
    """Lifecycle states of the bridge."""

    NOT_STARTED = "not_started"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


@dataclass(frozen=True)
class LogEntry:
    """A line of bridge output stamped with local receipt time.

    Attributes:
        received_at: When the controller received the line.
        message: The line as emitted by the bridge.
    """

    received_at: datetime
    message: str

    @property
    def time_label(self) -> str:
        """Return the receipt time as local HH:MM:SS."""
        return self.received_at.astimezone().strftime("%H:%M:%S")


def _local_now() -> datetime:
    return datetime.now().astimezone()


class BridgeController(QObject):
    """Start/stop state machine for the bridge plus its log and URL.

    Signals:
        state_changed: New BridgeState value (str).
        log_appended: A LogEntry was added.
        public_url_changed: The public URL changed ("" when cleared).
        started: The bridge is running.
        start_failed: Starting failed (message).
        stopped: The bridge reached NOT_STARTED after a stop or exit.
    """

    state_changed = Signal(str)
    log_appended = Signal(object)
    public_url_changed = Signal(str)
    started = Signal()
    start_failed = Signal(str)
    stopped = Signal()

    def __init__(
        self,
        backend: BridgeBackend,
        stop_grace_ms: int = DEFAULT_STOP_GRACE_MS,
        clock: Callable[[], datetime] = _local_now,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the controller and subscribe to bridge events.

        Args:
            backend: Collaborator that runs the bridge.
            stop_grace_ms: How long to wait for a stop confirmation.
            clock: Source of receipt timestamps for log lines.
            parent: Qt parent object.
        """
        super().__init__(parent)
        self._backend = backend
        self._clock = clock
        self._state = BridgeState.NOT_STARTED
        self._logs: list[LogEntry] = []
        self._public_url: str | None = None
        self._last_stop_timeout: BridgeStopTimeout | None = None
        self._stop_grace_ms = DEFAULT_STOP_GRACE_MS
        self.set_stop_grace_ms(stop_grace_ms)

        self._stop_timer = QTimer(self)
        self._stop_timer.setSingleShot(True)
        self._stop_timer.timeout.connect(self._on_stop_timeout)

        events = backend.events
        self._unsubscribers: list[Unsubscribe] = [
            events.subscribe(TOPIC_LOG, self._on_log),
            events.subscribe(TOPIC_PUBLIC_URL, self._on_public_url),
            events.subscribe(TOPIC_STOPPED, self._on_stopped),
        ]

    @property
    def state(self) -> BridgeState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Return True while the bridge is running."""
        return self._state == BridgeState.RUNNING

    @property
    def logs(self) -> tuple[LogEntry, ...]:
        """Return received log lines in arrival order."""
        return tuple(self._logs)

    @property
    def public_url(self) -> str | None:
        """Return the discovered public URL, if any."""
        return self._public_url

    @property
    def stop_grace_ms(self) -> int:
        """Return the stop confirmation grace period in milliseconds."""
        return self._stop_grace_ms

    @property
    def last_stop_timeout(self) -> BridgeStopTimeout | None:
        """Return the timeout of the last stop if it had to be forced."""
        return self._last_stop_timeout

    def set_stop_grace_ms(self, ms: int) -> None:
        """Set the stop confirmation grace period.

        Raises:
            ValueError: If ``ms`` is not positive.
        """
        if ms <= 0:
            msg = f"Stop grace period must be positive, got {ms}"
            raise ValueError(msg)
        self._stop_grace_ms = ms

    def refresh_from_backend(self) -> bool:
        """Adopt a bridge that is already running (polled once at startup).

        Returns:
            True if a running bridge was adopted.
        """
        if self._state != BridgeState.NOT_STARTED or not self._backend.is_running():
            return False
        logger.info("Bridge already running, adopting it")
        self._set_state(BridgeState.RUNNING)
        return True

    def start(self) -> bool:
        """Request a bridge start.

        Only acts from NOT_STARTED; repeated calls while a start is in
        flight are ignored.

        Returns:
            True if a start was dispatched.
        """
        if self._state != BridgeState.NOT_STARTED:
            logger.debug("Ignoring start request in state %s", self._state)
            return False
        # Logs of a previous failed start are dropped
        self._logs.clear()
        self._set_state(BridgeState.STARTING)
        QTimer.singleShot(0, self._dispatch_start)
        return True

    def stop(self) -> bool:
        """Request a bridge stop.

        Only acts from RUNNING. The controller reaches NOT_STARTED when the
        bridge confirms or when the grace period runs out.

        Returns:
            True if a stop was dispatched.
        """
        if self._state != BridgeState.RUNNING:
            logger.debug("Ignoring stop request in state %s", self._state)
            return False
        self._set_state(BridgeState.STOPPING)
        self._last_stop_timeout = None
        self._stop_timer.start(self._stop_grace_ms)
        QTimer.singleShot(0, self._dispatch_stop)
        return True

    def copy_public_url(self) -> bool:
        """Copy the public URL to the clipboard.

        Returns:
            True if there was a URL to copy.
        """
        if not self._public_url:
            return False
        QGuiApplication.clipboard().setText(self._public_url)
        return True

    def close(self) -> None:
        """Unsubscribe from bridge events (component teardown)."""
        self._stop_timer.stop()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _dispatch_start(self) -> None:
        """Call the collaborator's start and apply the outcome."""
        if self._state != BridgeState.STARTING:
            return
        try:
            outcome = self._backend.start_bridge()
        except Exception as e:  # noqa: BLE001
            outcome = BridgeOutcome.failure(f"Error starting bridge: {e}")

        if not outcome.ok:
            error = BridgeStartError(outcome.message)
            logger.error("Bridge start failed: %s", error)
            self._append_log(f"❌ {outcome.message}")

        # The bridge may already have exited while starting
        if self._state != BridgeState.STARTING:
            return

        if outcome.ok:
            logger.info("Bridge started: %s", outcome.message)
            self._set_state(BridgeState.RUNNING)
            self.started.emit()
        else:
            self._set_public_url(None)
            self._set_state(BridgeState.NOT_STARTED)
            self.start_failed.emit(outcome.message)

    def _dispatch_stop(self) -> None:
        """Call the collaborator's stop."""
        if self._state != BridgeState.STOPPING:
            return
        try:
            self._backend.stop_bridge()
        except Exception:
            # The grace timer still finalizes the stop
            logger.exception("Bridge stop request failed")

    def _on_log(self, message: str) -> None:
        if self._state == BridgeState.NOT_STARTED:
            logger.debug("Ignoring log line while stopped: %s", message)
            return
        self._append_log(message)

    def _on_public_url(self, url: str) -> None:
        if self._state not in (BridgeState.STARTING, BridgeState.RUNNING):
            logger.debug("Ignoring public URL in state %s", self._state)
            return
        url = url.strip()
        if url:
            self._set_public_url(url)

    def _on_stopped(self) -> None:
        if self._state == BridgeState.NOT_STARTED:
            logger.debug("Ignoring stopped event, bridge already stopped")
            return
        if self._state != BridgeState.STOPPING:
            logger.warning("Bridge exited unexpectedly (state %s)", self._state)
        self._finalize_stop()

    def _on_stop_timeout(self) -> None:
        if self._state != BridgeState.STOPPING:
            return
        self._last_stop_timeout = BridgeStopTimeout(
            f"No stop confirmation within {self._stop_grace_ms} ms; "
            "the bridge process may still be running"
        )
        logger.warning("Forcing bridge stop: %s", self._last_stop_timeout)
        self._finalize_stop()

    def _finalize_stop(self) -> None:
        """Reset runtime state and announce the stop. Runs once per stop."""
        if self._state == BridgeState.NOT_STARTED:
            return
        self._stop_timer.stop()
        self._logs.clear()
        self._set_public_url(None)
        self._set_state(BridgeState.NOT_STARTED)
        logger.info("Bridge stopped")
        self.stopped.emit()

    def _append_log(self, message: str) -> None:
        entry = LogEntry(self._clock(), message)
        self._logs.append(entry)
        self.log_appended.emit(entry)

    def _set_public_url(self, url: str | None) -> None:
        if url != self._public_url:
            self._public_url = url
            self.public_url_changed.emit(url or "")

    def _set_state(self, state: BridgeState) -> None:
        """Update state and emit signal if changed."""
        if state != self._state:
            logger.debug("Bridge state: %s -> %s", self._state, state)
            self._state = state
            self.state_changed.emit(str(state))
