"""Event channel between the bridge collaborator and the controller.

Three topics, each delivered in emission order:

- ``log``: one line of bridge output (str)
- ``publicURL``: the tunnel URL, possibly re-sent if the tunnel changes (str)
- ``stopped``: the bridge has exited (no payload)

There is no ordering guarantee across topics: a ``stopped`` event can be
observed before a ``log`` line emitted earlier.

Usage:
    events = BridgeEvents()
    unsubscribe = events.subscribe(TOPIC_LOG, on_log)
    ...
    unsubscribe()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject, Signal, SignalInstance

logger = logging.getLogger(__name__)

TOPIC_LOG = "log"
TOPIC_PUBLIC_URL = "publicURL"
TOPIC_STOPPED = "stopped"
TOPICS = (TOPIC_LOG, TOPIC_PUBLIC_URL, TOPIC_STOPPED)

Unsubscribe = Callable[[], None]


class BridgeEvents(QObject):
    """Qt-signal backed event channel with unsubscribe handles.

    Signals:
        log: A line of bridge output.
        public_url: The public tunnel URL.
        stopped: The bridge process has exited.
    """

    log = Signal(str)
    public_url = Signal(str)
    stopped = Signal()

    def _signal_for(self, topic: str) -> SignalInstance:
        if topic == TOPIC_LOG:
            return self.log
        if topic == TOPIC_PUBLIC_URL:
            return self.public_url
        if topic == TOPIC_STOPPED:
            return self.stopped
        msg = f"Unknown bridge event topic: {topic!r} (expected one of {TOPICS})"
        raise ValueError(msg)

    def subscribe(self, topic: str, callback: Callable[..., Any]) -> Unsubscribe:
        """Subscribe ``callback`` to ``topic``.

        Args:
            topic: One of ``log``, ``publicURL``, ``stopped``.
            callback: Receives the event payload (none for ``stopped``).

        Returns:
            A handle that disconnects the callback. Calling it more than
            once is harmless.

        Raises:
            ValueError: If the topic is unknown.
        """
        signal = self._signal_for(topic)
        signal.connect(callback)
        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            try:
                signal.disconnect(callback)
            except (RuntimeError, TypeError):
                logger.debug("%s handler already disconnected", topic)

        return unsubscribe

    def emit_log(self, message: str) -> None:
        """Publish a log line."""
        self.log.emit(message)

    def emit_public_url(self, url: str) -> None:
        """Publish the public tunnel URL."""
        self.public_url.emit(url)

    def emit_stopped(self) -> None:
        """Publish that the bridge has exited."""
        self.stopped.emit()
