"""Bridge subprocess runner using QProcess.

The default bridge collaborator. Launches the external bridge executable,
turns its output into ``log`` and ``publicURL`` events and its exit into a
``stopped`` event.

The executable is invoked as ``<binary> --config <config file>`` with the
ngrok token in ``NGROK_AUTHTOKEN``. It reads channel credentials from the
same JSON file the wizard writes.

While a bridge runs its pid is kept in ``momentum-bridge.pid`` next to the
config file. A bridge left behind by a crashed session is found through
that file and terminated before the next start.

Usage:
    process = BridgeProcess(store)
    process.events.subscribe("log", print)
    outcome = process.start_bridge()
"""

from __future__ import annotations

import logging
import os
import re
import signal
import subprocess
import time
from pathlib import Path

from PySide6.QtCore import QObject, QProcess, QProcessEnvironment, QTimer

from momentum.core.backend import BridgeOutcome
from momentum.core.bridge_binary import BRIDGE_BINARY_NAME, find_bridge, validate_bridge
from momentum.core.config_store import ConfigStore
from momentum.core.events import BridgeEvents

logger = logging.getLogger(__name__)

NGROK_TOKEN_ENV = "NGROK_AUTHTOKEN"

# Bounded wait for the OS to spawn the process
START_TIMEOUT_MS = 5000
# After SIGTERM, kill if the bridge is still alive
KILL_TIMEOUT_MS = 3000

# Written next to the config file while a bridge runs
PIDFILE_NAME = "momentum-bridge.pid"
_STALE_POLL_S = 0.1

_TUNNEL_LIVE_RE = re.compile(r"Tunnel Live:\s*(\S+)")
_NGROK_URL_RE = re.compile(r"https://\S*ngrok\S*")


def extract_public_url(line: str) -> str | None:
    """Return the public tunnel URL announced in ``line``, if any."""
    match = _TUNNEL_LIVE_RE.search(line)
    if match:
        return match.group(1)
    match = _NGROK_URL_RE.search(line)
    if match:
        return match.group(0).rstrip(".,;)")
    return None


def _is_bridge_pid(pid: int) -> bool:
    """Return True if ``pid`` is a live bridge process.

    Checks the process name so a recycled pid is never mistaken for a
    bridge. Without ``ps`` nothing is reported as running.
    """
    try:
        result = subprocess.run(
            ["ps", "-p", str(pid), "-o", "comm="],
            capture_output=True,
            text=True,
            timeout=1,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False
    if result.returncode != 0:
        return False
    return Path(result.stdout.strip()).name == BRIDGE_BINARY_NAME


class BridgeProcess(QObject):
    """Runs the bridge executable as a child process.

    Uses QProcess for Qt event loop integration, so output and exit
    arrive on the GUI thread without extra threads.

    Example:
        process = BridgeProcess(store, configured_binary_path="/opt/bridge")
        controller = BridgeController(process)
    """

    def __init__(
        self,
        store: ConfigStore,
        configured_binary_path: str | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._configured_binary_path = configured_binary_path
        self._events = BridgeEvents(self)
        self._process: QProcess | None = None
        self._kill_timer = QTimer(self)
        self._kill_timer.setSingleShot(True)
        self._kill_timer.timeout.connect(self._on_kill_timeout)

    @property
    def events(self) -> BridgeEvents:
        """Return the event channel."""
        return self._events

    @property
    def pidfile_path(self) -> Path:
        """Return the file recording the pid of the running bridge."""
        return self._store.path.with_name(PIDFILE_NAME)

    def set_configured_binary_path(self, path: str | None) -> None:
        """Set the user-configured executable path; it takes precedence."""
        self._configured_binary_path = path or None

    def is_running(self) -> bool:
        """Return True if the bridge process is alive."""
        return (
            self._process is not None and self._process.state() != QProcess.ProcessState.NotRunning
        )

    def start_bridge(self) -> BridgeOutcome:
        """Launch the bridge executable.

        Blocks for at most START_TIMEOUT_MS while the process spawns.

        Returns:
            Outcome with a user-facing message.
        """
        if self.is_running():
            return BridgeOutcome.failure("Error: bridge is already running")

        stale_pid = self.kill_stale_bridge()
        if stale_pid is not None:
            self._events.emit_log(f"Stopped leftover bridge (pid {stale_pid})")

        config = self._store.load()
        if not config.ngrok_token.strip():
            return BridgeOutcome.failure("Error: ngrok token is not configured")
        if not config.channels:
            return BridgeOutcome.failure("Error: no notification channel is configured")

        binary = find_bridge(self._configured_binary_path)
        if binary is None:
            return BridgeOutcome.failure(f"Error: {BRIDGE_BINARY_NAME} executable not found")

        is_valid, version_or_error = validate_bridge(binary)
        if not is_valid:
            return BridgeOutcome.failure(f"Error: invalid bridge executable: {version_or_error}")
        logger.info("Using %s %s at %s", BRIDGE_BINARY_NAME, version_or_error, binary)

        if self._process is not None:
            self._cleanup_process()

        env = QProcessEnvironment.systemEnvironment()
        env.insert(NGROK_TOKEN_ENV, config.ngrok_token)

        self._process = QProcess(self)
        self._process.setProcessChannelMode(QProcess.ProcessChannelMode.MergedChannels)
        self._process.setProcessEnvironment(env)
        self._process.readyReadStandardOutput.connect(self._on_stdout)
        self._process.finished.connect(self._on_finished)
        self._process.errorOccurred.connect(self._on_error)

        args = ["--config", str(self._store.path)]
        logger.info("Starting bridge: %r %r", str(binary), args)
        self._process.start(str(binary), args)

        if not self._process.waitForStarted(START_TIMEOUT_MS):
            reason = self._process.errorString()
            self._cleanup_process()
            return BridgeOutcome.failure(f"Error starting bridge: {reason}")

        pid = self._process.processId()
        self._write_pidfile(pid)
        return BridgeOutcome.success(f"Bridge started (pid {pid})")

    def kill_stale_bridge(self) -> int | None:
        """Terminate a bridge left running by an earlier session.

        Reads the pidfile of a previous run. A process that is still a
        bridge gets SIGTERM, then SIGKILL after KILL_TIMEOUT_MS. Blocks
        until it is gone, so two bridges never compete for the tunnel.

        Returns:
            The pid that was stopped, or None if there was nothing to stop.
        """
        if self.is_running():
            return None

        pidfile = self.pidfile_path
        try:
            pid = int(pidfile.read_text(encoding="utf-8").strip())
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable pidfile %s: %s", pidfile, e)
            self._remove_pidfile()
            return None
        self._remove_pidfile()

        if not _is_bridge_pid(pid):
            logger.debug("Pidfile pointed at pid %d, which is not a bridge", pid)
            return None

        logger.warning("Stopping leftover bridge (pid %d)", pid)
        try:
            os.kill(pid, signal.SIGTERM)
            deadline = time.monotonic() + KILL_TIMEOUT_MS / 1000
            while _is_bridge_pid(pid):
                if time.monotonic() >= deadline:
                    logger.warning("Leftover bridge ignored SIGTERM, killing (pid %d)", pid)
                    os.kill(pid, signal.SIGKILL)
                    break
                time.sleep(_STALE_POLL_S)
        except ProcessLookupError:
            logger.debug("Leftover bridge (pid %d) already exited", pid)
        except PermissionError as e:
            logger.warning("Cannot stop leftover bridge (pid %d): %s", pid, e)
            return None
        return pid

    def stop_bridge(self) -> None:
        """Ask the bridge to exit (SIGTERM); returns immediately.

        The ``stopped`` event follows when the process exits. If it is
        still alive after KILL_TIMEOUT_MS it is killed.
        """
        if not self.is_running():
            logger.debug("Stop requested but bridge is not running")
            self._cleanup_process()
            self._events.emit_stopped()
            return

        assert self._process is not None
        logger.info("Stopping bridge (SIGTERM)")
        self._process.terminate()
        self._kill_timer.start(KILL_TIMEOUT_MS)

    def shutdown(self) -> None:
        """Terminate the bridge synchronously on application exit."""
        self._kill_timer.stop()
        if self._process is None:
            return
        if self.is_running():
            logger.info("Terminating bridge on exit")
            self._process.terminate()
            if not self._process.waitForFinished(KILL_TIMEOUT_MS):
                logger.warning("Bridge did not stop, killing")
                self._process.kill()
                self._process.waitForFinished(1000)
        self._cleanup_process()

    def _on_stdout(self) -> None:
        """Publish each output line as a log event."""
        if self._process is None:
            return

        raw = bytes(self._process.readAllStandardOutput().data())
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Bridge output contained invalid UTF-8, using replacement")
            text = raw.decode("utf-8", errors="replace")

        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            logger.debug("bridge: %s", line)
            self._events.emit_log(line)
            url = extract_public_url(line)
            if url:
                logger.info("Public URL: %s", url)
                self._events.emit_public_url(url)

    def _on_finished(self, exit_code: int, exit_status: QProcess.ExitStatus) -> None:
        """Handle process exit.

        Args:
            exit_code: Process exit code.
            exit_status: Qt exit status (Normal or Crash).
        """
        self._kill_timer.stop()
        if exit_status == QProcess.ExitStatus.CrashExit:
            logger.warning("Bridge crashed (exit code %d)", exit_code)
            self._events.emit_log(f"Bridge crashed (exit code {exit_code})")
        else:
            logger.info("Bridge exited (exit code %d)", exit_code)
            self._events.emit_log(f"Bridge exited (exit code {exit_code})")
        self._cleanup_process()
        self._events.emit_stopped()

    def _on_error(self, error: QProcess.ProcessError) -> None:
        """Report QProcess errors as log lines.

        Args:
            error: The process error type.
        """
        error_map = {
            QProcess.ProcessError.FailedToStart: "Failed to start bridge",
            QProcess.ProcessError.Timedout: "Bridge timed out",
            QProcess.ProcessError.WriteError: "Write error",
            QProcess.ProcessError.ReadError: "Read error",
            QProcess.ProcessError.UnknownError: "Unknown error",
        }
        if error == QProcess.ProcessError.Crashed:
            # Reported with the exit code once the process has finished
            logger.debug("Bridge crashed, waiting for finished")
            return
        msg = error_map.get(error, f"Process error: {error}")
        logger.error("Bridge error: %s", msg)
        self._events.emit_log(f"Error: {msg}")

    def _on_kill_timeout(self) -> None:
        if self.is_running():
            assert self._process is not None
            logger.warning("Bridge did not stop after SIGTERM, killing")
            self._process.kill()

    def _write_pidfile(self, pid: int) -> None:
        try:
            self.pidfile_path.write_text(f"{pid}\n", encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write pidfile %s: %s", self.pidfile_path, e)

    def _remove_pidfile(self) -> None:
        try:
            self.pidfile_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove pidfile %s: %s", self.pidfile_path, e)

    def _cleanup_process(self) -> None:
        """Clean up the QProcess instance."""
        if self._process is not None:
            try:
                self._process.readyReadStandardOutput.disconnect(self._on_stdout)
                self._process.finished.disconnect(self._on_finished)
                self._process.errorOccurred.disconnect(self._on_error)
            except RuntimeError:
                logger.debug("Signals already disconnected during cleanup")
            self._process.deleteLater()
            self._process = None
            self._remove_pidfile()
