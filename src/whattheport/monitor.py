"""Port monitor - reconcile successive scans into start/stop events."""

import logging
import signal
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .config import SCAN_INTERVAL_SECONDS, STOP_GRACE_SECONDS
from .models import ListeningPort
from .scanner import DEFAULT_ALLOWLIST, PortScanner, ScanConfig

if TYPE_CHECKING:
    from .db import Database

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortStarted:
    """A port appeared since the previous scan."""

    port: int
    process_name: str
    pid: int
    project_name: str | None = None


@dataclass(frozen=True)
class PortStopped:
    """A port disappeared since the previous scan.

    Only the port number is known: the process is already gone.
    """

    port: int


StartedCallback = Callable[[PortStarted], None]
StoppedCallback = Callable[[PortStopped], None]


def diff_ports(previous: set[int], current: set[int]) -> tuple[list[int], list[int]]:
    """Compare two port sets.

    Args:
        previous: Ports from the previous scan
        current: Ports from the current scan

    Returns:
        (started, stopped) port lists, each sorted ascending
    """
    return sorted(current - previous), sorted(previous - current)


class PortMonitor:
    """Own the scan state and notify subscribers of port transitions.

    All state mutation happens inside refresh(), which is guarded so that
    overlapping calls never interleave.
    """

    def __init__(
        self,
        scanner: PortScanner | None = None,
        config: ScanConfig | None = None,
        allowlist: Iterable[str] | None = None,
        store: "Database | None" = None,
    ) -> None:
        """Initialize monitor.

        Args:
            scanner: Port scanner. Defaults to a new PortScanner.
            config: Port range. Defaults to 3000-9999.
            allowlist: Process names to monitor. Defaults to DEFAULT_ALLOWLIST.
            store: Preference store to persist allowlist changes to
        """
        self.scanner = scanner or PortScanner()
        self.config = config or ScanConfig()
        self.allowlist: set[str] = set(DEFAULT_ALLOWLIST if allowlist is None else allowlist)
        self.store = store

        self.ports: list[ListeningPort] = []
        self.previous_ports: set[int] = set()

        self._scan_lock = threading.Lock()
        self._started_callbacks: list[StartedCallback] = []
        self._stopped_callbacks: list[StoppedCallback] = []

    @classmethod
    def from_store(cls, store: "Database", scanner: PortScanner | None = None) -> "PortMonitor":
        """Build a monitor from persisted preferences.

        Args:
            store: Preference store
            scanner: Port scanner

        Returns:
            PortMonitor using the stored range and allowlist
        """
        return cls(
            scanner=scanner,
            config=store.get_scan_config(),
            allowlist=store.get_allowlist(),
            store=store,
        )

    def configure(
        self,
        min_port: int | None = None,
        max_port: int | None = None,
        allowlist: Iterable[str] | None = None,
    ) -> None:
        """Update the port range and/or allowlist.

        Bounds left as None keep their current value. Invalid bounds fall
        back to the defaults.

        Args:
            min_port: Lowest port to monitor
            max_port: Highest port to monitor
            allowlist: Replacement allowlist
        """
        if min_port is not None or max_port is not None:
            self.config = ScanConfig.from_values(
                self.config.min_port if min_port is None else min_port,
                self.config.max_port if max_port is None else max_port,
            )
        if allowlist is not None:
            self.allowlist = set(allowlist)

    def on_port_started(self, callback: StartedCallback) -> Callable[[], None]:
        """Subscribe to port started events.

        Returns:
            Function that removes the subscription
        """
        self._started_callbacks.append(callback)
        return lambda: _discard(self._started_callbacks, callback)

    def on_port_stopped(self, callback: StoppedCallback) -> Callable[[], None]:
        """Subscribe to port stopped events.

        Returns:
            Function that removes the subscription
        """
        self._stopped_callbacks.append(callback)
        return lambda: _discard(self._stopped_callbacks, callback)

    def refresh(self) -> list[ListeningPort]:
        """Run one scan cycle.

        If a cycle is already in flight, returns the last published
        snapshot without scanning.

        Returns:
            Current snapshot, sorted by port
        """
        if not self._scan_lock.acquire(blocking=False):
            logger.debug("Scan already in progress, skipping")
            return self.ports

        try:
            try:
                current = self.scanner.scan(
                    self.config.min_port, self.config.max_port, frozenset(self.allowlist)
                )
            except Exception:
                logger.warning("Scan failed, keeping previous snapshot", exc_info=True)
                return self.ports

            by_port = {p.port: p for p in current}
            started, stopped = diff_ports(self.previous_ports, set(by_port))

            self.previous_ports = set(by_port)
            self.ports = current

            for port in started:
                p = by_port[port]
                self._emit(
                    self._started_callbacks,
                    PortStarted(
                        port=p.port,
                        process_name=p.process_name,
                        pid=p.pid,
                        project_name=p.project_name,
                    ),
                )
            for port in stopped:
                self._emit(self._stopped_callbacks, PortStopped(port=port))

            return current
        finally:
            self._scan_lock.release()

    def stop(
        self,
        pid: int,
        grace: float = STOP_GRACE_SECONDS,
        rescan: bool = True,
        sig: int = signal.SIGTERM,
    ) -> bool:
        """Terminate a process and optionally rescan.

        Args:
            pid: Process ID
            grace: Seconds to wait before rescanning, so the socket is released
            rescan: Whether to refresh after a successful stop
            sig: Signal number

        Returns:
            True if the signal was delivered
        """
        stopped = self.scanner.stop(pid, sig)
        if stopped and rescan:
            if grace > 0:
                time.sleep(grace)
            self.refresh()
        return stopped

    def add(self, name: str, rescan: bool = True) -> None:
        """Add a process name to the allowlist.

        Args:
            name: Process name, matched exactly
            rescan: Whether to refresh after the change
        """
        self.allowlist.add(name)
        self._allowlist_changed(rescan)

    def remove(self, name: str, rescan: bool = True) -> None:
        """Remove a process name from the allowlist."""
        self.allowlist.discard(name)
        self._allowlist_changed(rescan)

    def reset_to_default(self, rescan: bool = True) -> None:
        """Restore the built-in allowlist."""
        self.allowlist = set(DEFAULT_ALLOWLIST)
        if self.store is not None:
            self.store.reset_allowlist()
        if rescan:
            self.refresh()

    def run(
        self,
        interval: float = SCAN_INTERVAL_SECONDS,
        stop_event: threading.Event | None = None,
        iterations: int | None = None,
    ) -> None:
        """Scan periodically until stopped.

        Args:
            interval: Seconds between scans
            stop_event: Event that ends the loop when set
            iterations: Number of cycles to run. None runs until stop_event.
        """
        stop_event = stop_event or threading.Event()
        count = 0
        while not stop_event.is_set():
            self.refresh()
            count += 1
            if iterations is not None and count >= iterations:
                break
            stop_event.wait(interval)

    def _allowlist_changed(self, rescan: bool) -> None:
        if self.store is not None:
            self.store.save_allowlist(self.allowlist)
        if rescan:
            self.refresh()

    def _emit(self, callbacks: list, event: PortStarted | PortStopped) -> None:
        """Deliver an event to subscribers.

        Failures are logged and not retried.
        """
        for callback in list(callbacks):
            try:
                callback(event)
            except Exception:
                logger.warning("Subscriber failed for %r", event, exc_info=True)


def _discard(callbacks: list, callback: Callable) -> None:
    if callback in callbacks:
        callbacks.remove(callback)
