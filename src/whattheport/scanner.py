"""Listening port scanner for What The Port."""

import logging
import signal
from collections.abc import Iterable, Set
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .enricher import MetadataEnricher
from .inspector import ProcessInspector
from .models import ListeningPort
from .parser import SocketRecord, parse_listing

logger = logging.getLogger(__name__)

DEFAULT_MIN_PORT = 3000
DEFAULT_MAX_PORT = 9999

# Common development process names
DEFAULT_ALLOWLIST: frozenset[str] = frozenset(
    {
        "node", "npm", "npx", "deno", "bun",  # JavaScript/TypeScript
        "Python", "python", "python3", "uvicorn", "gunicorn", "flask", "django",  # Python
        "ruby", "rails", "puma", "unicorn",  # Ruby
        "php", "php-fpm",  # PHP
        "java", "gradle", "mvn",  # Java
        "go", "air",  # Go
        "cargo", "rustc",  # Rust
        "dotnet",  # .NET
        "beam.smp", "elixir", "mix",  # Elixir/Erlang
        "nginx", "httpd", "apache",  # Web servers
        "postgres", "mysql", "redis-server", "mongod",  # Databases
        "docker-proxy",  # Docker
    }
)


@dataclass(frozen=True)
class ScanConfig:
    """Port range to monitor."""

    min_port: int = DEFAULT_MIN_PORT
    max_port: int = DEFAULT_MAX_PORT

    @classmethod
    def from_values(cls, min_port: Any = None, max_port: Any = None) -> "ScanConfig":
        """Build a config, falling back to defaults for invalid values.

        Each bound falls back on its own when unset, not an integer or
        outside 1-65535. If the resulting range is inverted, both fall back.

        Args:
            min_port: Lower bound
            max_port: Upper bound

        Returns:
            ScanConfig
        """
        low = _coerce_port(min_port, DEFAULT_MIN_PORT)
        high = _coerce_port(max_port, DEFAULT_MAX_PORT)
        if low > high:
            logger.debug("Inverted port range %s-%s, using defaults", low, high)
            return cls()
        return cls(min_port=low, max_port=high)


def _coerce_port(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        port = int(value)
    except (TypeError, ValueError):
        return default
    return port if 1 <= port <= 65535 else default


def filter_ports(
    records: Iterable[SocketRecord],
    min_port: int,
    max_port: int,
    allowlist: Set[str],
) -> list[SocketRecord]:
    """Keep records inside the port range whose process is allowlisted.

    Process names are matched exactly, without case folding.

    Args:
        records: Parsed socket records
        min_port: Lowest port to keep
        max_port: Highest port to keep
        allowlist: Allowed process names

    Returns:
        Matching records, input order preserved
    """
    return [
        r
        for r in records
        if min_port <= r.port <= max_port and r.process_name in allowlist
    ]


class PortScanner:
    """Discover listening ports owned by development processes."""

    def __init__(
        self,
        inspector: ProcessInspector | None = None,
        enricher: MetadataEnricher | None = None,
        max_workers: int = 4,
    ) -> None:
        """Initialize scanner.

        Args:
            inspector: Process inspector. Defaults to a new ProcessInspector.
            enricher: Metadata enricher. Defaults to one using the inspector.
            max_workers: Threads used to enrich ports. 1 enriches serially.
        """
        self.inspector = inspector or ProcessInspector()
        self.enricher = enricher or MetadataEnricher(self.inspector)
        self.max_workers = max(1, max_workers)

    def scan(
        self,
        min_port: int = DEFAULT_MIN_PORT,
        max_port: int = DEFAULT_MAX_PORT,
        allowlist: Set[str] = DEFAULT_ALLOWLIST,
    ) -> list[ListeningPort]:
        """Scan the system for monitored listening ports.

        Always re-runs lsof. Records are filtered before enrichment so that
        per-PID lookups only run for ports that will be reported.

        Args:
            min_port: Lowest port to report
            max_port: Highest port to report
            allowlist: Process names to report

        Returns:
            Ports sorted ascending, unique per port
        """
        output = self.inspector.list_listening_sockets()
        records = parse_listing(output)
        matched = filter_ports(records, min_port, max_port, allowlist)
        logger.debug(
            "Parsed %d listening ports, %d match %s-%s",
            len(records),
            len(matched),
            min_port,
            max_port,
        )
        return self._enrich_all(matched)

    def stop(self, pid: int, sig: int = signal.SIGTERM) -> bool:
        """Ask a process to terminate.

        Does not rescan. Callers should wait briefly before scanning again
        so the OS can release the socket.

        Args:
            pid: Process ID
            sig: Signal number

        Returns:
            True if the signal was delivered
        """
        return self.inspector.terminate(pid, sig)

    def _enrich_all(self, records: list[SocketRecord]) -> list[ListeningPort]:
        """Enrich records, preserving their order.

        Args:
            records: Records sorted by port

        Returns:
            ListeningPort list in the same order
        """
        now = datetime.now()
        if self.max_workers == 1 or len(records) <= 1:
            return [self.enricher.enrich(r, now) for r in records]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # map() yields results in submission order
            return list(executor.map(lambda r: self.enricher.enrich(r, now), records))
