"""Listening port model for What The Port."""

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True)
class ListeningPort:
    """A monitored listening port with its process metadata."""

    port: int
    pid: int
    process_name: str  # Command name from lsof, not the full path
    project_name: str | None
    working_directory: str | None
    start_time: datetime
    # True when start_time is the time of observation, not the real start
    start_time_estimated: bool = False

    @property
    def url(self) -> str:
        """Local URL of the server."""
        return f"http://localhost:{self.port}"

    @property
    def label(self) -> str:
        """Project name, or process name when unknown."""
        return self.project_name or self.process_name

    def uptime(self, now: datetime | None = None) -> timedelta:
        """Time since the process started.

        Unreliable while start_time_estimated is set: it reads 0s at first.
        """
        now = now or datetime.now()
        return max(now - self.start_time, timedelta(0))

    def to_dict(self) -> dict[str, Any]:
        """Serializable representation."""
        data = asdict(self)
        data["start_time"] = self.start_time.isoformat()
        return data


def format_uptime(start_time: datetime, now: datetime | None = None) -> str:
    """Format elapsed time compactly.

    Args:
        start_time: Process start time
        now: Reference time. Defaults to now.

    Returns:
        String like "42s", "5m", "2h 10m" or "3d 4h"

    Examples:
        30 seconds -> 30s
        90 minutes -> 1h 30m
        49 hours -> 2d 1h
    """
    now = now or datetime.now()
    elapsed = max(int((now - start_time).total_seconds()), 0)

    if elapsed < 60:
        return f"{elapsed}s"
    if elapsed < 3600:
        return f"{elapsed // 60}m"
    if elapsed < 86400:
        hours, minutes = elapsed // 3600, (elapsed % 3600) // 60
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"

    days, hours = elapsed // 86400, (elapsed % 86400) // 3600
    return f"{days}d {hours}h" if hours else f"{days}d"
