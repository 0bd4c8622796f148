"""Common utilities for CLI commands."""

from ..console import console, debug, error, error_console, info, success, warning
from ..db import Database
from ..monitor import PortMonitor

# Re-export console utilities
__all__ = [
    "console",
    "error_console",
    "debug",
    "info",
    "success",
    "warning",
    "error",
    "get_db",
    "get_monitor",
]


def get_db() -> Database:
    """Get database instance."""
    return Database()


def get_monitor() -> PortMonitor:
    """Get a monitor configured from stored preferences."""
    return PortMonitor.from_store(get_db())
