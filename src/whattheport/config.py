"""Configuration management for What The Port."""

import os
from pathlib import Path

import platformdirs

# Seconds between periodic scans
SCAN_INTERVAL_SECONDS = 2.0

# Seconds to wait after stopping a server before rescanning
STOP_GRACE_SECONDS = 0.5


def get_data_dir() -> Path:
    """Get the data directory for What The Port.

    WHATTHEPORT_DATA_DIR overrides the platform default.

    Returns:
        Path to data directory
    """
    override = os.getenv("WHATTHEPORT_DATA_DIR")
    if override:
        data_dir = Path(override)
    else:
        data_dir = Path(platformdirs.user_data_dir("whattheport", "whattheport"))
    data_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
    return data_dir


def get_db_path() -> Path:
    """Get the preferences database path.

    Returns:
        Path to database file
    """
    return get_data_dir() / "registry.db"


def get_log_path() -> Path:
    """Get the log file path.

    Returns:
        Path to log file
    """
    return get_data_dir() / "whattheport.log"
