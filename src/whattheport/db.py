"""Database layer for What The Port - SQLite-based preference store."""

import sqlite3
import threading
from collections.abc import Iterable
from pathlib import Path

from .config import get_db_path
from .scanner import ScanConfig


class Database:
    """SQLite store for the allowlist and monitored port range."""

    _lock = threading.Lock()

    def __init__(self, db_path: Path | None = None) -> None:
        """Initialize database connection.

        Args:
            db_path: Path to the SQLite database file. If None, uses default location.
        """
        if db_path is None:
            db_path = get_db_path()

        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema if not exists."""
        with self._lock, self._get_connection() as conn:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
            )
            if cursor.fetchone() is None:
                conn.executescript(
                    """
                    -- Version tracking
                    CREATE TABLE schema_version (
                        version INTEGER PRIMARY KEY
                    );
                    INSERT INTO schema_version VALUES (1);

                    -- Scalar preferences (min_port, max_port, allowlist_customized)
                    CREATE TABLE settings (
                        key TEXT PRIMARY KEY,
                        value TEXT
                    );

                    -- User allowlist, only used once customized
                    CREATE TABLE allowlist (
                        name TEXT PRIMARY KEY
                    );
                """
                )
                conn.commit()

    def get_setting(self, key: str) -> str | None:
        """Get a raw preference value.

        Args:
            key: Preference key

        Returns:
            Stored value or None if unset
        """
        with self._lock, self._get_connection() as conn:
            cursor = conn.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row["value"] if row else None

    def set_setting(self, key: str, value: str) -> None:
        """Set a raw preference value.

        Args:
            key: Preference key
            value: Value to store
        """
        with self._lock, self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            conn.commit()

    def get_scan_config(self) -> ScanConfig:
        """Get the monitored port range.

        Returns:
            ScanConfig (defaults for unset or invalid values)
        """
        return ScanConfig.from_values(
            self.get_setting("min_port"), self.get_setting("max_port")
        )

    def set_port_range(self, min_port: int, max_port: int) -> None:
        """Set the monitored port range.

        Args:
            min_port: Lowest port
            max_port: Highest port
        """
        self.set_setting("min_port", str(min_port))
        self.set_setting("max_port", str(max_port))

    def get_allowlist(self) -> set[str] | None:
        """Get the user allowlist.

        Returns:
            Set of process names, or None if never customized
        """
        if self.get_setting("allowlist_customized") != "1":
            return None
        with self._lock, self._get_connection() as conn:
            cursor = conn.execute("SELECT name FROM allowlist")
            return {row["name"] for row in cursor.fetchall()}

    def save_allowlist(self, names: Iterable[str]) -> None:
        """Replace the user allowlist.

        Args:
            names: Process names
        """
        with self._lock, self._get_connection() as conn:
            conn.execute("DELETE FROM allowlist")
            conn.executemany(
                "INSERT OR IGNORE INTO allowlist (name) VALUES (?)",
                [(name,) for name in names],
            )
            conn.execute(
                """
                INSERT INTO settings (key, value) VALUES ('allowlist_customized', '1')
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """
            )
            conn.commit()

    def reset_allowlist(self) -> None:
        """Forget the user allowlist so the built-in default applies."""
        with self._lock, self._get_connection() as conn:
            conn.execute("DELETE FROM allowlist")
            conn.execute("DELETE FROM settings WHERE key = 'allowlist_customized'")
            conn.commit()
