"""Test fixtures and configuration."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from whattheport.db import Database

LSOF_HEADER = "COMMAND     PID   USER   FD   TYPE             DEVICE SIZE/OFF NODE NAME"

LSOF_OUTPUT = "\n".join(
    [
        LSOF_HEADER,
        "node      1234   dev   12u  IPv4 0x1a2b3c4d5e6f7a8b      0t0  TCP *:3000 (LISTEN)",
        "node      1234   dev   13u  IPv6 0x1a2b3c4d5e6f7a8c      0t0  TCP *:3000 (LISTEN)",
        "python3   2345   dev    5u  IPv4 0x2b3c4d5e6f7a8b9c      0t0  TCP 127.0.0.1:8000 (LISTEN)",
        "postgres   345   dev    7u  IPv6 0x3c4d5e6f7a8b9c0d      0t0  TCP [::1]:5432 (LISTEN)",
        "rapportd   456   dev    4u  IPv4 0x4d5e6f7a8b9c0d1e      0t0  TCP *:49152 (LISTEN)",
        "ControlCe  567   dev   10u  IPv4 0x5e6f7a8b9c0d1e2f      0t0  TCP *:7000 (LISTEN)",
        "",
    ]
)


class FakeInspector:
    """ProcessInspector stand-in driven by canned data."""

    def __init__(
        self,
        output: str = LSOF_OUTPUT,
        cwds: dict[int, str] | None = None,
        start_times: dict[int, datetime] | None = None,
        terminate_result: bool = True,
    ) -> None:
        self.output = output
        self.cwds = cwds or {}
        self.start_times = start_times or {}
        self.terminate_result = terminate_result
        self.listing_calls = 0
        self.terminated: list[tuple[int, int]] = []

    def list_listening_sockets(self) -> str:
        self.listing_calls += 1
        return self.output

    def working_directory(self, pid: int) -> str | None:
        return self.cwds.get(pid)

    def start_time(self, pid: int) -> datetime | None:
        return self.start_times.get(pid)

    def terminate(self, pid: int, sig: int = 15) -> bool:
        self.terminated.append((pid, sig))
        return self.terminate_result


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_db(temp_dir):
    """Database instance for tests."""
    db_path = temp_dir / "test.db"
    return Database(db_path)


@pytest.fixture
def fake_inspector():
    """Inspector returning the sample lsof listing."""
    return FakeInspector()
