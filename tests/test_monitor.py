"""Tests for monitor module."""

import threading

from conftest import LSOF_HEADER, FakeInspector

from whattheport.monitor import PortMonitor, PortStarted, PortStopped, diff_ports
from whattheport.scanner import DEFAULT_ALLOWLIST, PortScanner, ScanConfig


def _listing(*ports: int, process: str = "node") -> str:
    lines = [LSOF_HEADER] + [
        f"{process} {100 + port} u 1u IPv4 0x1 0t0 TCP *:{port} (LISTEN)" for port in ports
    ]
    return "\n".join(lines)


def _monitor(inspector: FakeInspector, **kwargs) -> PortMonitor:
    return PortMonitor(PortScanner(inspector, max_workers=1), **kwargs)


def test_diff_ports():
    """Test started/stopped computation."""
    assert diff_ports({3000, 4000}, {4000, 5000}) == ([5000], [3000])
    assert diff_ports(set(), {3000}) == ([3000], [])
    assert diff_ports({3000}, {3000}) == ([], [])


def test_refresh_emits_transitions():
    """Test previous {3000, 4000} -> current {4000, 5000}."""
    inspector = FakeInspector(output=_listing(3000, 4000))
    monitor = _monitor(inspector)
    started: list[PortStarted] = []
    stopped: list[PortStopped] = []

    monitor.refresh()
    monitor.on_port_started(started.append)
    monitor.on_port_stopped(stopped.append)

    inspector.output = _listing(4000, 5000)
    ports = monitor.refresh()

    assert [p.port for p in ports] == [4000, 5000]
    assert started == [PortStarted(port=5000, process_name="node", pid=5100)]
    assert stopped == [PortStopped(port=3000)]
    assert monitor.previous_ports == {4000, 5000}
    assert monitor.ports == ports


def test_first_refresh_reports_everything_started(fake_inspector):
    """Test that the initial state is empty."""
    monitor = _monitor(fake_inspector)
    started: list[PortStarted] = []
    monitor.on_port_started(started.append)

    monitor.refresh()

    assert [e.port for e in started] == [3000, 5432, 8000]


def test_unchanged_scan_emits_nothing(fake_inspector):
    """Test idempotent reconciliation."""
    monitor = _monitor(fake_inspector)
    monitor.refresh()
    events: list = []
    monitor.on_port_started(events.append)
    monitor.on_port_stopped(events.append)

    monitor.refresh()

    assert events == []


def test_unsubscribe(fake_inspector):
    """Test that unsubscribed callbacks are not called."""
    monitor = _monitor(fake_inspector)
    events: list = []
    unsubscribe = monitor.on_port_started(events.append)
    unsubscribe()

    monitor.refresh()

    assert events == []


def test_failing_subscriber_does_not_break_cycle(fake_inspector):
    """Test that subscriber errors are swallowed."""
    monitor = _monitor(fake_inspector)
    received: list[PortStarted] = []

    def broken(event):
        raise RuntimeError("boom")

    monitor.on_port_started(broken)
    monitor.on_port_started(received.append)

    ports = monitor.refresh()

    assert len(received) == 3
    assert monitor.previous_ports == {p.port for p in ports}


def test_scan_error_keeps_previous_snapshot(fake_inspector):
    """Test that no exception escapes a scan cycle."""
    monitor = _monitor(fake_inspector)
    first = monitor.refresh()

    def explode(*args, **kwargs):
        raise RuntimeError("lsof exploded")

    monitor.scanner.scan = explode

    assert monitor.refresh() == first
    assert monitor.previous_ports == {3000, 5432, 8000}


def test_overlapping_refresh_returns_published_snapshot(fake_inspector):
    """Test the in-flight guard."""
    monitor = _monitor(fake_inspector)
    monitor.refresh()
    calls_before = fake_inspector.listing_calls

    monitor._scan_lock.acquire()
    try:
        ports = monitor.refresh()
    finally:
        monitor._scan_lock.release()

    assert ports == monitor.ports
    assert fake_inspector.listing_calls == calls_before


def test_configure_range_and_allowlist(fake_inspector):
    """Test configuration changes apply to the next scan."""
    monitor = _monitor(fake_inspector)

    monitor.configure(min_port=5000, max_port=9000)
    assert [p.port for p in monitor.refresh()] == [5432, 8000]

    monitor.configure(allowlist={"python3"})
    assert [p.port for p in monitor.refresh()] == [8000]


def test_configure_invalid_range_falls_back(fake_inspector):
    """Test that invalid bounds revert to defaults."""
    monitor = _monitor(fake_inspector)

    monitor.configure(min_port=9000, max_port=100)

    assert monitor.config == ScanConfig()


def test_allowlist_mutations_rescan(fake_inspector):
    """Test add/remove/reset trigger a scan and update results."""
    monitor = _monitor(fake_inspector)
    stopped: list[PortStopped] = []
    monitor.on_port_stopped(stopped.append)

    monitor.add("ControlCe")
    assert 7000 in monitor.previous_ports

    monitor.remove("ControlCe")
    assert 7000 not in monitor.previous_ports
    assert stopped == [PortStopped(port=7000)]

    monitor.allowlist.clear()
    monitor.reset_to_default()
    assert monitor.allowlist == set(DEFAULT_ALLOWLIST)
    assert [p.port for p in monitor.ports] == [3000, 5432, 8000]


def test_allowlist_mutations_persist(fake_inspector, mock_db):
    """Test allowlist changes are saved to the store."""
    monitor = PortMonitor(PortScanner(fake_inspector), store=mock_db)

    monitor.add("caddy")
    assert "caddy" in mock_db.get_allowlist()

    monitor.remove("node")
    assert "node" not in mock_db.get_allowlist()

    monitor.reset_to_default()
    assert mock_db.get_allowlist() is None


def test_from_store(fake_inspector, mock_db):
    """Test building a monitor from stored preferences."""
    mock_db.set_port_range(8000, 8100)
    mock_db.save_allowlist({"python3"})

    monitor = PortMonitor.from_store(mock_db, PortScanner(fake_inspector))

    assert monitor.config == ScanConfig(8000, 8100)
    assert monitor.allowlist == {"python3"}
    assert [p.port for p in monitor.refresh()] == [8000]


def test_stop_rescans_after_grace():
    """Test stop terminates and rescans."""
    inspector = FakeInspector(output=_listing(3000))
    monitor = _monitor(inspector)
    monitor.refresh()
    inspector.output = _listing()

    assert monitor.stop(3100, grace=0) is True
    assert inspector.terminated == [(3100, 15)]
    assert monitor.ports == []


def test_stop_failure_does_not_rescan():
    """Test a failed stop returns False without scanning."""
    inspector = FakeInspector(output=_listing(3000), terminate_result=False)
    monitor = _monitor(inspector)

    assert monitor.stop(3100, grace=0) is False
    assert inspector.listing_calls == 0


def test_run_iterations(fake_inspector):
    """Test the periodic loop."""
    monitor = _monitor(fake_inspector)

    monitor.run(interval=0, iterations=3)

    assert fake_inspector.listing_calls == 3


def test_run_stops_on_event(fake_inspector):
    """Test the loop exits once the stop event is set."""
    monitor = _monitor(fake_inspector)
    stop_event = threading.Event()
    monitor.on_port_started(lambda event: stop_event.set())

    monitor.run(interval=10, stop_event=stop_event)

    assert fake_inspector.listing_calls == 1


def test_allowlist_mutations_without_rescan(fake_inspector, mock_db):
    """Test rescan=False persists the change without scanning."""
    monitor = PortMonitor(PortScanner(fake_inspector), store=mock_db)

    monitor.add("caddy", rescan=False)
    monitor.remove("node", rescan=False)
    assert mock_db.get_allowlist() == (set(DEFAULT_ALLOWLIST) | {"caddy"}) - {"node"}

    monitor.reset_to_default(rescan=False)
    assert mock_db.get_allowlist() is None

    assert fake_inspector.listing_calls == 0
    assert monitor.ports == []
