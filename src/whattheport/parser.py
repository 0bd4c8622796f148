"""Parse lsof listings into listening socket records."""

from dataclasses import dataclass

# COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME
MIN_COLUMNS = 9


@dataclass(frozen=True)
class SocketRecord:
    """A listening socket as reported by lsof."""

    port: int
    pid: int
    process_name: str


def parse_line(line: str) -> SocketRecord | None:
    """Parse a single lsof line.

    The NAME field holds address:port and is followed by the "(LISTEN)"
    state column, so it is the second-to-last column. The port is whatever
    follows the last colon, which keeps IPv6 addresses like [::1]:3000
    working.

    Args:
        line: One line of lsof output (not the header)

    Returns:
        SocketRecord, or None if the line cannot be interpreted
    """
    cols = line.split()
    if len(cols) < MIN_COLUMNS:
        return None

    process_name = cols[0]
    try:
        pid = int(cols[1])
    except ValueError:
        return None

    name_field = cols[-2]
    _, colon, port_str = name_field.rpartition(":")
    if not colon:
        return None

    try:
        port = int(port_str)
    except ValueError:
        return None
    if not 1 <= port <= 65535:
        return None

    return SocketRecord(port=port, pid=pid, process_name=process_name)


def parse_listing(output: str) -> list[SocketRecord]:
    """Parse full lsof output.

    Unreadable lines are dropped. When several lines share a port (IPv4 and
    IPv6 sockets of the same server, for example), the first one wins.

    Args:
        output: Raw lsof output, first line is the header

    Returns:
        Records sorted ascending by port, one per port
    """
    records: dict[int, SocketRecord] = {}

    for line in output.splitlines()[1:]:  # Skip header
        record = parse_line(line)
        if record is None or record.port in records:
            continue
        records[record.port] = record

    return sorted(records.values(), key=lambda r: r.port)
