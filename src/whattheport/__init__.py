"""What The Port - see which dev servers are listening on your ports."""

__version__ = "0.1.0"

from .db import Database
from .enricher import MetadataEnricher, extract_project_name
from .inspector import ProcessInspector
from .models import ListeningPort, format_uptime
from .monitor import PortMonitor, PortStarted, PortStopped, diff_ports
from .parser import SocketRecord, parse_line, parse_listing
from .scanner import DEFAULT_ALLOWLIST, PortScanner, ScanConfig, filter_ports

__all__ = [
    "__version__",
    "DEFAULT_ALLOWLIST",
    "Database",
    "ListeningPort",
    "MetadataEnricher",
    "PortMonitor",
    "PortScanner",
    "PortStarted",
    "PortStopped",
    "ProcessInspector",
    "ScanConfig",
    "SocketRecord",
    "diff_ports",
    "extract_project_name",
    "filter_ports",
    "format_uptime",
    "parse_line",
    "parse_listing",
]
