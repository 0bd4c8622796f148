"""Process metadata enrichment for listening ports."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path

from .inspector import ProcessInspector
from .models import ListeningPort
from .parser import SocketRecord

logger = logging.getLogger(__name__)

PYPROJECT_NAME_RE = re.compile(r'name\s*=\s*"([^"]+)"')


class MetadataEnricher:
    """Attach working directory, project name and start time to records."""

    def __init__(self, inspector: ProcessInspector) -> None:
        """Initialize enricher.

        Args:
            inspector: Process inspector used for per-PID queries
        """
        self.inspector = inspector

    def enrich(self, record: SocketRecord, now: datetime | None = None) -> ListeningPort:
        """Resolve metadata for a socket record.

        Missing metadata never drops the record. An unresolved start time
        falls back to ``now`` and is flagged as estimated.

        Args:
            record: Parsed socket record
            now: Fallback start time. Defaults to the current time.

        Returns:
            ListeningPort for the record
        """
        working_directory = self.inspector.working_directory(record.pid)
        project_name = extract_project_name(working_directory)

        start_time = self.inspector.start_time(record.pid)
        estimated = start_time is None
        if start_time is None:
            start_time = now or datetime.now()

        return ListeningPort(
            port=record.port,
            pid=record.pid,
            process_name=record.process_name,
            project_name=project_name,
            working_directory=working_directory,
            start_time=start_time,
            start_time_estimated=estimated,
        )


def extract_project_name(working_directory: str | None) -> str | None:
    """Derive a human-friendly project name from a working directory.

    Lookup order:
    1. "name" in package.json
    2. name = "..." in pyproject.toml
    3. Parent directory name (servers often run from a src/ or app/ subdir)
    4. The directory's own name

    Args:
        working_directory: Process working directory

    Returns:
        Project name or None
    """
    if not working_directory:
        return None

    path = Path(working_directory)

    name = _read_package_json_name(path / "package.json")
    if name:
        return name

    name = _read_pyproject_name(path / "pyproject.toml")
    if name:
        return name

    return path.parent.name or path.name or None


def _read_package_json_name(file_path: Path) -> str | None:
    """Read the name field of a package.json file.

    Args:
        file_path: Path to package.json

    Returns:
        Package name or None if absent or unreadable
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError, RecursionError) as e:
        # RecursionError: pathologically nested JSON
        logger.debug("Ignoring unreadable %s: %s", file_path, e)
        return None

    if not isinstance(data, dict):
        return None
    name = data.get("name")
    return name if isinstance(name, str) and name else None


def _read_pyproject_name(file_path: Path) -> str | None:
    """Scan a pyproject.toml for its first name = "..." assignment.

    Args:
        file_path: Path to pyproject.toml

    Returns:
        Project name or None if absent or unreadable
    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug("Ignoring unreadable %s: %s", file_path, e)
        return None

    match = PYPROJECT_NAME_RE.search(content)
    return match.group(1) if match else None
