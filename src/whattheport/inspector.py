"""Process inspection adapter for What The Port."""

import logging
import os
import signal
import subprocess
from datetime import datetime

logger = logging.getLogger(__name__)

# ps -o lstart format, e.g. "Mon Jan 13 08:30:00 2026"
LSTART_FORMAT = "%a %b %d %H:%M:%S %Y"


class ProcessInspector:
    """Run system utilities to inspect listening sockets and processes.

    Every call blocks on a subprocess. Failures never reach the caller:
    they degrade to empty text, None or False.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize inspector.

        Args:
            timeout: Seconds to wait for each utility. None waits forever.
        """
        self.timeout = timeout

    def list_listening_sockets(self) -> str:
        """List TCP sockets in LISTEN state.

        Returns:
            Raw lsof output (header included), or empty string if lsof
            could not be run
        """
        # lsof exits 1 when nothing matches, so the exit code is ignored
        result = self._run(["lsof", "-iTCP", "-sTCP:LISTEN", "-P", "-n"])
        if result is None:
            return ""
        return result.stdout

    def working_directory(self, pid: int) -> str | None:
        """Get the current working directory of a process.

        Args:
            pid: Process ID

        Returns:
            Absolute path or None if the process is gone or inaccessible
        """
        result = self._run(["lsof", "-a", "-p", str(pid), "-d", "cwd", "-Fn"])
        if result is None:
            return None

        # -F output: one field per line, "n" prefix carries the name.
        # Inaccessible processes report "n/proc/PID/cwd (readlink: ...)".
        for line in result.stdout.splitlines():
            if line.startswith("n") and len(line) > 1:
                name = line[1:]
                if os.path.isabs(name) and os.path.isdir(name):
                    return name
                logger.debug("Unusable cwd for pid %s: %r", pid, name)
                return None
        return None

    def start_time(self, pid: int) -> datetime | None:
        """Get the start time of a process.

        Args:
            pid: Process ID

        Returns:
            Local start time or None if it cannot be determined
        """
        env = dict(os.environ, LC_ALL="C")
        result = self._run(["ps", "-p", str(pid), "-o", "lstart="], env=env)
        if result is None or result.returncode != 0:
            return None
        return parse_lstart(result.stdout)

    def terminate(self, pid: int, sig: int = signal.SIGTERM) -> bool:
        """Send a termination signal to a process.

        Args:
            pid: Process ID
            sig: Signal number, SIGTERM by default

        Returns:
            True if the OS accepted the signal, False otherwise. This says
            nothing about whether the process has exited.
        """
        # 0 and negative PIDs address process groups
        if pid <= 0:
            logger.debug("Refusing to signal pid %s", pid)
            return False
        try:
            os.kill(pid, sig)
        except (OSError, OverflowError) as e:
            logger.debug("Could not signal pid %s: %s", pid, e)
            return False
        return True

    def _run(
        self, args: list[str], env: dict[str, str] | None = None
    ) -> subprocess.CompletedProcess[str] | None:
        """Run a utility and capture its output.

        Args:
            args: Command line
            env: Environment override

        Returns:
            Completed process or None if the utility could not be run
        """
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.debug("%s unavailable: %s", args[0], e)
            return None


def parse_lstart(text: str) -> datetime | None:
    """Parse a ps lstart timestamp.

    ps pads single-digit days with an extra space ("Mon Jan  3 ..."), so
    runs of whitespace are collapsed before parsing.

    Args:
        text: Raw ps output

    Returns:
        Parsed datetime or None
    """
    normalized = " ".join(text.split())
    if not normalized:
        return None
    try:
        return datetime.strptime(normalized, LSTART_FORMAT)
    except ValueError:
        logger.debug("Unparseable start time %r", text)
        return None
