"""Console utilities for the what-the-port CLI."""

import logging
import os
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from .config import get_log_path

# Shared console instances
console = Console()
error_console = Console(stderr=True)

# Debug mode - enabled by WHATTHEPORT_DEBUG environment variable or --debug
DEBUG = os.getenv("WHATTHEPORT_DEBUG", "").lower() in ("1", "true", "yes")


def setup_logging(debug_mode: bool = False) -> None:
    """Route library logging to the console and log file.

    Without debug mode only warnings reach stderr and nothing is written
    to the log file.

    Args:
        debug_mode: Enable DEBUG level output
    """
    global DEBUG
    DEBUG = DEBUG or debug_mode

    logger = logging.getLogger("whattheport")
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.DEBUG if DEBUG else logging.WARNING)
    logger.addHandler(
        RichHandler(console=error_console, show_path=False, rich_tracebacks=True)
    )

    if DEBUG:
        file_handler = logging.FileHandler(get_log_path())
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)


def debug(message: str, **kwargs: Any) -> None:
    """Print debug message if DEBUG mode is enabled.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    if DEBUG:
        error_console.print(f"[dim][DEBUG][/dim] {message}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print info message.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    console.print(message, **kwargs)


def success(message: str, **kwargs: Any) -> None:
    """Print success message in green.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    console.print(f"[green]{message}[/green]", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print warning message in yellow.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    console.print(f"[yellow]{message}[/yellow]", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print error message in red to stderr.

    Args:
        message: Message to print
        **kwargs: Additional arguments for console.print
    """
    error_console.print(f"[red]Error:[/red] {message}", **kwargs)
