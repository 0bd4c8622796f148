"""Command modules for what-the-port CLI."""

from .allowlist import allowlist
from .config import config
from .copy import copy
from .list import list_cmd
from .open import open_cmd
from .stop import stop
from .watch import watch

__all__ = [
    "allowlist",
    "config",
    "copy",
    "list_cmd",
    "open_cmd",
    "stop",
    "watch",
]
