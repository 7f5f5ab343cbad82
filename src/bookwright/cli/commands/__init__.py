"""CLI command handlers."""

from .tui import cmd_tui
from .write import cmd_write

__all__ = [
    "cmd_tui",
    "cmd_write",
]
