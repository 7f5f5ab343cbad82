"""TUI screens for each workflow stage."""
from __future__ import annotations

from .chapters import ChaptersScreen
from .input import InputScreen
from .outline import OutlineScreen
from .result import ResultScreen

__all__ = [
    "ChaptersScreen",
    "InputScreen",
    "OutlineScreen",
    "ResultScreen",
]
