"""Custom Textual messages for inter-widget communication."""
from __future__ import annotations

from textual.message import Message

from bookwright.orchestration import DriverEvent


class OutlineChunk(Message):
    """The outline stream grew; carries the raw text so far."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__()


class DriverEventMessage(Message):
    """A chapter task driver event, forwarded to the active screen."""

    def __init__(self, event: DriverEvent) -> None:
        self.event = event
        super().__init__()


class StageChanged(Message):
    """The workflow moved to another stage."""

    pass
