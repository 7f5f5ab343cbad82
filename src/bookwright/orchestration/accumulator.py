"""Streaming accumulation of text fragments for a single task invocation."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class StreamAccumulator:
    """Running buffer for one in-flight generation.

    A fresh accumulator is created for every task invocation and never
    shared, so text from one chapter cannot leak into another.
    """

    buffer: str = ""
    fragment_count: int = 0

    def feed(self, fragment: str | None) -> str:
        """Append a fragment and return the raw running buffer."""
        if fragment is None:
            return self.buffer
        self.buffer += fragment
        self.fragment_count += 1
        return self.buffer

    def commit(self) -> str:
        """Final content: the buffer with surrounding whitespace removed."""
        return self.buffer.strip()


class StreamInterruptedError(Exception):
    """A fragment stream failed after zero or more fragments arrived.

    Carries the committed (trimmed) partial text so callers can keep it.
    """

    def __init__(self, cause: BaseException, partial: str) -> None:
        self.cause = cause
        self.partial = partial
        super().__init__(str(cause) or type(cause).__name__)


async def consume_stream(
    stream: AsyncIterable[str | None],
    accumulator: StreamAccumulator,
    on_fragment: Callable[[str], None] | None = None,
) -> str:
    """Drain ``stream`` through ``accumulator``.

    ``on_fragment`` receives the raw running buffer after every fragment.

    Returns:
        The committed text once the stream is exhausted.

    Raises:
        StreamInterruptedError: If the stream raises; wraps the original
            exception together with the committed partial text.
    """
    try:
        async for fragment in stream:
            buffer = accumulator.feed(fragment)
            if on_fragment is not None and fragment is not None:
                on_fragment(buffer)
    except Exception as e:
        logger.warning(
            "Stream interrupted after %d fragments: %s", accumulator.fragment_count, e
        )
        raise StreamInterruptedError(e, accumulator.commit()) from e

    logger.debug(
        "Stream complete: %d fragments, %d chars",
        accumulator.fragment_count,
        len(accumulator.buffer),
    )
    return accumulator.commit()
