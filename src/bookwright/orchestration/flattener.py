"""Outline flattening: one chapter task per top-level outline entry."""

from __future__ import annotations

import itertools
import logging
import re
import time
from collections.abc import Iterator

from bookwright.models import ChapterTask, OutlineLeaf, OutlineNode, serialize_outline

logger = logging.getLogger(__name__)

# Process-wide id counter seeded from wall-clock milliseconds, so ids never
# repeat across flattening passes in one process.
_task_counter: Iterator[int] = itertools.count(time.time_ns() // 1_000_000)


def sanitize_task_name(name: str) -> str:
    """Reduce an entry name to ASCII letters, digits and hyphens."""
    collapsed = re.sub(r"\s+", "-", name)
    return re.sub(r"[^a-zA-Z0-9-]", "", collapsed)


def make_task_id(name: str, counter_value: int) -> str:
    """Build a task id from the sanitized name and a counter value."""
    return f"{sanitize_task_name(name) or 'chapter'}-{counter_value}"


def flatten_outline(
    outline: OutlineNode,
    counter: Iterator[int] | None = None,
) -> list[ChapterTask]:
    """Convert an outline into an ordered list of pending chapter tasks.

    Each top-level entry becomes one task. Deeper structure under an entry is
    not split into further tasks; it is serialized into the task's outline
    fragment.

    Args:
        outline: Root outline node.
        counter: Source of unique counter values for ids. Defaults to the
            process-wide counter.

    Returns:
        Tasks with order_index 0..N-1 in entry order.
    """
    ids = counter if counter is not None else _task_counter
    tasks: list[ChapterTask] = []

    for order_index, (name, value) in enumerate(outline.entries()):
        if isinstance(value, OutlineLeaf):
            fragment = value.text
        else:
            fragment = serialize_outline(value)
        tasks.append(
            ChapterTask(
                id=make_task_id(name, next(ids)),
                title=name,
                outline_fragment=fragment,
                order_index=order_index,
            )
        )

    logger.info("Flattened outline into %d chapter tasks", len(tasks))
    return tasks
