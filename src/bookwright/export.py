"""Render a finished book as Markdown."""

from __future__ import annotations

import re
from collections.abc import Iterable

from bookwright.models import ChapterTask, TaskStatus

UNTITLED_BOOK = "Untitled Book"


def default_output_name(title: str | None) -> str:
    """Filename slug for a book title, e.g. ``"My Book!"`` -> ``my-book.md``."""
    slug = re.sub(r"[^a-z0-9]+", "-", (title or "").lower()).strip("-")
    return f"{slug or 'book'}.md"


def render_book_markdown(title: str | None, tasks: Iterable[ChapterTask]) -> str:
    """Build the Markdown document for a book.

    Chapters are emitted in ``order_index`` order. A chapter that failed is
    kept with whatever partial text it produced and flagged with its error.
    """
    lines = [f"# {title or UNTITLED_BOOK}", ""]
    for task in sorted(tasks, key=lambda t: t.order_index):
        lines.append(f"## {task.title}")
        lines.append("")
        if task.status == TaskStatus.ERROR:
            lines.append(
                f"> **Generation failed:** {task.error_message or 'unknown error'}"
            )
            lines.append("")
        if task.content:
            lines.append(task.content)
            lines.append("")
        elif task.status != TaskStatus.ERROR:
            lines.append("*Not written yet.*")
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"
