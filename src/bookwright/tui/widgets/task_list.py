"""Chapter task list panel for the chapter generation screen."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Static

from bookwright.models import ChapterTask, TaskStatus
from bookwright.orchestration import CompletionStatus

# (symbol, style) per task status
STATUS_BADGES: dict[TaskStatus, tuple[str, str]] = {
    TaskStatus.PENDING: ("○", "dim"),
    TaskStatus.GENERATING: ("◉", "bold yellow"),
    TaskStatus.DONE: ("✓", "green"),
    TaskStatus.ERROR: ("✗", "bold red"),
}


def format_task_line(task: ChapterTask, blink_visible: bool = True) -> Text:
    """One list row: status badge, 1-based position and title."""
    symbol, style = STATUS_BADGES[task.status]
    if task.status == TaskStatus.GENERATING and not blink_visible:
        symbol = " "
    line = Text()
    line.append(f"{symbol} ", style=style)
    line.append(f"{task.order_index + 1:>2}. ", style="dim")
    title_style = "bold" if task.status == TaskStatus.GENERATING else ""
    line.append(task.title, style=title_style)
    if task.status == TaskStatus.ERROR:
        line.append("  error", style="red")
    return line


def format_progress(status: CompletionStatus, width: int = 20) -> str:
    """Text progress bar, e.g. ``██████░░░░ 3/10``."""
    processed = status.done + status.error
    filled = processed * width // status.total if status.total else 0
    bar = "█" * filled + "░" * (width - filled)
    text = f"{bar} {processed}/{status.total}"
    if status.error:
        text += f" ({status.error} failed)"
    return text


class TaskListPanel(Vertical):
    """Left panel listing chapter tasks with status badges."""

    DEFAULT_CSS = """
    TaskListPanel {
        width: 1fr;
        height: 100%;
        border-right: solid $surface-lighten-1;
    }

    TaskListPanel .panel-title {
        text-style: bold;
        padding: 1 1 0 1;
    }

    TaskListPanel #task-progress {
        color: $success;
        padding: 0 1 1 1;
        border-bottom: solid $surface-lighten-1;
    }

    TaskListPanel #task-rows {
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._tasks: list[ChapterTask] = []
        self._blink_visible = True

    def compose(self) -> ComposeResult:
        yield Static("CHAPTERS", classes="panel-title")
        yield Static("", id="task-progress")
        with VerticalScroll(id="task-rows"):
            yield Static("", id="task-lines")

    def on_mount(self) -> None:
        self.set_interval(0.5, self._toggle_blink)

    def _toggle_blink(self) -> None:
        if any(t.status == TaskStatus.GENERATING for t in self._tasks):
            self._blink_visible = not self._blink_visible
            self.refresh_tasks()
        elif not self._blink_visible:
            self._blink_visible = True

    def set_tasks(self, tasks: list[ChapterTask]) -> None:
        self._tasks = tasks
        self.refresh_tasks()

    def refresh_tasks(self) -> None:
        lines = Text("\n").join(
            format_task_line(task, self._blink_visible)
            for task in sorted(self._tasks, key=lambda t: t.order_index)
        )
        self.query_one("#task-lines", Static).update(lines)
        status = CompletionStatus.from_tasks(self._tasks)
        self.query_one("#task-progress", Static).update(format_progress(status))
