"""Chapter generation screen.

Lists chapter tasks on the left and previews the selected (or currently
generating) chapter on the right. Driver events arrive as
:class:`~bookwright.tui.messages.DriverEventMessage`; the preview is redrawn
on a timer so fast streams do not re-render Markdown for every fragment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Markdown, Static

from bookwright.models import TaskStatus, WorkflowStage
from bookwright.orchestration import (
    BatchFinished,
    TaskCompleted,
    TaskFailed,
    TaskProgress,
    TaskStarted,
)
from bookwright.tui.messages import DriverEventMessage
from bookwright.tui.widgets import StatusHeader, TaskListPanel

if TYPE_CHECKING:
    from bookwright.tui.app import BookwrightApp


class ChaptersScreen(Screen):
    """Runs the chapter task driver and shows its progress."""

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("s", "start", "Start"),
        Binding("p", "stop", "Stop"),
        Binding("f", "finish", "View Book"),
        Binding("j", "next_task", "Next", show=False),
        Binding("k", "previous_task", "Previous", show=False),
        Binding("escape", "back", "Back", show=True),
    ]

    DEFAULT_CSS = """
    ChaptersScreen {
        background: $surface;
    }

    ChaptersScreen .main {
        height: 1fr;
    }

    ChaptersScreen .preview {
        width: 2fr;
        height: 100%;
    }

    ChaptersScreen #preview-title {
        text-style: bold;
        padding: 1 2 0 2;
    }

    ChaptersScreen #preview-status {
        color: $text-muted;
        padding: 0 2;
    }

    ChaptersScreen #preview-error {
        color: $error;
        padding: 0 2;
    }

    ChaptersScreen #preview-scroll {
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._selected_task_id: str | None = None
        self._preview_dirty = True

    def compose(self) -> ComposeResult:
        yield StatusHeader(WorkflowStage.GENERATING_CHAPTERS)
        with Horizontal(classes="main"):
            yield TaskListPanel(id="task-list")
            with Vertical(classes="preview"):
                yield Static("", id="preview-title")
                yield Static("", id="preview-status")
                yield Static("", id="preview-error")
                with VerticalScroll(id="preview-scroll"):
                    yield Markdown("", id="preview")
        yield Footer()

    @property
    def book_app(self) -> BookwrightApp:
        return cast("BookwrightApp", self.app)

    def on_mount(self) -> None:
        self.app.sub_title = "Writing Chapters"
        self.query_one(TaskListPanel).set_tasks(self.book_app.controller.tasks)
        self.set_interval(0.3, self._refresh_preview)
        self._show_workflow_error()

    # ─── Driver events ────────────────────────────────────────────────

    def on_driver_event_message(self, message: DriverEventMessage) -> None:
        event = message.event
        panel = self.query_one(TaskListPanel)
        if isinstance(event, TaskStarted):
            self._selected_task_id = event.task.id
            panel.refresh_tasks()
            self._preview_dirty = True
        elif isinstance(event, TaskProgress):
            if event.task.id == self._selected_task_id:
                self._preview_dirty = True
        elif isinstance(event, TaskCompleted | TaskFailed):
            panel.refresh_tasks()
            self._preview_dirty = True
        elif isinstance(event, BatchFinished):
            panel.refresh_tasks()
            self._show_workflow_error()
            if not event.halted:
                self.notify("All chapters processed. Press f to view the book.")

    def _show_workflow_error(self) -> None:
        error = self.book_app.controller.error or ""
        self.query_one("#preview-error", Static).update(error)

    def _refresh_preview(self) -> None:
        if not self._preview_dirty:
            return
        self._preview_dirty = False
        tasks = self.book_app.controller.tasks
        task = next((t for t in tasks if t.id == self._selected_task_id), None)
        if task is None and tasks:
            task = min(tasks, key=lambda t: t.order_index)
            self._selected_task_id = task.id
        if task is None:
            return
        self.query_one("#preview-title", Static).update(
            f"{task.order_index + 1}. {task.title}"
        )
        status = task.status.value
        if task.status == TaskStatus.GENERATING:
            status += f" ({len(task.content.split())} words so far)"
        elif task.status == TaskStatus.ERROR and task.error_message:
            status += f": {task.error_message}"
        self.query_one("#preview-status", Static).update(status)
        self.query_one("#preview", Markdown).update(task.content or "")

    def _select_offset(self, offset: int) -> None:
        tasks = sorted(self.book_app.controller.tasks, key=lambda t: t.order_index)
        if not tasks:
            return
        ids = [t.id for t in tasks]
        current = self._selected_task_id
        index = ids.index(current) if current in ids else 0
        self._selected_task_id = ids[max(0, min(len(ids) - 1, index + offset))]
        self._preview_dirty = True

    # ─── Actions ──────────────────────────────────────────────────────

    def action_start(self) -> None:
        self.query_one("#preview-error", Static).update("")
        self.book_app.start_generation()

    def action_stop(self) -> None:
        self.book_app.stop_generation()
        if self.book_app.controller.driver.is_generating:
            self.notify("Stopping after the current chapter")

    def action_finish(self) -> None:
        self.book_app.finish()

    def action_back(self) -> None:
        self.book_app.back_to_outline()

    def action_next_task(self) -> None:
        self._select_offset(1)

    def action_previous_task(self) -> None:
        self._select_offset(-1)
