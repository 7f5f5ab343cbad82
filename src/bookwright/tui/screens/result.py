"""Result screen showing the finished book."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Markdown, Static

from bookwright.config.paths import get_paths
from bookwright.export import default_output_name, render_book_markdown
from bookwright.models import WorkflowStage
from bookwright.tui.widgets import StatusHeader

if TYPE_CHECKING:
    from bookwright.tui.app import BookwrightApp

logger = logging.getLogger(__name__)


class ResultScreen(Screen):
    """Renders the book as Markdown with save and start-over bindings."""

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+s", "save", "Save"),
        Binding("n", "start_over", "New Book"),
    ]

    DEFAULT_CSS = """
    ResultScreen {
        background: $surface;
    }

    ResultScreen #book-summary {
        color: $text-muted;
        padding: 1 2 0 2;
    }

    ResultScreen VerticalScroll {
        height: 1fr;
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield StatusHeader(WorkflowStage.VIEW_RESULT)
        yield Static("", id="book-summary")
        with VerticalScroll():
            yield Markdown("", id="book")
        yield Footer()

    @property
    def book_app(self) -> BookwrightApp:
        return cast("BookwrightApp", self.app)

    def book_markdown(self) -> str:
        controller = self.book_app.controller
        return render_book_markdown(controller.title, controller.tasks)

    def on_mount(self) -> None:
        self.app.sub_title = "Your Book"
        status = self.book_app.controller.completion_status()
        summary = f"{status.done} of {status.total} chapters written"
        if status.error:
            summary += f", {status.error} failed"
        self.query_one("#book-summary", Static).update(summary)
        self.query_one("#book", Markdown).update(self.book_markdown())

    def action_save(self) -> None:
        filename = default_output_name(self.book_app.controller.title)
        path = get_paths().book_file(filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.book_markdown(), encoding="utf-8")
        except OSError as e:
            logger.error("Failed to save book to %s: %s", path, e)
            self.notify(f"Could not save: {e}", severity="error")
            return
        logger.info("Saved book to %s", path)
        self.notify(f"Saved to {path}")

    def action_start_over(self) -> None:
        self.book_app.reset()
