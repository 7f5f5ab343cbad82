"""Outline review screen."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static

from bookwright.models import WorkflowStage
from bookwright.tui.widgets import StatusHeader
from bookwright.tui.widgets.outline_tree import OutlineTree

if TYPE_CHECKING:
    from bookwright.tui.app import BookwrightApp


class OutlineScreen(Screen):
    """Shows the generated title and outline for approval."""

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+enter", "accept", "Write Chapters"),
        Binding("a", "accept", "Write Chapters", show=False),
        Binding("escape", "back", "Back", show=True),
    ]

    DEFAULT_CSS = """
    OutlineScreen {
        background: $surface;
    }

    OutlineScreen .content {
        height: 1fr;
        padding: 1 2;
    }

    OutlineScreen #book-title {
        text-style: bold;
        color: $accent;
        padding-bottom: 1;
    }

    OutlineScreen #chapter-count {
        color: $text-muted;
        padding-bottom: 1;
    }

    OutlineScreen OutlineTree {
        height: 1fr;
        background: transparent;
    }
    """

    def compose(self) -> ComposeResult:
        yield StatusHeader(WorkflowStage.OUTLINE_REVIEW)
        with Vertical(classes="content"):
            yield Static("", id="book-title")
            yield Static("", id="chapter-count")
            yield OutlineTree(id="outline-tree")
        yield Footer()

    @property
    def book_app(self) -> BookwrightApp:
        return cast("BookwrightApp", self.app)

    def on_mount(self) -> None:
        self.app.sub_title = "Outline Review"
        controller = self.book_app.controller
        self.query_one("#book-title", Static).update(controller.title or "")
        if controller.outline is not None:
            self.query_one("#chapter-count", Static).update(
                f"{len(controller.outline)} chapters"
            )
            tree = self.query_one("#outline-tree", OutlineTree)
            tree.load_outline(controller.outline)
            tree.focus()

    def action_accept(self) -> None:
        self.book_app.accept_outline()

    def action_back(self) -> None:
        self.book_app.back_to_input()
