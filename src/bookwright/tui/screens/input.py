"""Input screen for the book subject and generation settings."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Input, Select, Static, TextArea

from bookwright.config import settings
from bookwright.llm.prompts import LANGUAGES
from bookwright.models import (
    CONTENT_LENGTH_PRESETS,
    MIN_CHAPTERS,
    GenerationTier,
    WorkflowParams,
    WorkflowStage,
    reading_level_label,
)
from bookwright.models.params import DEFAULT_CONTENT_LENGTH, DEFAULT_READING_LEVEL
from bookwright.tui.messages import OutlineChunk
from bookwright.tui.widgets import StatusHeader

if TYPE_CHECKING:
    from bookwright.tui.app import BookwrightApp


def _int_or_none(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


class InputScreen(Screen):
    """
    Input screen - subject, language, tier, length and reading level.

    Submitting streams an outline; on success the app moves to outline review.
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+enter", "submit", "Generate Outline"),
        Binding("ctrl+g", "submit", "Generate Outline", show=False),
    ]

    DEFAULT_CSS = """
    InputScreen {
        background: $surface;
    }

    InputScreen .content {
        width: 100%;
        height: 1fr;
        padding: 1 2;
    }

    InputScreen .label {
        color: $text-muted;
        margin-top: 1;
    }

    InputScreen .row {
        height: auto;
    }

    InputScreen .row > Vertical {
        width: 1fr;
        height: auto;
        padding-right: 2;
    }

    InputScreen #instructions {
        height: 6;
    }

    InputScreen #outline-status {
        color: $warning;
        margin-top: 1;
    }

    InputScreen #input-error {
        color: $error;
        margin-top: 1;
    }

    InputScreen .hint {
        dock: bottom;
        color: $text-disabled;
        text-style: italic;
        padding: 1 2 0 2;
    }
    """

    def compose(self) -> ComposeResult:
        yield StatusHeader(WorkflowStage.COLLECTING_INPUT)
        with VerticalScroll(classes="content"):
            yield Static("What is the book about?", classes="label")
            yield Input(placeholder="e.g., A history of tea", id="subject")
            with Horizontal(classes="row"):
                with Vertical():
                    yield Static("Language", classes="label")
                    yield Select(
                        [(name, code) for code, name in LANGUAGES.items()],
                        value=settings.default_language
                        if settings.default_language in LANGUAGES
                        else "en",
                        allow_blank=False,
                        id="language",
                    )
                with Vertical():
                    yield Static("Model tier", classes="label")
                    yield Select(
                        [
                            ("Fast (good quality)", GenerationTier.FAST.value),
                            ("Quality (slower)", GenerationTier.QUALITY.value),
                        ],
                        value=GenerationTier.FAST.value,
                        allow_blank=False,
                        id="tier",
                    )
            with Horizontal(classes="row"):
                with Vertical():
                    yield Static(
                        "Words per chapter ("
                        + ", ".join(
                            f"{name} {words}"
                            for name, words in CONTENT_LENGTH_PRESETS.items()
                        )
                        + ")",
                        classes="label",
                    )
                    yield Input(str(DEFAULT_CONTENT_LENGTH), id="length")
                with Vertical():
                    yield Static(
                        "Reading level 1-10 "
                        f"({reading_level_label(DEFAULT_READING_LEVEL)})",
                        classes="label",
                        id="reading-level-label",
                    )
                    yield Input(str(DEFAULT_READING_LEVEL), id="reading-level")
                with Vertical():
                    yield Static(f"Chapters (min {MIN_CHAPTERS})", classes="label")
                    yield Input(str(MIN_CHAPTERS), id="chapters")
            yield Static("Additional instructions (optional)", classes="label")
            yield TextArea(id="instructions")
            yield Static("", id="outline-status")
            yield Static("", id="input-error")
        yield Static("Press Ctrl+Enter to generate an outline.", classes="hint")
        yield Footer()

    @property
    def book_app(self) -> BookwrightApp:
        return cast("BookwrightApp", self.app)

    def on_mount(self) -> None:
        self.app.sub_title = "Book Details"
        self.query_one("#subject", Input).focus()
        if self.book_app.controller.error:
            self.show_error(self.book_app.controller.error)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "reading-level":
            return
        level = _int_or_none(event.value)
        label = reading_level_label(level) if level is not None else "?"
        self.query_one("#reading-level-label", Static).update(
            f"Reading level 1-10 ({label})"
        )

    def on_outline_chunk(self, message: OutlineChunk) -> None:
        self.query_one("#outline-status", Static).update(
            f"Generating outline... {len(message.text)} characters received"
        )

    def show_error(self, text: str) -> None:
        self.query_one("#outline-status", Static).update("")
        self.query_one("#input-error", Static).update(text)

    def read_params(self) -> WorkflowParams | list[str]:
        """Build parameters from the form, or return a list of problems."""
        length = _int_or_none(self.query_one("#length", Input).value)
        level = _int_or_none(self.query_one("#reading-level", Input).value)
        chapters = _int_or_none(self.query_one("#chapters", Input).value)
        problems = [
            f"{name} must be a whole number"
            for name, value in (
                ("Words per chapter", length),
                ("Reading level", level),
                ("Chapters", chapters),
            )
            if value is None
        ]
        if problems:
            return problems

        params = WorkflowParams(
            subject=self.query_one("#subject", Input).value.strip(),
            language=str(self.query_one("#language", Select).value),
            additional_info=self.query_one("#instructions", TextArea).text.strip(),
            tier=GenerationTier(str(self.query_one("#tier", Select).value)),
            content_length=cast(int, length),
            reading_level=cast(int, level),
            chapter_count=cast(int, chapters),
        )
        return params.validation_errors() or params

    def action_submit(self) -> None:
        if self.book_app.controller.is_busy:
            self.notify("An outline is already being generated", severity="warning")
            return
        result = self.read_params()
        if isinstance(result, list):
            self.show_error("\n".join(result))
            return
        self.query_one("#input-error", Static).update("")
        self.query_one("#outline-status", Static).update("Generating outline...")
        self.book_app.submit_params(result)
