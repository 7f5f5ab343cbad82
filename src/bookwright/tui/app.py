"""Main Bookwright TUI application."""

import logging
from typing import Any

from textual import work
from textual.app import App
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.screen import Screen

from bookwright.llm.client import BookClient
from bookwright.llm.providers.base import ConfigurationError
from bookwright.models import StageGuardError, WorkflowParams, WorkflowStage
from bookwright.orchestration import DriverEvent, WorkflowController
from bookwright.tui.messages import DriverEventMessage, OutlineChunk
from bookwright.tui.screens import (
    ChaptersScreen,
    InputScreen,
    OutlineScreen,
    ResultScreen,
)
from bookwright.tui.widgets import StatusHeader

logger = logging.getLogger(__name__)


class BookwrightApp(App[None]):
    """Main Bookwright TUI application.

    Owns one :class:`WorkflowController`; each workflow stage has a screen,
    and the app switches screens whenever the stage changes. Model calls run
    in async workers on the app's event loop.
    """

    TITLE = "Bookwright"
    SUB_TITLE = "Write a book, chapter by chapter"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        background: $surface;
    }
    """

    def __init__(self, client: BookClient | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.client = client or BookClient.from_settings()
        self.controller = WorkflowController(
            self.client, listener=self._on_driver_event
        )

    def on_mount(self) -> None:
        self.push_screen(InputScreen())

    # ─── Stage → screen ───────────────────────────────────────────────

    def _screen_for_stage(self, stage: WorkflowStage) -> Screen[Any]:
        if stage == WorkflowStage.OUTLINE_REVIEW:
            return OutlineScreen()
        if stage == WorkflowStage.GENERATING_CHAPTERS:
            return ChaptersScreen()
        if stage == WorkflowStage.VIEW_RESULT:
            return ResultScreen()
        return InputScreen()

    def show_stage(self) -> None:
        """Switch to the screen for the controller's current stage."""
        stage = self.controller.stage
        logger.info("Showing screen for stage %s", stage.value)
        self.switch_screen(self._screen_for_stage(stage))

    def _header(self) -> StatusHeader | None:
        try:
            return self.screen.query_one(StatusHeader)
        except NoMatches:
            return None

    def _set_thinking(self, thinking: bool) -> None:
        header = self._header()
        if header is not None:
            header.set_thinking(thinking)
            header.update_metrics(self.client.metrics)

    def _on_driver_event(self, event: DriverEvent) -> None:
        self.screen.post_message(DriverEventMessage(event))

    # ─── Workflow actions ─────────────────────────────────────────────

    @work(group="generation")
    async def submit_params(self, params: WorkflowParams) -> None:
        """Generate the outline and title, then show outline review."""
        screen = self.screen
        self._set_thinking(True)
        try:
            ok = await self.controller.submit_params(
                params, on_chunk=lambda text: screen.post_message(OutlineChunk(text))
            )
        except (ConfigurationError, StageGuardError) as e:
            logger.error("Cannot generate outline: %s", e)
            self._set_thinking(False)
            if isinstance(screen, InputScreen):
                screen.show_error(str(e))
            self.notify(str(e), severity="error")
            return

        self._set_thinking(False)
        if not ok:
            if isinstance(screen, InputScreen):
                screen.show_error(self.controller.error or "Outline failed")
            self.notify("Outline generation failed", severity="error")
            return
        self.show_stage()

    def accept_outline(self) -> None:
        try:
            self.controller.accept_outline()
        except StageGuardError as e:
            self.notify(str(e), severity="warning")
            return
        self.show_stage()

    def back_to_input(self) -> None:
        try:
            self.controller.back_to_input()
        except StageGuardError as e:
            self.notify(str(e), severity="warning")
            return
        self.show_stage()

    @work(group="generation")
    async def start_generation(self) -> None:
        """Write pending chapters until done, halted, or stopped."""
        if self.controller.driver.is_generating:
            self.notify("Already writing", severity="warning")
            return
        if self.controller.completion_status().pending == 0:
            self.notify("No chapters left to write", severity="warning")
            return
        self._set_thinking(True)
        try:
            status = await self.controller.start_generation()
        except StageGuardError as e:
            self._set_thinking(False)
            self.notify(str(e), severity="warning")
            return

        header = self._header()
        if self.controller.error:
            if header is not None:
                header.set_error()
                header.update_metrics(self.client.metrics)
            self.notify(self.controller.error, severity="error", timeout=10)
        else:
            self._set_thinking(False)
        logger.info(
            "Generation stopped: %d/%d done, %d error",
            status.done,
            status.total,
            status.error,
        )

    def stop_generation(self) -> None:
        self.controller.stop_generation()

    def back_to_outline(self) -> None:
        try:
            self.controller.back_to_outline()
        except StageGuardError as e:
            self.notify(str(e), severity="warning")
            return
        self.show_stage()

    def finish(self) -> None:
        try:
            self.controller.finish()
        except StageGuardError:
            status = self.controller.completion_status()
            self.notify(
                f"{status.pending + status.generating} chapters are not written yet",
                severity="warning",
            )
            return
        self.show_stage()

    def reset(self) -> None:
        try:
            self.controller.reset()
        except StageGuardError as e:
            self.notify(str(e), severity="warning")
            return
        self.show_stage()
