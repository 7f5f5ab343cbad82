"""Workflow stage controller.

Coordinates the phases of a book run (input, outline generation, outline
review, chapter generation, result) independent of any UI. The TUI and the
headless CLI both drive a run through this class.

Usage:
    controller = WorkflowController(client)
    await controller.submit_params(params)
    controller.accept_outline()
    await controller.start_generation()
    controller.finish()
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from bookwright.llm.providers.base import ConfigurationError
from bookwright.models import (
    ChapterTask,
    OutlineNode,
    StageGuardError,
    StageTracker,
    TaskStatus,
    WorkflowParams,
    WorkflowStage,
    parse_outline,
)
from bookwright.orchestration.accumulator import StreamAccumulator, consume_stream
from bookwright.orchestration.driver import TaskDriver
from bookwright.orchestration.flattener import flatten_outline
from bookwright.orchestration.types import (
    CompletionStatus,
    EventListener,
    ModelClient,
)

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], None]
"""Called with the raw running outline text after each fragment."""


class WorkflowController:
    """Linear phase state machine over a single book run."""

    def __init__(
        self,
        client: ModelClient,
        listener: EventListener | None = None,
    ) -> None:
        self._client = client
        self._tracker = StageTracker()
        self.driver = TaskDriver(client, listener)
        self.params: WorkflowParams | None = None
        self.outline: OutlineNode | None = None
        self.title: str | None = None
        self.tasks: list[ChapterTask] = []
        self.error: str | None = None

    # ─── State ────────────────────────────────────────────────────────

    @property
    def stage(self) -> WorkflowStage:
        return self._tracker.stage

    @property
    def history(self) -> list[dict[str, str]]:
        return list(self._tracker.history)

    @property
    def auto_run(self) -> bool:
        return self.driver.auto_run

    @property
    def is_busy(self) -> bool:
        """An outline or chapter call is in flight."""
        return (
            self.stage == WorkflowStage.GENERATING_OUTLINE
            or self.driver.is_generating
        )

    def completion_status(self) -> CompletionStatus:
        return CompletionStatus.from_tasks(self.tasks)

    def _transition(self, target: WorkflowStage, reason: str | None = None) -> None:
        previous = self.stage
        self._tracker.transition(target, reason=reason)
        logger.info("Stage %s -> %s", previous.value, target.value)

    def _clear_derived_state(self) -> None:
        self.outline = None
        self.title = None
        self.tasks = []
        self.driver.clear()

    # ─── Input & Outline ──────────────────────────────────────────────

    async def submit_params(
        self,
        params: WorkflowParams,
        on_chunk: ChunkCallback | None = None,
    ) -> bool:
        """Generate an outline and title for ``params``.

        Returns:
            True when the run reached OUTLINE_REVIEW; False when outline or
            title generation failed and the run returned to COLLECTING_INPUT
            (see :attr:`error`).

        Raises:
            ValueError: If ``params`` are invalid.
            ConfigurationError: If the model client is not configured.
            StageGuardError: If not collecting input.
        """
        if self.stage != WorkflowStage.COLLECTING_INPUT:
            raise StageGuardError(self.stage, "parameters are already submitted")

        params.validate()
        try:
            self._client.ensure_configured()
        except ConfigurationError as e:
            self.error = str(e)
            logger.error("Configuration error: %s", e)
            raise

        self.params = params
        self.error = None
        self._clear_derived_state()
        self._transition(WorkflowStage.GENERATING_OUTLINE)

        try:
            accumulator = StreamAccumulator()
            text = await consume_stream(
                self._client.generate_outline(params), accumulator, on_chunk
            )
            outline = parse_outline(text)
            title = await self._client.generate_title(params, outline)
        except Exception as e:
            cause = getattr(e, "cause", e)
            logger.exception("Error during outline/title generation")
            self.error = str(cause) or "Failed to generate outline or title."
            self._transition(WorkflowStage.COLLECTING_INPUT, reason="outline failed")
            return False

        self.outline = outline
        self.title = title.strip()
        self._transition(WorkflowStage.OUTLINE_REVIEW)
        return True

    def back_to_input(self) -> None:
        """Discard the outline and everything derived from it."""
        if self.stage != WorkflowStage.OUTLINE_REVIEW:
            raise StageGuardError(self.stage, "not reviewing an outline")
        self._clear_derived_state()
        self.params = None
        self.error = None
        self._transition(WorkflowStage.COLLECTING_INPUT, reason="back")

    def accept_outline(self) -> list[ChapterTask]:
        """Enter chapter generation.

        The outline is flattened into a fresh task list only if there are no
        tasks yet or every task is still pending; a started run survives
        navigating back and forth.
        """
        if self.outline is None or self.params is None:
            raise StageGuardError(self.stage, "no outline to accept")
        if self.stage != WorkflowStage.OUTLINE_REVIEW:
            raise StageGuardError(self.stage, "not reviewing an outline")

        untouched = all(t.status == TaskStatus.PENDING for t in self.tasks)
        if not self.tasks or untouched:
            self.tasks = flatten_outline(self.outline)
            self.driver.load(self.params, self.outline, self.tasks)
        else:
            logger.info("Keeping %d existing tasks", len(self.tasks))

        self.error = None
        self._transition(WorkflowStage.GENERATING_CHAPTERS)
        return self.tasks

    # ─── Chapter Generation ───────────────────────────────────────────

    async def start_generation(self) -> CompletionStatus:
        """Enable auto-run and process chapters until the batch finishes."""
        if self.stage != WorkflowStage.GENERATING_CHAPTERS:
            raise StageGuardError(self.stage, "not generating chapters")
        self.error = None
        self.driver.enable_auto_run()
        status = await self.driver.run()
        if self.driver.last_error:
            self.error = self.driver.last_error
        return status

    def stop_generation(self) -> None:
        """Stop after the chapter currently being written."""
        self.driver.disable_auto_run()

    def back_to_outline(self) -> None:
        """Return to outline review, keeping tasks and halting auto-run."""
        if self.stage != WorkflowStage.GENERATING_CHAPTERS:
            raise StageGuardError(self.stage, "not generating chapters")
        if self.driver.is_generating:
            raise StageGuardError(self.stage, "a chapter is still being written")
        self.driver.disable_auto_run()
        self._transition(WorkflowStage.OUTLINE_REVIEW, reason="back")

    def can_finish(self) -> bool:
        status = self.completion_status()
        return (
            self.stage == WorkflowStage.GENERATING_CHAPTERS
            and status.total > 0
            and status.all_processed
            and not self.driver.auto_run
        )

    def finish(self) -> None:
        """Move to the result view once every chapter is DONE or ERROR."""
        if not self.can_finish():
            raise StageGuardError(self.stage, "chapters are not all processed")
        self._transition(WorkflowStage.VIEW_RESULT)

    def reset(self) -> None:
        """Start over with nothing kept."""
        if self.is_busy:
            raise StageGuardError(self.stage, "generation is in progress")
        self._clear_derived_state()
        self.params = None
        self.error = None
        if self.stage != WorkflowStage.COLLECTING_INPUT:
            self._transition(WorkflowStage.COLLECTING_INPUT, reason="reset")
