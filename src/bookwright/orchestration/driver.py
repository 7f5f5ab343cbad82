"""Sequential chapter task driver.

The driver owns the chapter task list while chapters are being written. It
runs exactly one task at a time, in ``order_index`` order, and advances by an
explicit event: when a task reaches a terminal state and auto-run is still
enabled, the next pending task is selected. A failed task halts the batch.
"""

from __future__ import annotations

import logging

from bookwright.models import (
    ChapterTask,
    OutlineNode,
    TaskStatus,
    WorkflowParams,
    serialize_outline,
)
from bookwright.orchestration.accumulator import (
    StreamAccumulator,
    StreamInterruptedError,
    consume_stream,
)
from bookwright.orchestration.types import (
    BatchFinished,
    CompletionStatus,
    DriverEvent,
    EventListener,
    ModelClient,
    TaskCompleted,
    TaskFailed,
    TaskProgress,
    TaskStarted,
)

logger = logging.getLogger(__name__)

PREVIOUS_CHAPTER_SEPARATOR = "\n\n---END OF PREVIOUS CHAPTER---\n\n"
DEFAULT_FAILURE_MESSAGE = "Failed to generate chapter content."


def build_preceding_content(tasks: list[ChapterTask], task: ChapterTask) -> str:
    """Concatenate committed content of DONE tasks ordered before ``task``.

    Tasks after ``task``, and tasks that are not DONE, contribute nothing.
    """
    earlier = sorted(
        (
            t
            for t in tasks
            if t.order_index < task.order_index
            and t.status == TaskStatus.DONE
            and t.content
        ),
        key=lambda t: t.order_index,
    )
    return "".join(
        f"Chapter: {t.title}\n{t.content}{PREVIOUS_CHAPTER_SEPARATOR}"
        for t in earlier
    )


class TaskDriver:
    """Runs chapter tasks one at a time against a model client.

    Two control bits govern it: ``auto_run`` and ``current_task_id``. The
    driver only starts a task when auto-run is enabled and nothing is
    generating. Disabling auto-run takes effect at the next selection point;
    an in-flight task always runs to completion or failure.
    """

    def __init__(
        self,
        client: ModelClient,
        listener: EventListener | None = None,
    ) -> None:
        self._client = client
        self._listener = listener
        self.tasks: list[ChapterTask] = []
        self.params: WorkflowParams | None = None
        self.outline: OutlineNode | None = None
        self._outline_text = ""
        self.auto_run = False
        self.current_task_id: str | None = None
        self.last_error: str | None = None

    # ─── Loading ──────────────────────────────────────────────────────

    def load(
        self,
        params: WorkflowParams,
        outline: OutlineNode,
        tasks: list[ChapterTask],
    ) -> None:
        """Take ownership of a fresh task list.

        Raises:
            RuntimeError: If a task is currently generating.
        """
        if self.is_generating:
            raise RuntimeError("Cannot replace tasks while a chapter is generating")
        self.params = params
        self.outline = outline
        self._outline_text = serialize_outline(outline)
        self.tasks = list(tasks)
        self.auto_run = False
        self.last_error = None
        logger.info("Driver loaded %d tasks", len(self.tasks))

    def clear(self) -> None:
        """Drop all tasks and context.

        Raises:
            RuntimeError: If a task is currently generating.
        """
        if self.is_generating:
            raise RuntimeError("Cannot clear tasks while a chapter is generating")
        self.tasks = []
        self.params = None
        self.outline = None
        self._outline_text = ""
        self.auto_run = False
        self.last_error = None

    # ─── Control ──────────────────────────────────────────────────────

    @property
    def is_generating(self) -> bool:
        return self.current_task_id is not None

    @property
    def current_task(self) -> ChapterTask | None:
        if self.current_task_id is None:
            return None
        return self.get_task(self.current_task_id)

    def enable_auto_run(self) -> None:
        """Arm the driver; takes effect on the next call to :meth:`run`."""
        self.auto_run = True
        self.last_error = None

    def disable_auto_run(self) -> None:
        """Stop after the in-flight task, if any."""
        if self.auto_run:
            logger.info("Auto-run disabled")
        self.auto_run = False

    def get_task(self, task_id: str) -> ChapterTask | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def select_next(self) -> ChapterTask | None:
        """Lowest-ordered PENDING task, or None."""
        pending = [t for t in self.tasks if t.status == TaskStatus.PENDING]
        if not pending:
            return None
        return min(pending, key=lambda t: t.order_index)

    def completion_status(self) -> CompletionStatus:
        return CompletionStatus.from_tasks(self.tasks)

    # ─── Execution ────────────────────────────────────────────────────

    async def run(self) -> CompletionStatus:
        """Process pending tasks until none remain, the batch halts, or
        auto-run is disabled.

        Calling this while a task is generating does nothing.
        """
        if self.is_generating:
            logger.warning(
                "run() ignored: task %s is already generating", self.current_task_id
            )
            return self.completion_status()
        if not self.auto_run:
            logger.debug("run() ignored: auto-run is disabled")
            return self.completion_status()

        task = self._select_or_finish()
        while task is not None:
            event = await self._generate(task)
            self._emit(event)
            task = self._advance(event)
        return self.completion_status()

    def _select_or_finish(self) -> ChapterTask | None:
        task = self.select_next()
        if task is None:
            self.auto_run = False
            status = self.completion_status()
            logger.info(
                "No pending tasks: %d done, %d error", status.done, status.error
            )
            self._emit(BatchFinished(halted=False, status=status))
        return task

    def _advance(self, event: TaskCompleted | TaskFailed) -> ChapterTask | None:
        """React to a task reaching a terminal state."""
        if isinstance(event, TaskFailed):
            self._emit(BatchFinished(halted=True, status=self.completion_status()))
            return None
        if not self.auto_run:
            logger.info("Stopping after %s: auto-run disabled", event.task.id)
            self._emit(BatchFinished(halted=True, status=self.completion_status()))
            return None
        return self._select_or_finish()

    async def _generate(self, task: ChapterTask) -> TaskCompleted | TaskFailed:
        """Run one accumulation cycle for ``task``."""
        if self.params is None:
            raise RuntimeError("Driver has no workflow parameters loaded")

        task.start()
        self.current_task_id = task.id
        logger.info("Generating chapter %d: %s", task.order_index, task.title)
        accumulator = StreamAccumulator()

        def on_fragment(buffer: str) -> None:
            task.update_content(buffer)
            self._emit(TaskProgress(task, accumulator.fragment_count))

        # A listener that raises fails the task like a broken stream would
        try:
            self._emit(TaskStarted(task))
            stream = self._client.generate_chapter(
                self.params,
                task.title,
                task.outline_fragment,
                self._outline_text,
                build_preceding_content(self.tasks, task),
                task_id=task.id,
            )
            content = await consume_stream(stream, accumulator, on_fragment)
        except Exception as e:
            cause = e.cause if isinstance(e, StreamInterruptedError) else e
            partial = (
                e.partial if isinstance(e, StreamInterruptedError)
                else accumulator.commit()
            )
            message = str(cause) or DEFAULT_FAILURE_MESSAGE
            logger.exception("Error generating chapter %s: %s", task.id, message)
            task.fail(message, partial)
            self.auto_run = False
            self.last_error = f"Error in chapter: {task.title}. {message}"
            return TaskFailed(task, message)
        finally:
            self.current_task_id = None

        task.complete(content)
        logger.info("Completed chapter %s (%d chars)", task.id, len(content))
        return TaskCompleted(task)

    def _emit(self, event: DriverEvent) -> None:
        if self._listener is not None:
            self._listener(event)
