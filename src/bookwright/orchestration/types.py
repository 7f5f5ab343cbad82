"""Type definitions for the orchestration layer.

This module defines the model-client contract the orchestration core depends
on, the events the task driver emits, and the aggregate status the stage
controller reads.
"""

from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeAlias

if TYPE_CHECKING:
    from bookwright.models import ChapterTask, OutlineNode, WorkflowParams


# --- Model Client Contract ---


class ModelClient(Protocol):
    """What the workflow needs from a generative model."""

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if the client cannot make calls."""
        ...

    def generate_outline(self, params: "WorkflowParams") -> AsyncIterator[str]:
        """Stream the raw outline text for a book."""
        ...

    async def generate_title(
        self, params: "WorkflowParams", outline: "OutlineNode"
    ) -> str:
        """Return a book title for the accepted outline."""
        ...

    def generate_chapter(
        self,
        params: "WorkflowParams",
        title: str,
        outline_fragment: str,
        full_outline: str,
        preceding_content: str,
        task_id: str | None = None,
    ) -> AsyncIterator[str]:
        """Stream the text of one chapter.

        ``task_id`` names the chapter task so usage can be attributed to it.
        """
        ...


# --- Driver Events ---


@dataclass(frozen=True)
class TaskStarted:
    """A task entered GENERATING."""

    task: "ChapterTask"


@dataclass(frozen=True)
class TaskProgress:
    """A fragment arrived; ``task.content`` holds the raw running buffer."""

    task: "ChapterTask"
    fragment_count: int


@dataclass(frozen=True)
class TaskCompleted:
    """A task reached DONE."""

    task: "ChapterTask"


@dataclass(frozen=True)
class TaskFailed:
    """A task reached ERROR and the batch halted."""

    task: "ChapterTask"
    message: str


@dataclass(frozen=True)
class BatchFinished:
    """No pending task remains or the batch halted; auto-run is now off."""

    halted: bool
    status: "CompletionStatus"


DriverEvent: TypeAlias = (
    TaskStarted | TaskProgress | TaskCompleted | TaskFailed | BatchFinished
)

EventListener = Callable[[DriverEvent], None]
"""Called synchronously for every driver event."""


# --- Aggregate Status ---


@dataclass
class CompletionStatus:
    """Summary of chapter task states."""

    total: int
    done: int
    pending: int
    error: int
    generating: int = 0

    @property
    def all_processed(self) -> bool:
        """Every task is DONE or ERROR."""
        return self.done + self.error == self.total

    @property
    def all_done(self) -> bool:
        """Every task is DONE."""
        return self.done == self.total

    @property
    def has_errors(self) -> bool:
        return self.error > 0

    @property
    def progress(self) -> float:
        """Fraction of tasks DONE, 0.0 for an empty list."""
        return self.done / self.total if self.total else 0.0

    @classmethod
    def from_tasks(cls, tasks: "list[ChapterTask]") -> "CompletionStatus":
        from bookwright.models import TaskStatus

        counts = {status: 0 for status in TaskStatus}
        for task in tasks:
            counts[task.status] += 1
        return cls(
            total=len(tasks),
            done=counts[TaskStatus.DONE],
            pending=counts[TaskStatus.PENDING],
            error=counts[TaskStatus.ERROR],
            generating=counts[TaskStatus.GENERATING],
        )
