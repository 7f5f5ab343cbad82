"""Chapter task data model and its lifecycle state machine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum


class TaskStatus(Enum):
    """Status of a chapter task."""

    PENDING = "pending"
    GENERATING = "generating"
    DONE = "done"
    ERROR = "error"


# Valid task transitions. DONE and ERROR are terminal.
TASK_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.PENDING: {TaskStatus.GENERATING},
    TaskStatus.GENERATING: {TaskStatus.DONE, TaskStatus.ERROR},
    TaskStatus.DONE: set(),
    TaskStatus.ERROR: set(),
}

TERMINAL_STATUSES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.DONE, TaskStatus.ERROR}
)


class InvalidTaskTransitionError(Exception):
    """Raised when a task is moved along an edge the state machine forbids."""

    def __init__(self, task_id: str, current: TaskStatus, target: TaskStatus) -> None:
        self.task_id = task_id
        self.current = current
        self.target = target
        super().__init__(
            f"Task {task_id}: invalid transition from {current.value} "
            f"to {target.value}"
        )


@dataclass(slots=True)
class ChapterTask:
    """A single chapter to be written, derived from one top-level outline entry."""

    id: str
    title: str
    outline_fragment: str
    order_index: int
    status: TaskStatus = TaskStatus.PENDING
    content: str = ""
    error_message: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        """Whether the task has reached DONE or ERROR."""
        return self.status in TERMINAL_STATUSES

    @property
    def elapsed_seconds(self) -> float | None:
        """Wall time from start to DONE or ERROR; None until then."""
        if self.started_at is None or self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def can_transition(self, target: TaskStatus) -> bool:
        """Check if moving to ``target`` is allowed from the current status."""
        return target in TASK_TRANSITIONS[self.status]

    def _move_to(self, target: TaskStatus) -> None:
        if not self.can_transition(target):
            raise InvalidTaskTransitionError(self.id, self.status, target)
        self.status = target

    def start(self) -> None:
        """Enter GENERATING with empty content and no error."""
        self._move_to(TaskStatus.GENERATING)
        self.content = ""
        self.error_message = None
        self.started_at = datetime.now(UTC)

    def update_content(self, buffer: str) -> None:
        """Replace live content with the raw accumulation received so far."""
        if self.status != TaskStatus.GENERATING:
            raise InvalidTaskTransitionError(self.id, self.status, self.status)
        self.content = buffer

    def complete(self, content: str) -> None:
        """Commit final content and mark DONE."""
        self._move_to(TaskStatus.DONE)
        self.content = content
        self.completed_at = datetime.now(UTC)

    def fail(self, message: str, partial_content: str = "") -> None:
        """Mark ERROR, keeping whatever partial content was received."""
        self._move_to(TaskStatus.ERROR)
        self.error_message = message
        self.content = partial_content
        self.completed_at = datetime.now(UTC)

