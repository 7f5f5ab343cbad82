"""Workflow stage state machine.

Tracks which phase of book creation the run is in and validates every move
between phases against an explicit transition table.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class WorkflowStage(Enum):
    """All stages of a book run."""

    COLLECTING_INPUT = "input"
    GENERATING_OUTLINE = "outline:generating"
    OUTLINE_REVIEW = "outline:review"
    GENERATING_CHAPTERS = "chapters"
    VIEW_RESULT = "result"


class InvalidTransitionError(Exception):
    """Raised when an invalid stage transition is attempted."""

    def __init__(self, current: WorkflowStage, target: WorkflowStage) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid transition from {current.value} to {target.value}"
        )


class StageGuardError(Exception):
    """Raised when an operation's preconditions are not met in this stage."""

    def __init__(self, stage: WorkflowStage, reason: str) -> None:
        self.stage = stage
        self.reason = reason
        super().__init__(f"Cannot proceed from {stage.value}: {reason}")


# Valid stage transitions table
VALID_TRANSITIONS: dict[WorkflowStage, set[WorkflowStage]] = {
    WorkflowStage.COLLECTING_INPUT: {WorkflowStage.GENERATING_OUTLINE},
    WorkflowStage.GENERATING_OUTLINE: {
        WorkflowStage.OUTLINE_REVIEW,
        WorkflowStage.COLLECTING_INPUT,  # Outline failed
    },
    WorkflowStage.OUTLINE_REVIEW: {
        WorkflowStage.GENERATING_CHAPTERS,
        WorkflowStage.COLLECTING_INPUT,  # Go back, clears everything
    },
    WorkflowStage.GENERATING_CHAPTERS: {
        WorkflowStage.OUTLINE_REVIEW,  # Go back, keeps tasks
        WorkflowStage.VIEW_RESULT,
        WorkflowStage.COLLECTING_INPUT,  # Start over
    },
    WorkflowStage.VIEW_RESULT: {WorkflowStage.COLLECTING_INPUT},
}


# Stages in display order, for progress indicators
STAGE_ORDER: list[WorkflowStage] = [
    WorkflowStage.COLLECTING_INPUT,
    WorkflowStage.GENERATING_OUTLINE,
    WorkflowStage.OUTLINE_REVIEW,
    WorkflowStage.GENERATING_CHAPTERS,
    WorkflowStage.VIEW_RESULT,
]


STAGE_LABELS: dict[WorkflowStage, str] = {
    WorkflowStage.COLLECTING_INPUT: "Details",
    WorkflowStage.GENERATING_OUTLINE: "Outline",
    WorkflowStage.OUTLINE_REVIEW: "Review",
    WorkflowStage.GENERATING_CHAPTERS: "Write",
    WorkflowStage.VIEW_RESULT: "Book",
}


@dataclass
class StageTracker:
    """Current stage plus a history of transitions for debugging."""

    stage: WorkflowStage = WorkflowStage.COLLECTING_INPUT
    history: list[dict[str, str]] = field(default_factory=list)

    def can_transition(self, target: WorkflowStage) -> bool:
        """Check if transition to target stage is valid."""
        return target in VALID_TRANSITIONS.get(self.stage, set())

    def transition(self, target: WorkflowStage, reason: str | None = None) -> None:
        """Move to ``target``, recording the move.

        Raises:
            InvalidTransitionError: If the transition is not valid.
        """
        if not self.can_transition(target):
            raise InvalidTransitionError(self.stage, target)

        now = datetime.now(UTC)
        entry = {
            "from": self.stage.value,
            "to": target.value,
            "at": now.isoformat(),
        }
        if reason:
            entry["reason"] = reason
        self.history.append(entry)
        self.stage = target
