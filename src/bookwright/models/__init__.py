"""Data models for Bookwright."""

from .outline import (
    Outline,
    OutlineLeaf,
    OutlineNode,
    OutlineParseError,
    deserialize_node,
    outline_from_data,
    parse_outline,
    serialize_outline,
    strip_code_fence,
)
from .params import (
    CONTENT_LENGTH_PRESETS,
    MIN_CHAPTERS,
    READING_LEVEL_LABELS,
    GenerationTier,
    WorkflowParams,
    reading_level_label,
)
from .stage import (
    STAGE_LABELS,
    STAGE_ORDER,
    VALID_TRANSITIONS,
    InvalidTransitionError,
    StageGuardError,
    StageTracker,
    WorkflowStage,
)
from .task import (
    TASK_TRANSITIONS,
    TERMINAL_STATUSES,
    ChapterTask,
    InvalidTaskTransitionError,
    TaskStatus,
)

__all__ = [
    "CONTENT_LENGTH_PRESETS",
    "ChapterTask",
    "GenerationTier",
    "InvalidTaskTransitionError",
    "InvalidTransitionError",
    "MIN_CHAPTERS",
    "Outline",
    "OutlineLeaf",
    "OutlineNode",
    "OutlineParseError",
    "READING_LEVEL_LABELS",
    "STAGE_LABELS",
    "STAGE_ORDER",
    "StageGuardError",
    "StageTracker",
    "TASK_TRANSITIONS",
    "TERMINAL_STATUSES",
    "TaskStatus",
    "VALID_TRANSITIONS",
    "WorkflowParams",
    "WorkflowStage",
    "deserialize_node",
    "outline_from_data",
    "parse_outline",
    "reading_level_label",
    "serialize_outline",
    "strip_code_fence",
]
