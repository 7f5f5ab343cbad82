"""TUI widgets for Bookwright."""

from .header import Activity, StageIndicator, StatusHeader, StatusIcon
from .metrics import MetricsSummary, format_token_count
from .outline_tree import OutlineTree
from .task_list import (
    STATUS_BADGES,
    TaskListPanel,
    format_progress,
    format_task_line,
)

__all__ = [
    "Activity",
    "MetricsSummary",
    "OutlineTree",
    "STATUS_BADGES",
    "StageIndicator",
    "StatusHeader",
    "StatusIcon",
    "TaskListPanel",
    "format_progress",
    "format_task_line",
    "format_token_count",
]
