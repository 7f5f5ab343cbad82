"""Orchestration layer for Bookwright.

This package turns an outline into chapter tasks and drives them through a
model client, independent of the UI layer.

Usage:
    from bookwright.orchestration import WorkflowController

    controller = WorkflowController(client)
    await controller.submit_params(params)
    controller.accept_outline()
    await controller.start_generation()
"""

from bookwright.orchestration.accumulator import (
    StreamAccumulator,
    StreamInterruptedError,
    consume_stream,
)
from bookwright.orchestration.controller import ChunkCallback, WorkflowController
from bookwright.orchestration.driver import TaskDriver, build_preceding_content
from bookwright.orchestration.flattener import flatten_outline, sanitize_task_name
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

__all__ = [
    "BatchFinished",
    "ChunkCallback",
    "CompletionStatus",
    "DriverEvent",
    "EventListener",
    "ModelClient",
    "StreamAccumulator",
    "StreamInterruptedError",
    "TaskCompleted",
    "TaskDriver",
    "TaskFailed",
    "TaskProgress",
    "TaskStarted",
    "WorkflowController",
    "build_preceding_content",
    "consume_stream",
    "flatten_outline",
    "sanitize_task_name",
]
