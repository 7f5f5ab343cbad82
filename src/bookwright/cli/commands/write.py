"""Headless book generation command."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from bookwright.export import render_book_markdown
from bookwright.llm.metrics import MetricsCollector
from bookwright.llm.providers.base import ConfigurationError
from bookwright.models import (
    ChapterTask,
    GenerationTier,
    OutlineNode,
    WorkflowParams,
)
from bookwright.orchestration import (
    DriverEvent,
    ModelClient,
    TaskCompleted,
    TaskFailed,
    TaskStarted,
    WorkflowController,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CHAPTER_ERRORS = 1
EXIT_SETUP_FAILED = 2


def _status(message: str) -> None:
    print(message, file=sys.stderr)


def params_from_args(args: argparse.Namespace) -> WorkflowParams:
    """Build workflow parameters from parsed ``write`` arguments."""
    language = args.language
    if not language:
        from bookwright.config.settings import settings

        language = settings.default_language
    return WorkflowParams(
        subject=args.subject,
        language=language,
        additional_info=args.instructions,
        tier=GenerationTier(args.tier),
        content_length=args.length,
        reading_level=args.reading_level,
        chapter_count=args.chapters,
    )


def print_outline(title: str | None, outline: OutlineNode) -> None:
    _status(f"Title: {title}")
    for index, (name, _) in enumerate(outline.entries(), start=1):
        _status(f"  {index:>2}. {name}")
    _status("")


def print_usage(metrics: MetricsCollector, tasks: list[ChapterTask]) -> None:
    """Token usage for the run, per phase and then per chapter."""
    _status(metrics.summary_line())
    for phase, totals in metrics.by_phase().items():
        _status(
            f"  {phase}: {totals.calls} calls, "
            f"tokens in/out {totals.tokens_in}/{totals.tokens_out}"
        )
    per_task = metrics.by_task()
    for task in sorted(tasks, key=lambda t: t.order_index):
        totals = per_task.get(task.id)
        if totals is not None:
            _status(
                f"    {task.title}: {totals.tokens_out} tokens out, "
                f"{totals.latency_ms / 1000:.1f}s"
            )


def _confirm(prompt: str) -> bool:
    if not sys.stdin.isatty():
        return True
    answer = input(prompt).strip().lower()
    return answer in ("", "y", "yes")


def _progress_listener(event: DriverEvent) -> None:
    if isinstance(event, TaskStarted):
        _status(f"Writing: {event.task.title}")
    elif isinstance(event, TaskCompleted):
        words = len(event.task.content.split())
        elapsed = event.task.elapsed_seconds or 0.0
        _status(f"  ✓ Done ({words} words, {elapsed:.1f}s)")
    elif isinstance(event, TaskFailed):
        _status(f"  ✗ Failed: {event.message}")


async def write_book(
    args: argparse.Namespace,
    params: WorkflowParams,
    client: ModelClient,
) -> int:
    controller = WorkflowController(client, listener=_progress_listener)

    _status(f"Outlining: {params.subject}")
    try:
        ok = await controller.submit_params(params)
    except ConfigurationError as e:
        _status(f"Error: {e}")
        return EXIT_SETUP_FAILED
    if not ok or controller.outline is None:
        _status(f"Error: {controller.error}")
        return EXIT_SETUP_FAILED

    print_outline(controller.title, controller.outline)
    if not args.yes and not _confirm("Write these chapters? [Y/n] "):
        _status("Aborted.")
        return EXIT_CHAPTER_ERRORS

    tasks = controller.accept_outline()
    _status(f"Chapters: {len(tasks)}")
    _status("")
    status = await controller.start_generation()

    markdown = render_book_markdown(controller.title, controller.tasks)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(markdown, encoding="utf-8")
        _status(f"\nSaved to {args.output}")
    else:
        sys.stdout.write(markdown)

    _status("")
    _status(f"Done: {status.done}/{status.total}")
    if status.error:
        _status(f"Errors: {status.error}")
    if controller.error:
        _status(controller.error)

    metrics = getattr(client, "metrics", None)
    if isinstance(metrics, MetricsCollector) and metrics.total_calls:
        print_usage(metrics, controller.tasks)

    return EXIT_OK if status.all_done else EXIT_CHAPTER_ERRORS


def cmd_write(args: argparse.Namespace, client: ModelClient | None = None) -> int:
    """Generate a whole book without the TUI."""
    params = params_from_args(args)
    errors = params.validation_errors()
    if errors:
        for error in errors:
            _status(f"Error: {error}")
        return EXIT_SETUP_FAILED

    if client is None:
        from bookwright.llm.client import BookClient

        client = BookClient.from_settings()

    logger.info("Headless write: subject=%r tier=%s", params.subject, params.tier.value)
    return asyncio.run(write_book(args, params, client))
