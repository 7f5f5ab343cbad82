"""Top-level CLI flow: parse, pin the workspace, set up logging, dispatch."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from bookwright.cli.commands import cmd_tui, cmd_write
from bookwright.cli.parser import parse_args
from bookwright.config.paths import get_paths

logger = logging.getLogger(__name__)

LoggingSetup = Callable[[str | None], Path]


def dispatch(args: argparse.Namespace) -> int:
    """Run the handler for ``args.command``; no command opens the TUI."""
    if args.command == "write":
        return cmd_write(args)
    return cmd_tui(args)


def resolve_workspace(workdir: Path | None) -> Path:
    """Directory books are saved under, created if it does not exist yet."""
    if workdir is None:
        return Path.cwd()
    workspace = workdir.expanduser().resolve()
    workspace.mkdir(parents=True, exist_ok=True)
    return workspace


def run(
    argv: Sequence[str] | None = None,
    *,
    configure_logging: LoggingSetup | None = None,
) -> int:
    """Entry flow shared by the console script and tests.

    The paths singleton is pinned to the workspace before anything else asks
    for it, so the TUI and ``write`` both save under ``--workdir``.
    """
    args = parse_args(argv)
    paths = get_paths(resolve_workspace(args.workdir))

    if configure_logging is not None:
        log_file = configure_logging(args.log_level)
        logger.info("Bookwright starting, logging to %s", log_file)

    logger.info("Books are saved under %s", paths.output_dir)
    return dispatch(args)
