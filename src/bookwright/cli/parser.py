"""Argument parser construction for Bookwright CLI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from bookwright.models.params import (
    DEFAULT_CONTENT_LENGTH,
    DEFAULT_READING_LEVEL,
    MIN_CHAPTERS,
    GenerationTier,
)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        description="Bookwright - write a book chapter by chapter with an LLM"
    )
    parser.add_argument(
        "--workdir",
        "-w",
        type=Path,
        help="Working directory for saved books (default: current directory)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Debug log verbosity (default: BOOKWRIGHT_LOG_LEVEL or INFO)",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Write command (headless generation)
    write_parser = subparsers.add_parser(
        "write",
        help="Generate a whole book without the TUI",
    )
    write_parser.add_argument(
        "subject",
        help="What the book is about",
    )
    write_parser.add_argument(
        "--language",
        "-l",
        help="Language code for the book (default: from settings)",
    )
    write_parser.add_argument(
        "--instructions",
        "-i",
        default="",
        help="Additional instructions for the outline and every chapter",
    )
    write_parser.add_argument(
        "--tier",
        choices=[tier.value for tier in GenerationTier],
        default=GenerationTier.FAST.value,
        help="Model tier: fast or quality (default: fast)",
    )
    write_parser.add_argument(
        "--length",
        type=int,
        default=DEFAULT_CONTENT_LENGTH,
        help=f"Approximate words per chapter (default: {DEFAULT_CONTENT_LENGTH})",
    )
    write_parser.add_argument(
        "--reading-level",
        type=int,
        default=DEFAULT_READING_LEVEL,
        help=f"Reading level from 1 to 10 (default: {DEFAULT_READING_LEVEL})",
    )
    write_parser.add_argument(
        "--chapters",
        type=int,
        default=MIN_CHAPTERS,
        help=f"Minimum number of chapters (default: {MIN_CHAPTERS})",
    )
    write_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Markdown output file (default: stdout)",
    )
    write_parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Accept the generated outline without asking",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments from argv (or sys.argv when omitted)."""
    parser = build_parser()
    if argv is None:
        return parser.parse_args()
    return parser.parse_args(list(argv))
