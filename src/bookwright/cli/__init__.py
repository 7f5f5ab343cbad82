"""Command line interface for Bookwright."""

from bookwright.cli.app import dispatch, run
from bookwright.cli.parser import build_parser, parse_args

__all__ = ["build_parser", "dispatch", "parse_args", "run"]
