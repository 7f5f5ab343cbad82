"""Interactive mode: open the book-writing TUI."""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def cmd_tui(args: argparse.Namespace) -> int:
    # Imported lazily so `bookwright write` never loads Textual
    from bookwright.tui.app import BookwrightApp

    logger.info("Opening TUI (command=%s)", args.command)
    BookwrightApp().run()
    return 0
