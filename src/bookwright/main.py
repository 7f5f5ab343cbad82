"""Console entry point for bookwright."""

import logging
import os
import sys
from pathlib import Path

from bookwright.cli.app import run
from bookwright.config.paths import get_paths

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# HTTP client libraries log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai")


def _level_from(name: str | None) -> int:
    requested = name or os.environ.get("BOOKWRIGHT_LOG_LEVEL") or "INFO"
    level = logging.getLevelName(requested.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level_name: str | None = None) -> Path:
    """Send all logging to the state directory's debug log.

    The TUI owns the terminal, so nothing is logged to stderr. Returns the
    log file path.
    """
    paths = get_paths()
    paths.global_state_dir.mkdir(parents=True, exist_ok=True)
    log_file = paths.debug_log

    handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(_level_from(level_name))
    root.addHandler(handler)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return log_file


def main() -> None:
    sys.exit(run(configure_logging=setup_logging))


if __name__ == "__main__":
    main()
