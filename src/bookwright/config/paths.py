"""Where Bookwright reads settings, writes its log, and saves books.

Settings and the debug log live in the XDG config and state directories
(``$XDG_CONFIG_HOME/bookwright``, ``$XDG_STATE_HOME/bookwright``). Saved books
go to ``books/`` under the workspace.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

APP_DIR_NAME = "bookwright"


def _xdg_home(variable: str, *fallback: str) -> Path:
    value = os.environ.get(variable)
    return Path(value) if value else Path.home().joinpath(*fallback)


@dataclass
class BookwrightPaths:
    workspace: Path

    config_home: Path = field(
        default_factory=lambda: _xdg_home("XDG_CONFIG_HOME", ".config")
    )
    state_home: Path = field(
        default_factory=lambda: _xdg_home("XDG_STATE_HOME", ".local", "state")
    )

    @property
    def global_config_dir(self) -> Path:
        return self.config_home / APP_DIR_NAME

    @property
    def global_settings(self) -> Path:
        return self.global_config_dir / "settings.json"

    @property
    def global_state_dir(self) -> Path:
        return self.state_home / APP_DIR_NAME

    @property
    def debug_log(self) -> Path:
        return self.global_state_dir / "debug.log"

    @property
    def output_dir(self) -> Path:
        return self.workspace / "books"

    def book_file(self, filename: str) -> Path:
        """First free path for ``filename`` in the output dir.

        ``tea.md`` becomes ``tea-2.md``, ``tea-3.md`` and so on when earlier
        saves already exist, so saving never overwrites a book.
        """
        candidate = self.output_dir / filename
        stem, suffix = candidate.stem, candidate.suffix
        copy = 2
        while candidate.exists():
            candidate = self.output_dir / f"{stem}-{copy}{suffix}"
            copy += 1
        return candidate


_paths: BookwrightPaths | None = None


def get_paths(workspace: Path | None = None) -> BookwrightPaths:
    """Return the process-wide paths, creating them on first use.

    ``workspace`` only matters on that first call; it defaults to the current
    directory.
    """
    global _paths
    if _paths is None:
        _paths = BookwrightPaths(workspace=workspace or Path.cwd())
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so the next ``get_paths`` rebuilds them."""
    global _paths
    _paths = None
