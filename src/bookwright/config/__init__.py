"""Configuration management for Bookwright."""
from __future__ import annotations

from bookwright.config.paths import BookwrightPaths, get_paths, reset_paths
from bookwright.config.settings import Settings, get_settings_path, settings

__all__ = [
    "BookwrightPaths",
    "Settings",
    "get_paths",
    "get_settings_path",
    "reset_paths",
    "settings",
]
