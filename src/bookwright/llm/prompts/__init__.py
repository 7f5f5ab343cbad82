"""Centralized prompt definitions for book generation."""
from __future__ import annotations

from bookwright.llm.prompts.book import (
    BOOK_SYSTEM_PROMPT,
    CHAPTER_PROMPT,
    LANGUAGES,
    NO_PRECEDING_CHAPTERS,
    OUTLINE_PROMPT,
    TITLE_PROMPT,
    language_name,
    render_chapter_prompt,
    render_outline_prompt,
    render_title_prompt,
)

__all__ = [
    "BOOK_SYSTEM_PROMPT",
    "CHAPTER_PROMPT",
    "LANGUAGES",
    "NO_PRECEDING_CHAPTERS",
    "OUTLINE_PROMPT",
    "TITLE_PROMPT",
    "language_name",
    "render_chapter_prompt",
    "render_outline_prompt",
    "render_title_prompt",
]
