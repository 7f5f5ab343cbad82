"""Outline, title and chapter prompts."""
from __future__ import annotations

from typing import TYPE_CHECKING

from bookwright.models.params import reading_level_label

if TYPE_CHECKING:
    from bookwright.models import WorkflowParams

# Language codes offered by the input form, in display order
LANGUAGES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "ru": "Russian",
    "zh": "Chinese (Simplified)",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "tr": "Turkish",
    "pl": "Polish",
}

NO_PRECEDING_CHAPTERS = "No chapters written yet."

BOOK_SYSTEM_PROMPT = (
    "You are an experienced nonfiction author and editor. Follow the "
    "requested output format exactly."
)

OUTLINE_PROMPT = """\
Create a detailed table of contents for a book written in {language}.

Subject: {subject}
Additional instructions: {additional_info}

Requirements:
1. Provide at least {chapter_count} top-level chapters.
2. Each top-level key is a chapter title. Its value is either a one-sentence
   description of the chapter, or a JSON object whose keys are section titles
   and whose values are one-sentence section descriptions.
3. Chapter and section titles must be written in {language}.
4. Order the chapters the way they should be read.

Output ONLY a single JSON object, no markdown code blocks or other text.

Generate the outline JSON now:"""

TITLE_PROMPT = """\
Suggest a title for a book written in {language}.

Subject: {subject}
Additional instructions: {additional_info}

Book outline:
{outline}

Reply with the title only, in {language}, without quotes or commentary."""

CHAPTER_PROMPT = """\
You are writing one chapter of a book in {language}.

Overall subject of the book: {subject}
Additional instructions: {additional_info}

Full book outline:
{full_outline}

Chapter to write now: {chapter_title}
Outline of this chapter:
{chapter_outline}

Chapters written so far:
{preceding_content}

Write the complete chapter "{chapter_title}" in {language}.
- Aim for roughly {content_length} words.
- Write at reading level {reading_level} of 10 ({reading_level_label}).
- Cover every section in the chapter outline, using Markdown subheadings.
- Stay consistent with the chapters written so far and do not repeat them.
- Do not include the chapter title as a top-level heading.

Output only the chapter text."""


def language_name(code: str) -> str:
    """Display name for a language code; unknown codes pass through."""
    return LANGUAGES.get(code, code)


def _additional_info(params: WorkflowParams) -> str:
    return params.additional_info.strip() or "None"


def render_outline_prompt(params: WorkflowParams) -> str:
    return OUTLINE_PROMPT.format(
        language=language_name(params.language),
        subject=params.subject,
        additional_info=_additional_info(params),
        chapter_count=params.chapter_count,
    )


def render_title_prompt(params: WorkflowParams, outline_text: str) -> str:
    return TITLE_PROMPT.format(
        language=language_name(params.language),
        subject=params.subject,
        additional_info=_additional_info(params),
        outline=outline_text,
    )


def render_chapter_prompt(
    params: WorkflowParams,
    chapter_title: str,
    chapter_outline: str,
    full_outline: str,
    preceding_content: str,
) -> str:
    """Build the prompt for one chapter.

    ``preceding_content`` is the concatenation of finished earlier chapters;
    an empty string is replaced by a short placeholder.
    """
    return CHAPTER_PROMPT.format(
        language=language_name(params.language),
        subject=params.subject,
        additional_info=_additional_info(params),
        full_outline=full_outline,
        chapter_title=chapter_title,
        chapter_outline=chapter_outline,
        preceding_content=preceding_content or NO_PRECEDING_CHAPTERS,
        content_length=params.content_length,
        reading_level=params.reading_level,
        reading_level_label=reading_level_label(params.reading_level),
    )
