"""Tests for book prompt rendering."""

from bookwright.llm.prompts import (
    LANGUAGES,
    NO_PRECEDING_CHAPTERS,
    language_name,
    render_chapter_prompt,
    render_outline_prompt,
    render_title_prompt,
)
from bookwright.models import WorkflowParams


def test_language_name() -> None:
    assert list(LANGUAGES)[0] == "en"
    assert language_name("fr") == "French"
    assert language_name("xx") == "xx"


def test_outline_prompt_fields() -> None:
    params = WorkflowParams(
        subject="Growing tomatoes",
        language="de",
        additional_info="Focus on balconies",
        chapter_count=15,
    )
    prompt = render_outline_prompt(params)

    assert "Growing tomatoes" in prompt
    assert "German" in prompt
    assert "Focus on balconies" in prompt
    assert "at least 15 top-level chapters" in prompt
    assert "JSON" in prompt


def test_empty_instructions_render_as_none() -> None:
    prompt = render_outline_prompt(WorkflowParams(subject="Tea", additional_info="  "))
    assert "Additional instructions: None" in prompt


def test_title_prompt_includes_outline() -> None:
    prompt = render_title_prompt(WorkflowParams(subject="Tea"), '{"Ch1": "desc"}')
    assert '{"Ch1": "desc"}' in prompt
    assert "title only" in prompt


def test_chapter_prompt_fields() -> None:
    params = WorkflowParams(subject="Tea", content_length=3000, reading_level=9)
    prompt = render_chapter_prompt(
        params,
        chapter_title="Brewing",
        chapter_outline="How to brew",
        full_outline='{"Brewing": "How to brew"}',
        preceding_content="",
    )

    assert 'Write the complete chapter "Brewing"' in prompt
    assert "How to brew" in prompt
    assert "roughly 3000 words" in prompt
    assert "reading level 9 of 10 (College)" in prompt
    assert NO_PRECEDING_CHAPTERS in prompt


def test_chapter_prompt_keeps_outline_braces() -> None:
    """Outline JSON passes through formatting untouched."""
    fragment = '{\n  "A": "a {curly}"\n}'
    prompt = render_chapter_prompt(
        WorkflowParams(subject="Tea"), "Ch", fragment, fragment, "prior"
    )
    assert fragment in prompt
    assert NO_PRECEDING_CHAPTERS not in prompt
