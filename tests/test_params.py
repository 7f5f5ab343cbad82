"""Tests for workflow parameters."""

import dataclasses

import pytest

from bookwright.models import GenerationTier, WorkflowParams, reading_level_label
from bookwright.models.params import (
    DEFAULT_CONTENT_LENGTH,
    DEFAULT_READING_LEVEL,
    MIN_CHAPTERS,
)


def test_defaults() -> None:
    params = WorkflowParams(subject="Tea")
    assert params.language == "en"
    assert params.tier == GenerationTier.FAST
    assert params.content_length == DEFAULT_CONTENT_LENGTH == 7000
    assert params.reading_level == DEFAULT_READING_LEVEL == 5
    assert params.chapter_count == MIN_CHAPTERS == 12
    assert params.validation_errors() == []


def test_params_are_frozen() -> None:
    params = WorkflowParams(subject="Tea")
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.subject = "Coffee"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("overrides", "fragment"),
    [
        ({"subject": "   "}, "Subject"),
        ({"chapter_count": 11}, "12 chapters"),
        ({"content_length": 199}, "200 words"),
        ({"reading_level": 0}, "Reading level"),
        ({"reading_level": 11}, "Reading level"),
    ],
)
def test_validation_errors(overrides: dict[str, object], fragment: str) -> None:
    params = dataclasses.replace(WorkflowParams(subject="Tea"), **overrides)
    errors = params.validation_errors()
    assert len(errors) == 1
    assert fragment in errors[0]
    with pytest.raises(ValueError):
        params.validate()


def test_validate_joins_all_errors() -> None:
    params = WorkflowParams(subject="", chapter_count=1)
    with pytest.raises(ValueError) as exc_info:
        params.validate()
    assert "; " in str(exc_info.value)


@pytest.mark.parametrize(
    ("level", "label"),
    [
        (2, "Kindergarten"),
        (5, "Standard"),
        (10, "Graduate School"),
        (1, "Kindergarten"),
        (6, "Standard"),
        (9, "College"),
    ],
)
def test_reading_level_label(level: int, label: str) -> None:
    assert reading_level_label(level) == label
