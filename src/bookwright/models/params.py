"""Workflow parameters collected once at the start of a run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GenerationTier(Enum):
    """Model tier used for every call in a run."""

    FAST = "fast"
    QUALITY = "quality"


MIN_CHAPTERS = 12
MIN_CONTENT_LENGTH = 200
MIN_READING_LEVEL = 1
MAX_READING_LEVEL = 10

# Word-count presets for a chapter
CONTENT_LENGTH_PRESETS: dict[str, int] = {
    "short": 500,
    "medium": 7000,
    "long": 15000,
}

# Reading level scale labels (1-10)
READING_LEVEL_LABELS: dict[int, str] = {
    2: "Kindergarten",
    4: "Middle School",
    5: "Standard",
    7: "High School",
    8: "College",
    10: "Graduate School",
}

DEFAULT_CONTENT_LENGTH = CONTENT_LENGTH_PRESETS["medium"]
DEFAULT_READING_LEVEL = 5


def reading_level_label(level: int) -> str:
    """Return the label for the nearest named reading level."""
    if level in READING_LEVEL_LABELS:
        return READING_LEVEL_LABELS[level]
    nearest = min(READING_LEVEL_LABELS, key=lambda value: (abs(value - level), value))
    return READING_LEVEL_LABELS[nearest]


@dataclass(frozen=True, slots=True)
class WorkflowParams:
    """User parameters for one book run. Immutable once submitted."""

    subject: str
    language: str = "en"
    additional_info: str = ""
    tier: GenerationTier = GenerationTier.FAST
    content_length: int = DEFAULT_CONTENT_LENGTH
    reading_level: int = DEFAULT_READING_LEVEL
    chapter_count: int = MIN_CHAPTERS

    def validation_errors(self) -> list[str]:
        """Return a list of human-readable problems, empty when valid."""
        errors: list[str] = []
        if not self.subject.strip():
            errors.append("Subject must not be empty")
        if not self.language.strip():
            errors.append("Language must not be empty")
        if self.chapter_count < MIN_CHAPTERS:
            errors.append(f"At least {MIN_CHAPTERS} chapters are required")
        if self.content_length < MIN_CONTENT_LENGTH:
            errors.append(
                f"Chapter length must be at least {MIN_CONTENT_LENGTH} words"
            )
        if not MIN_READING_LEVEL <= self.reading_level <= MAX_READING_LEVEL:
            errors.append(
                f"Reading level must be between {MIN_READING_LEVEL} "
                f"and {MAX_READING_LEVEL}"
            )
        return errors

    def validate(self) -> None:
        """Raise ValueError listing every problem with these parameters."""
        errors = self.validation_errors()
        if errors:
            raise ValueError("; ".join(errors))
