"""Outline tree model.

An outline is a tagged union: a leaf holds a description string, a node holds
an ordered mapping of entry names to further outlines. The root of a book
outline is always a node; its entries become chapters.

The canonical serialization is JSON with a two-space indent and the original
key order. Re-serializing the same tree always yields the same text, which
matters because the text is embedded verbatim into chapter prompts.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

logger = logging.getLogger(__name__)

# Matches an optional ```lang fence wrapping the whole payload
_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class OutlineParseError(ValueError):
    """Raised when model output cannot be parsed into an outline."""

    def __init__(self, message: str, raw_text: str = "") -> None:
        self.raw_text = raw_text
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class OutlineLeaf:
    """A terminal outline entry: a plain description."""

    text: str

    def to_data(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class OutlineNode:
    """An outline entry with named children, in iteration order."""

    children: dict[str, Outline] = field(default_factory=dict)

    def to_data(self) -> dict[str, Any]:
        """Convert to plain nested dicts and strings."""
        return {name: child.to_data() for name, child in self.children.items()}

    def serialize(self) -> str:
        """Canonical JSON text for this subtree."""
        return serialize_outline(self)

    def entries(self) -> Iterator[tuple[str, Outline]]:
        """Iterate over (name, child) pairs in order."""
        yield from self.children.items()

    def __len__(self) -> int:
        return len(self.children)

    def __hash__(self) -> int:
        return hash(self.serialize())


Outline: TypeAlias = OutlineLeaf | OutlineNode


def outline_from_data(data: Any) -> Outline:
    """Build an outline tree from decoded JSON.

    Strings become leaves and objects become nodes. Arrays become nodes keyed
    by 1-based position; other scalars become leaves holding their JSON text.
    """
    if isinstance(data, str):
        return OutlineLeaf(data)
    if isinstance(data, Mapping):
        return OutlineNode(
            {str(name): outline_from_data(value) for name, value in data.items()}
        )
    if isinstance(data, list):
        return OutlineNode(
            {str(i): outline_from_data(value) for i, value in enumerate(data, 1)}
        )
    return OutlineLeaf(json.dumps(data))


def serialize_outline(outline: Outline) -> str:
    """Serialize an outline to its canonical text form.

    Leaves serialize to their text verbatim; nodes to indented JSON.
    """
    if isinstance(outline, OutlineLeaf):
        return outline.text
    return json.dumps(outline.to_data(), indent=2, ensure_ascii=False)


def deserialize_node(text: str) -> OutlineNode:
    """Inverse of :func:`serialize_outline` for node serializations."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise OutlineParseError(f"Not a serialized outline node: {e}", text) from e
    if not isinstance(data, dict):
        raise OutlineParseError("Not a serialized outline node.", text)
    node = outline_from_data(data)
    assert isinstance(node, OutlineNode)
    return node


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ``` fence (with optional language tag) if present."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match and match.group(2):
        return match.group(2).strip()
    return stripped


def parse_outline(text: str) -> OutlineNode:
    """Parse raw model output into a root outline node.

    Raises:
        OutlineParseError: If the text is not JSON or the root is not an object.
    """
    payload = strip_code_fence(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse outline JSON: %s", e)
        raise OutlineParseError(
            "Invalid JSON response from model: the outline was not valid JSON.",
            raw_text=text,
        ) from e

    if not isinstance(data, dict):
        raise OutlineParseError(
            f"Outline must be a JSON object, got {type(data).__name__}.",
            raw_text=text,
        )
    if not data:
        raise OutlineParseError("Outline has no entries.", raw_text=text)

    root = outline_from_data(data)
    assert isinstance(root, OutlineNode)
    logger.info("Parsed outline with %d top-level entries", len(root))
    return root
