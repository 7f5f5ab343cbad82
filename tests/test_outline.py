"""Tests for outline parsing and canonical serialization."""

import json

import pytest

from bookwright.models import (
    OutlineLeaf,
    OutlineNode,
    OutlineParseError,
    deserialize_node,
    outline_from_data,
    parse_outline,
    serialize_outline,
    strip_code_fence,
)


class TestStripCodeFence:
    def test_plain_text_unchanged(self) -> None:
        assert strip_code_fence('  {"a": "b"}  ') == '{"a": "b"}'

    def test_json_fence_removed(self) -> None:
        text = '```json\n{"a": "b"}\n```'
        assert strip_code_fence(text) == '{"a": "b"}'

    def test_bare_fence_removed(self) -> None:
        text = '```\n{"a": "b"}\n```'
        assert strip_code_fence(text) == '{"a": "b"}'

    def test_fence_with_surrounding_whitespace(self) -> None:
        text = '\n\n```json\n  {"a": "b"}  \n```\n'
        assert strip_code_fence(text) == '{"a": "b"}'


class TestParseOutline:
    """Tests for parse_outline."""

    def test_parses_mixed_leaf_and_node_entries(self) -> None:
        root = parse_outline('{"Ch1": "desc1", "Ch2": {"A": "a", "B": "b"}}')

        assert list(root.children) == ["Ch1", "Ch2"]
        assert root.children["Ch1"] == OutlineLeaf("desc1")
        assert root.children["Ch2"] == OutlineNode(
            {"A": OutlineLeaf("a"), "B": OutlineLeaf("b")}
        )

    def test_preserves_key_order(self) -> None:
        root = parse_outline('{"Zeta": "z", "Alpha": "a", "Mid": "m"}')
        assert [name for name, _ in root.entries()] == ["Zeta", "Alpha", "Mid"]

    def test_parses_fenced_payload(self) -> None:
        root = parse_outline('```json\n{"One": "first"}\n```')
        assert len(root) == 1

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(OutlineParseError) as exc_info:
            parse_outline("Here is your outline: Chapter 1...")
        assert "not valid JSON" in str(exc_info.value)
        assert exc_info.value.raw_text.startswith("Here is")

    def test_array_root_raises(self) -> None:
        with pytest.raises(OutlineParseError):
            parse_outline('["Ch1", "Ch2"]')

    def test_empty_object_raises(self) -> None:
        with pytest.raises(OutlineParseError):
            parse_outline("{}")


class TestOutlineFromData:
    def test_list_becomes_numbered_node(self) -> None:
        node = outline_from_data({"Ch": ["a", "b"]})
        assert isinstance(node, OutlineNode)
        chapter = node.children["Ch"]
        assert chapter == OutlineNode({"1": OutlineLeaf("a"), "2": OutlineLeaf("b")})

    def test_scalar_becomes_json_leaf(self) -> None:
        node = outline_from_data({"Count": 3, "Flag": True, "None": None})
        assert isinstance(node, OutlineNode)
        assert node.children["Count"] == OutlineLeaf("3")
        assert node.children["Flag"] == OutlineLeaf("true")
        assert node.children["None"] == OutlineLeaf("null")


class TestSerialization:
    """Canonical serialization must be stable and reversible for nodes."""

    def test_leaf_serializes_verbatim(self) -> None:
        assert serialize_outline(OutlineLeaf("  spaced text ")) == "  spaced text "

    def test_node_serialization_is_indented_json(self) -> None:
        node = OutlineNode({"A": OutlineLeaf("a"), "B": OutlineLeaf("b")})
        assert serialize_outline(node) == json.dumps(
            {"A": "a", "B": "b"}, indent=2, ensure_ascii=False
        )

    def test_non_ascii_kept(self) -> None:
        node = OutlineNode({"Café": OutlineLeaf("naïve")})
        assert "Café" in node.serialize()
        assert "naïve" in node.serialize()

    def test_serialization_is_deterministic(self) -> None:
        text = '{"X": {"b": "1", "a": {"deep": "2"}}, "Y": "y"}'
        assert parse_outline(text).serialize() == parse_outline(text).serialize()

    def test_deserialize_round_trips_nested_node(self) -> None:
        node = outline_from_data({"b": "1", "a": {"deep": ["x", "y"]}})
        assert isinstance(node, OutlineNode)
        assert deserialize_node(serialize_outline(node)) == node

    def test_deserialize_rejects_non_object(self) -> None:
        with pytest.raises(OutlineParseError):
            deserialize_node('"just a string"')

    def test_nodes_are_hashable(self) -> None:
        a = OutlineNode({"A": OutlineLeaf("a")})
        b = OutlineNode({"A": OutlineLeaf("a")})
        assert hash(a) == hash(b)
        assert len({a, b}) == 1
