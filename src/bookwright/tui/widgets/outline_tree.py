"""Tree view of a book outline."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from bookwright.models import Outline, OutlineLeaf, OutlineNode


class OutlineTree(Tree[str]):
    """Read-only tree of outline entries; leaves show their description."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("Outline", **kwargs)
        self.show_root = False

    def load_outline(self, outline: OutlineNode) -> None:
        self.root.remove_children()
        for index, (name, child) in enumerate(outline.entries(), start=1):
            self._add_entry(self.root, f"{index}. {name}", child)
        self.root.expand()
        for node in self.root.children:
            node.expand()

    def _add_entry(self, parent: TreeNode[str], label: str, value: Outline) -> None:
        if isinstance(value, OutlineLeaf):
            node = parent.add(Text(label), data=label, expand=False)
            if value.text:
                node.add_leaf(Text(value.text, style="dim"), data=value.text)
            else:
                node.allow_expand = False
            return
        node = parent.add(Text(label), data=label)
        for name, child in value.entries():
            self._add_entry(node, name, child)
