"""
Caller-owned view state.

Fold state, display mode, depth limit and zoom live on a ``ViewSession``
that the caller creates and passes around, so rebuilding or rendering a
tree never depends on state left behind by an earlier call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from keytree.core.item import Item, KeyPath
from keytree.hierarchy.tree import TreeNode


class DisplayMode(str, Enum):
    """What a node label shows."""

    ID = "id"
    TITLE = "title"
    BOTH = "both"


@dataclass
class ZoomTransform:
    """Pan offset and zoom scale of one rendered graph."""

    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"scale": self.scale, "x": self.x, "y": self.y}


@dataclass
class ViewSession:
    """
    Transient view state for one rendered hierarchy.

    Attributes:
        folded: Key paths whose children are hidden.
        display_mode: Label mode for nodes.
        max_depth: Deepest tree level shown (root = 0), or None for all.
        zoom: Zoom transform per graph ID.
    """

    folded: set[KeyPath] = field(default_factory=set)
    display_mode: DisplayMode = DisplayMode.TITLE
    max_depth: int | None = None
    zoom: dict[str, ZoomTransform] = field(default_factory=dict)

    def fold(self, key_path: KeyPath) -> None:
        self.folded.add(key_path)

    def unfold(self, key_path: KeyPath) -> None:
        self.folded.discard(key_path)

    def toggle(self, key_path: KeyPath) -> bool:
        """Flip the fold state of *key_path*; returns True if now folded."""
        if key_path in self.folded:
            self.folded.discard(key_path)
            return False
        self.folded.add(key_path)
        return True

    def is_folded(self, key_path: KeyPath) -> bool:
        return key_path in self.folded

    def reset(self) -> None:
        """Forget folds and zoom, e.g. when a different root is opened."""
        self.folded.clear()
        self.zoom.clear()

    def zoom_for(self, graph_id: str) -> ZoomTransform:
        """Zoom transform for *graph_id*, created on first use."""
        return self.zoom.setdefault(graph_id, ZoomTransform())

    def label(self, item: Item) -> str:
        """Node label according to the display mode.

        Falls back to the key when the item has no title.
        """
        if self.display_mode is DisplayMode.ID or not item.title:
            return item.key
        if self.display_mode is DisplayMode.BOTH:
            return f"{item.key}: {item.title}"
        return item.title

    def visible_tree(self, root: TreeNode) -> TreeNode:
        """Copy of the tree with folded and too-deep branches pruned.

        The built tree is left untouched and the copy keeps its sibling
        order, so folding never reorders anything.
        """
        return self._copy(root, 0)

    def _copy(self, node: TreeNode, depth: int) -> TreeNode:
        copy = TreeNode(item=node.item)
        if node.key_path in self.folded:
            return copy
        if self.max_depth is not None and depth >= self.max_depth:
            return copy
        for child in node.children:
            copy.add_child(self._copy(child, depth + 1))
        return copy

    def hidden_count(self, node: TreeNode) -> int:
        """Number of descendants hidden under a folded node."""
        if node.key_path not in self.folded:
            return 0
        return node.descendant_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "folded": sorted(path.joined for path in self.folded),
            "display_mode": self.display_mode.value,
            "max_depth": self.max_depth,
            "zoom": {graph_id: z.to_dict() for graph_id, z in self.zoom.items()},
        }
