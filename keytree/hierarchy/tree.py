"""
Hierarchy tree data structures.

Tree nodes wrap items rebuilt from their key paths. The tree is derived
and disposable: the flat item collection stays the source of truth.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from keytree.core.item import Item, KeyPath


@dataclass
class TreeNode:
    """
    A node in the rebuilt hierarchy.

    Children are kept in key order by ``sort_children``; attachment order
    never leaks into the result.
    """

    item: Item
    children: list[TreeNode] = field(default_factory=list)
    parent: TreeNode | None = field(default=None, repr=False, compare=False)

    def add_child(self, child: TreeNode) -> None:
        """Attach a child node to this node."""
        child.parent = self
        self.children.append(child)

    def sort_children(self) -> None:
        """Recursively sort children by key path (stable)."""
        self.children.sort(key=lambda node: node.key_path)
        for child in self.children:
            child.sort_children()

    @property
    def key_path(self) -> KeyPath:
        return self.item.key_path

    @property
    def key(self) -> str:
        return self.item.key_path.joined

    @property
    def depth(self) -> int:
        """Get depth of this node in the tree (root = 0)."""
        depth = 0
        current = self.parent
        while current:
            depth += 1
            current = current.parent
        return depth

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    @property
    def descendant_count(self) -> int:
        """Count all descendants (children, grandchildren, etc.)."""
        count = len(self.children)
        for child in self.children:
            count += child.descendant_count
        return count

    def get_all_descendants(self) -> list[TreeNode]:
        """Get all descendants as a flat list (DFS order)."""
        descendants = []
        for child in self.children:
            descendants.append(child)
            descendants.extend(child.get_all_descendants())
        return descendants

    def get_leaves(self) -> list[TreeNode]:
        """Get all leaf nodes under this node."""
        if self.is_leaf:
            return [self]

        leaves = []
        for child in self.children:
            leaves.extend(child.get_leaves())
        return leaves

    def siblings(self) -> list[TreeNode]:
        """Nodes sharing this node's tree parent, including this node."""
        if self.parent is None:
            return [self]
        return self.parent.children

    def find(self, key_path: KeyPath) -> TreeNode | None:
        """Find the first node (DFS, key order) holding *key_path*."""
        if self.key_path == key_path:
            return self
        for child in self.children:
            result = child.find(key_path)
            if result:
                return result
        return None

    def to_dict(self, include_children: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary for JSON export.

        Args:
            include_children: If True, recursively include children
        """
        result = self.item.to_dict()
        result["depth"] = self.depth
        result["is_leaf"] = self.is_leaf
        result["child_count"] = len(self.children)

        if include_children:
            result["children"] = [child.to_dict(True) for child in self.children]

        return result

    def __repr__(self) -> str:
        title_preview = (self.item.title or "")[:40]
        return f"<TreeNode {self.key} '{title_preview}' children={len(self.children)}>"


@dataclass
class HierarchyTree:
    """
    A rebuilt hierarchy rooted at one item.

    Wraps the root node and provides tree-level operations.
    """

    root: TreeNode
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total_nodes(self) -> int:
        return 1 + self.root.descendant_count

    @property
    def max_depth(self) -> int:
        """Get maximum depth of the tree."""
        def get_max_depth(node: TreeNode) -> int:
            if not node.children:
                return node.depth
            return max(get_max_depth(child) for child in node.children)

        return get_max_depth(self.root)

    @property
    def leaf_count(self) -> int:
        return len(self.root.get_leaves())

    def get_all_nodes(self, include_root: bool = True) -> list[TreeNode]:
        """Get all nodes as a flat list (DFS order)."""
        nodes = []

        if include_root:
            nodes.append(self.root)

        nodes.extend(self.root.get_all_descendants())
        return nodes

    def get_node(self, key_path: KeyPath | str) -> TreeNode | None:
        """Find a node by key path (a ``KeyPath`` or a raw joined key)."""
        if isinstance(key_path, str):
            key_path = KeyPath.parse(key_path)
        return self.root.find(key_path)

    def get_nodes_at_depth(self, depth: int) -> list[TreeNode]:
        return [node for node in self.get_all_nodes() if node.depth == depth]

    def get_statistics(self) -> dict[str, Any]:
        """Get tree statistics."""
        all_nodes = self.get_all_nodes()
        # Nodes whose key path skips levels relative to their tree parent
        gap_nodes = [
            n for n in all_nodes
            if n.parent is not None and len(n.key_path) - len(n.parent.key_path) > 1
        ]

        return {
            "total_nodes": len(all_nodes),
            "leaf_nodes": self.leaf_count,
            "max_depth": self.max_depth,
            "gap_attachments": len(gap_nodes),
            "depth_distribution": dict(Counter(n.depth for n in all_nodes)),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert entire tree to dictionary."""
        return {
            "metadata": self.metadata,
            "statistics": self.get_statistics(),
            "root": self.root.to_dict(include_children=True),
        }

    def format_outline(self, max_depth: int | None = None) -> str:
        """Render an indented outline for debugging."""
        lines: list[str] = []

        def walk(node: TreeNode, indent: int = 0) -> None:
            if max_depth is not None and indent > max_depth:
                return
            title = f" {node.item.title}" if node.item.title else ""
            lines.append(f"{'  ' * indent}[{node.key}]{title}")
            for child in node.children:
                walk(child, indent + 1)

        walk(self.root)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"<HierarchyTree root={self.root.key} "
            f"nodes={self.total_nodes} "
            f"depth={self.max_depth}>"
        )
