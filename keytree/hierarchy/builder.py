"""
Hierarchy tree builder.

Rebuilds trees from flat items carrying key paths.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from keytree.core.item import Item, KeyPath
from keytree.hierarchy.tree import HierarchyTree, TreeNode

logger = logging.getLogger(__name__)

VIRTUAL_ROOT_ID = "__root__"


class HierarchyBuilder:
    """
    Builds hierarchy trees from flat items.

    Parents are resolved by exact key path first. When the direct parent
    level has no item (a gap), the item hangs under its deepest existing
    ancestor instead. Input items are never mutated.
    """

    @staticmethod
    def build(root: Item, all_items: Iterable[Item]) -> TreeNode:
        """Build the subtree rooted at *root*.

        Strategy:
        1. Keep items whose key path has the root's path as a proper prefix
        2. Attach shallower items first so deeper ones can find them
        3. Exact parent path match, else deepest registered ancestor
        4. Sort every node's children by key path

        Args:
            root: Item at the top of the subtree.
            all_items: Flat collection to draw descendants from. May
                contain duplicates and unrelated items.

        Returns:
            TreeNode for *root* with its descendants attached.
        """
        tree_root = TreeNode(item=root)
        root_path = root.key_path
        registered: dict[KeyPath, TreeNode] = {root_path: tree_root}

        descendants = sorted(
            (
                item for item in all_items
                if item.id != root.id and root_path.is_ancestor_of(item.key_path)
            ),
            key=lambda item: len(item.key_path),
        )

        for item in descendants:
            node = TreeNode(item=item)
            parent = HierarchyBuilder._resolve_parent(item.key_path, root_path, registered)

            if parent is None:
                logger.debug("Dropping %s: no ancestor under %s", item.key, root_path)
                continue

            parent.add_child(node)
            # First item wins a shared path; later duplicates stay siblings
            registered.setdefault(item.key_path, node)

        tree_root.sort_children()
        return tree_root

    @staticmethod
    def _resolve_parent(
        key_path: KeyPath,
        root_path: KeyPath,
        registered: dict[KeyPath, TreeNode],
    ) -> TreeNode | None:
        """Find the exact parent, or the deepest registered ancestor.

        Probes prefixes from longest to shortest, one dictionary lookup
        per level, stopping at the root.
        """
        segments = key_path.segments
        for length in range(len(segments) - 1, len(root_path) - 1, -1):
            node = registered.get(KeyPath(segments[:length]))
            if node is not None:
                return node
        return None

    @staticmethod
    def build_tree(
        root: Item,
        all_items: Iterable[Item],
        metadata: dict[str, Any] | None = None,
    ) -> HierarchyTree:
        """Build a subtree and wrap it in a HierarchyTree."""
        return HierarchyTree(
            root=HierarchyBuilder.build(root, all_items),
            metadata=dict(metadata or {}),
        )

    @staticmethod
    def build_all(items: Iterable[Item]) -> HierarchyTree:
        """Build every item under a virtual root with an empty key path.

        Top-level items become children of the virtual root, so every
        node in the collection has its full set of siblings.
        """
        virtual_root = Item(id=VIRTUAL_ROOT_ID, key_path=KeyPath())
        return HierarchyBuilder.build_tree(virtual_root, items, metadata={"virtual_root": True})

    @staticmethod
    def find_roots(items: Iterable[Item]) -> list[Item]:
        """Find items whose direct parent path has no item.

        Returns:
            Root items in key order.
        """
        items = list(items)
        paths = {item.key_path for item in items}
        roots = [
            item for item in items
            if item.key_path.parent is None or item.key_path.parent not in paths
        ]
        return sorted(roots, key=lambda item: item.key_path)

    @staticmethod
    def build_forest(items: Iterable[Item]) -> list[HierarchyTree]:
        """Build one tree per root item.

        A root nested under another root's path (a gap below it) appears
        both as its own tree and inside the enclosing one.
        """
        items = list(items)
        return [
            HierarchyBuilder.build_tree(root, items)
            for root in HierarchyBuilder.find_roots(items)
        ]

    @staticmethod
    def flatten(node: TreeNode) -> list[dict[str, Any]]:
        """
        Flatten a subtree to a list of rows in display order.

        Each row includes the key, title, tree depth and child count.
        """
        rows = []
        for current in [node, *node.get_all_descendants()]:
            rows.append(
                {
                    "id": current.item.id,
                    "key": current.key,
                    "title": current.item.title,
                    "depth": current.depth,
                    "child_count": len(current.children),
                    "parent_key": current.parent.key if current.parent else None,
                }
            )
        return rows


def build_tree(root_item: Item, all_items: Iterable[Item]) -> TreeNode:
    """Build the subtree rooted at *root_item* (see ``HierarchyBuilder.build``)."""
    return HierarchyBuilder.build(root_item, all_items)
