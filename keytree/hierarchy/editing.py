"""
Edit planning on a rebuilt tree.

Computes the full key path a new item should take to land before,
after, or as the last child of an existing node. Nothing is written:
the caller persists the returned key on its own item.
"""

from __future__ import annotations

import logging
from enum import Enum

from keytree.core.item import KeyPath
from keytree.hierarchy.tree import HierarchyTree, TreeNode
from keytree.keys.sequencer import KeySequencer

logger = logging.getLogger(__name__)


class EditAction(str, Enum):
    """Where a new item goes relative to a target node."""

    BEFORE = "before"
    AFTER = "after"
    CHILD = "child"


class NodeNotFoundError(LookupError):
    """Raised when an edit targets a key path missing from the tree."""


def _key_siblings(node: TreeNode) -> list[TreeNode]:
    """Tree siblings that share the node's parent key path.

    Gap attachments can put items with different parent paths under the
    same tree node; only same-level keys are valid neighbours.
    """
    parent_path = node.key_path.parent
    return [
        sibling for sibling in node.siblings()
        if sibling.key_path.parent == parent_path
    ]


def _neighbours(node: TreeNode) -> tuple[TreeNode | None, TreeNode | None]:
    """Previous and next key siblings of *node*.

    Duplicates of the node's own key path are skipped; they cannot bound
    a segment on either side.
    """
    siblings = [
        sibling for sibling in _key_siblings(node)
        if sibling is node or sibling.key_path != node.key_path
    ]
    index = next(i for i, sibling in enumerate(siblings) if sibling is node)
    prev_node = siblings[index - 1] if index > 0 else None
    next_node = siblings[index + 1] if index < len(siblings) - 1 else None
    return prev_node, next_node


def _with_parent(node: TreeNode, segment: str) -> KeyPath:
    parent_path = node.key_path.parent
    if parent_path is None:
        return KeyPath((segment,))
    return parent_path.child(segment)


class EditPlanner:
    """
    Plans keys for insertions relative to nodes of a built tree.

    Only the last segment of each neighbour is handed to the sequencer,
    and new paths are always assembled from segments, never by string
    concatenation of joined keys.
    """

    def __init__(self, sequencer: KeySequencer | None = None) -> None:
        self.sequencer = sequencer or KeySequencer()

    def insert_before(self, node: TreeNode) -> KeyPath:
        """Key path for a new sibling directly before *node*."""
        prev_node, _ = _neighbours(node)
        prev_seg = prev_node.key_path.last if prev_node else None
        segment = self.sequencer.generate(prev_seg, node.key_path.last)
        return _with_parent(node, segment)

    def insert_after(self, node: TreeNode) -> KeyPath:
        """Key path for a new sibling directly after *node*."""
        _, next_node = _neighbours(node)
        next_seg = next_node.key_path.last if next_node else None
        segment = self.sequencer.generate(node.key_path.last, next_seg)
        return _with_parent(node, segment)

    def add_child(self, node: TreeNode) -> KeyPath:
        """Key path for a new last child of *node*."""
        direct = [
            child for child in node.children
            if child.key_path.parent == node.key_path
        ]
        if direct:
            last = max(direct, key=lambda child: child.key_path)
            segment = self.sequencer.generate(last.key_path.last, None)
        else:
            segment = self.sequencer.generate(None, None)
        return node.key_path.child(segment)

    def plan(self, tree: HierarchyTree, target: KeyPath | str, action: EditAction | str) -> KeyPath:
        """Plan an edit against the node at *target*.

        Raises:
            NodeNotFoundError: If *target* is not in the tree.
            ValueError: If *action* is not a known action.
        """
        action = EditAction(action)
        node = tree.get_node(target)
        if node is None:
            raise NodeNotFoundError(f"No node with key {target!s} in tree")

        if action is EditAction.BEFORE:
            result = self.insert_before(node)
        elif action is EditAction.AFTER:
            result = self.insert_after(node)
        else:
            result = self.add_child(node)

        logger.info("Planned %s %s: %s", action.value, node.key, result.joined)
        return result


_default_planner = EditPlanner()


def plan_insert_before(node: TreeNode) -> KeyPath:
    return _default_planner.insert_before(node)


def plan_insert_after(node: TreeNode) -> KeyPath:
    return _default_planner.insert_after(node)


def plan_add_child(node: TreeNode) -> KeyPath:
    return _default_planner.add_child(node)
