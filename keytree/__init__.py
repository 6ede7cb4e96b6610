"""
keytree - order-preserving hierarchical keys.

Generates sparse, sortable key segments for inserting items anywhere in
a hierarchy without renumbering, and rebuilds trees from flat items
carrying those keys.

Typical usage::

    from keytree import Item, build_tree, generate_key

    first = generate_key(None, None)          # "00100"
    after = generate_key(first, None)         # "00200"
    between = generate_key(first, after)      # "00150"
"""

from keytree.config import DEFAULT_CONFIG, KeyConfig
from keytree.core.item import Item, KeyPath, dedupe_items, normalize_segments, order_items
from keytree.hierarchy.builder import HierarchyBuilder, build_tree
from keytree.hierarchy.tree import HierarchyTree, TreeNode
from keytree.keys.segment import Segment
from keytree.keys.sequencer import KeySequencer, generate_key
from keytree.view import DisplayMode, ViewSession

__version__ = "0.1.0"

__all__ = [
    "KeyConfig",
    "DEFAULT_CONFIG",
    "Item",
    "KeyPath",
    "dedupe_items",
    "normalize_segments",
    "order_items",
    "HierarchyBuilder",
    "HierarchyTree",
    "TreeNode",
    "build_tree",
    "Segment",
    "KeySequencer",
    "generate_key",
    "DisplayMode",
    "ViewSession",
]
