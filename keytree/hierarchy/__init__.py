"""
Hierarchy module - rebuilds trees from flat keyed items.

This module builds, edits against and analyzes trees derived from item
key paths.
"""

from keytree.hierarchy.analyzer import HierarchyAnalysis, HierarchyAnalyzer, HierarchyIssue
from keytree.hierarchy.builder import HierarchyBuilder, build_tree
from keytree.hierarchy.editing import (
    EditAction,
    EditPlanner,
    NodeNotFoundError,
    plan_add_child,
    plan_insert_after,
    plan_insert_before,
)
from keytree.hierarchy.tree import HierarchyTree, TreeNode

__all__ = [
    "TreeNode",
    "HierarchyTree",
    "HierarchyBuilder",
    "build_tree",
    "HierarchyAnalyzer",
    "HierarchyAnalysis",
    "HierarchyIssue",
    "EditAction",
    "EditPlanner",
    "NodeNotFoundError",
    "plan_insert_before",
    "plan_insert_after",
    "plan_add_child",
]
