"""Tests for planning insertions on a rebuilt tree."""

from __future__ import annotations

import logging

import pytest

from keytree.config import KeyConfig
from keytree.core.item import Item, KeyPath
from keytree.hierarchy.builder import HierarchyBuilder
from keytree.hierarchy.editing import (
    EditAction,
    EditPlanner,
    NodeNotFoundError,
    plan_add_child,
    plan_insert_after,
    plan_insert_before,
)
from keytree.hierarchy.tree import HierarchyTree
from keytree.keys.sequencer import KeySequencer


def _tree(*keys: str) -> HierarchyTree:
    return HierarchyBuilder.build_all(
        [Item(id=key, key_path=KeyPath.parse(key)) for key in keys]
    )


@pytest.fixture
def outline() -> HierarchyTree:
    return _tree("00100", "00200", "00300", "00100/00100", "00100/00200")


@pytest.fixture
def planner() -> EditPlanner:
    return EditPlanner()


# ===================================================================
# Sibling inserts
# ===================================================================


class TestSiblingInserts:
    """Tests for before/after planning."""

    def test_before_middle(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(outline, "00200", "before").joined == "00150"

    def test_before_first(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(outline, "00100", "before").joined == "00050"

    def test_after_last(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(outline, "00300", "after").joined == "00400"

    def test_after_nested(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        result = planner.plan(outline, "00100/00100", EditAction.AFTER)
        assert result == KeyPath.parse("00100/00150")

    def test_adjacent_bases(self, planner: EditPlanner) -> None:
        tree = _tree("00100", "00101")
        assert planner.plan(tree, "00100", "after").joined == "00100n"

    def test_uppercase_neighbour_keeps_its_base(self, planner: EditPlanner) -> None:
        tree = _tree("00100", "100M")
        result = planner.plan(tree, "00100", "after")
        assert result.joined == "00100g"
        assert KeyPath.parse("00100") < result < KeyPath.parse("00100m")

    def test_result_sorts_between(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        result = planner.plan(outline, "00100/00200", "before")
        assert KeyPath.parse("00100/00100") < result < KeyPath.parse("00100/00200")


# ===================================================================
# Child inserts
# ===================================================================


class TestChildInserts:
    """Tests for add-child planning."""

    def test_after_last_child(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(outline, "00100", "child").joined == "00100/00300"

    def test_first_child(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(outline, "00300", "child").joined == "00300/00100"

    def test_custom_config(self, outline: HierarchyTree) -> None:
        planner = EditPlanner(KeySequencer(KeyConfig(first_base=10, step=10)))
        assert planner.plan(outline, "00300", "child").joined == "00300/00010"
        assert planner.plan(outline, "00100", "child").joined == "00100/00210"


# ===================================================================
# Gap attachments
# ===================================================================


class TestGapAttachments:
    """Gap-attached nodes are not key siblings."""

    @pytest.fixture
    def gapped(self) -> HierarchyTree:
        return _tree("00100", "00100/00200/00100", "00100/00300")

    def test_after_ignores_gap_sibling(self, gapped: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(gapped, "00100/00300", "after").joined == "00100/00400"

    def test_before_ignores_gap_sibling(self, gapped: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(gapped, "00100/00300", "before").joined == "00100/00150"

    def test_child_ignores_gap_descendant(self, gapped: HierarchyTree, planner: EditPlanner) -> None:
        assert planner.plan(gapped, "00100", "child").joined == "00100/00400"

    def test_before_gap_node_keeps_its_parent_path(
        self, gapped: HierarchyTree, planner: EditPlanner
    ) -> None:
        result = planner.plan(gapped, "00100/00200/00100", "before")
        assert result.joined == "00100/00200/00050"


# ===================================================================
# Duplicate key paths
# ===================================================================


class TestDuplicateSiblings:
    """Siblings sharing the target's key path are not neighbours."""

    @pytest.fixture
    def duplicated(self) -> HierarchyTree:
        items = [
            Item(id="root", key_path=KeyPath.parse("00100")),
            Item(id="first", key_path=KeyPath.parse("00100/00200")),
            Item(id="second", key_path=KeyPath.parse("00100/00200")),
            Item(id="next", key_path=KeyPath.parse("00100/00300")),
        ]
        return HierarchyBuilder.build_all(items)

    def _node(self, tree: HierarchyTree, item_id: str):
        return next(n for n in tree.get_all_nodes() if n.item.id == item_id)

    def test_before_second_duplicate(self, duplicated: HierarchyTree, planner: EditPlanner) -> None:
        second = self._node(duplicated, "second")
        result = planner.insert_before(second)
        assert result == KeyPath.parse("00100/00100")
        assert result < second.key_path

    def test_before_first_duplicate(self, duplicated: HierarchyTree, planner: EditPlanner) -> None:
        first = self._node(duplicated, "first")
        assert planner.insert_before(first) < first.key_path

    def test_after_first_duplicate(self, duplicated: HierarchyTree, planner: EditPlanner) -> None:
        first = self._node(duplicated, "first")
        result = planner.insert_after(first)
        assert result == KeyPath.parse("00100/00250")
        assert first.key_path < result < KeyPath.parse("00100/00300")

    def test_after_second_duplicate(self, duplicated: HierarchyTree, planner: EditPlanner) -> None:
        second = self._node(duplicated, "second")
        assert planner.insert_after(second) == KeyPath.parse("00100/00250")

    def test_no_out_of_order_warning(
        self, duplicated: HierarchyTree, planner: EditPlanner, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="keytree.keys.sequencer"):
            planner.insert_before(self._node(duplicated, "second"))
        assert "out of order" not in caplog.text


# ===================================================================
# Errors and module helpers
# ===================================================================


class TestPlanErrors:
    """Tests for invalid plan requests."""

    def test_missing_target(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        with pytest.raises(NodeNotFoundError):
            planner.plan(outline, "00900", "after")

    def test_unknown_action(self, outline: HierarchyTree, planner: EditPlanner) -> None:
        with pytest.raises(ValueError):
            planner.plan(outline, "00100", "sideways")


class TestModuleHelpers:
    """Tests for the default-planner shortcuts."""

    def test_helpers(self, outline: HierarchyTree) -> None:
        node = outline.get_node("00200")
        assert node is not None
        assert plan_insert_before(node).joined == "00150"
        assert plan_insert_after(node).joined == "00250"
        assert plan_add_child(node).joined == "00200/00100"
