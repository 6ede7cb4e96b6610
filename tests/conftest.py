"""
Pytest configuration and fixtures for keytree tests.
"""

from __future__ import annotations

import pytest

from keytree.core.item import Item, KeyPath


def _item(key: str, title: str = "", item_id: str | None = None) -> Item:
    """Create an item from a slash-joined key."""
    return Item(
        id=item_id or f"item_{key.replace('/', '_')}",
        key_path=KeyPath.parse(key),
        title=title,
    )


@pytest.fixture
def chain_items() -> list[Item]:
    """Three items forming a parent/child/grandchild chain."""
    return [
        _item("00100", "Root"),
        _item("00100/00100", "Child"),
        _item("00100/00100/00100", "Grandchild"),
    ]


@pytest.fixture
def gapped_items() -> list[Item]:
    """A root and a grandchild with no item at the intermediate level."""
    return [
        _item("00100", "Root"),
        _item("00100/00200/00100", "Deep"),
    ]


@pytest.fixture
def sibling_items() -> list[Item]:
    """A root with children supplied out of key order."""
    return [
        _item("00100/00300", "Third"),
        _item("00100", "Root"),
        _item("00100/00100", "First"),
        _item("00100/00150m", "Between"),
        _item("00100/00200", "Second"),
        _item("00100/00150", "Halfway"),
    ]


@pytest.fixture
def mixed_items(chain_items: list[Item]) -> list[Item]:
    """Two top-level hierarchies plus an unrelated item."""
    return chain_items + [
        _item("00200", "Other root"),
        _item("00200/00100", "Other child"),
        _item("00900/00100", "Orphan without parent"),
    ]
