"""Core records: key paths and items."""

from keytree.core.item import (
    Item,
    KeyPath,
    dedupe_items,
    normalize_segments,
    order_items,
)

__all__ = [
    "Item",
    "KeyPath",
    "dedupe_items",
    "normalize_segments",
    "order_items",
]
