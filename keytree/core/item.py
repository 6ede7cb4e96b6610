"""
Key paths and items.

This module defines the flat records the hierarchy is rebuilt from: a
``KeyPath`` (ordered segments from the root) and an ``Item`` carrying
one key path plus an opaque payload.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from keytree.config import DEFAULT_CONFIG, KeyConfig

# A numeric segment as typed by a person: "100", "00100", "100m"
_RAW_NUMERIC_RE = re.compile(r"^(\d+)([a-zA-Z]*)$")


def normalize_segments(raw: str, config: KeyConfig = DEFAULT_CONFIG) -> list[str]:
    """
    Split a raw ID into normalized segments.

    Numeric segments are left-padded to the configured width and their
    suffix lowercased; anything that does not start with a digit is a
    topic segment and kept as is.

    Examples:
    "100/2m" -> ["00100", "00002m"]
    "100M" -> ["00100m"]
    "english/00100" -> ["english", "00100"]
    "00100,00200" -> ["00100", "00200"]
    """
    text = raw.replace(config.legacy_separator, config.separator)
    segments: list[str] = []

    for part in text.split(config.separator):
        part = part.strip()
        if not part:
            continue
        match = _RAW_NUMERIC_RE.match(part)
        if match:
            segments.append(match.group(1).zfill(config.width) + match.group(2).lower())
        else:
            segments.append(part)

    return segments


@dataclass(frozen=True, order=True)
class KeyPath:
    """
    An ordered sequence of segments locating an item from the root.

    Key paths order segment by segment, so siblings sort by their last
    segment and a parent sorts before its descendants.
    """

    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, raw: str, config: KeyConfig = DEFAULT_CONFIG) -> KeyPath:
        """Parse a joined key path, accepting legacy comma separators."""
        return cls(tuple(normalize_segments(raw, config)))

    @classmethod
    def of(cls, segments: Iterable[str]) -> KeyPath:
        return cls(tuple(segments))

    @classmethod
    def from_raw(cls, value: Any, config: KeyConfig = DEFAULT_CONFIG) -> KeyPath | None:
        """Build a key path from a loosely typed metadata value.

        Accepts a string, a number, or a list whose first non-null
        element is one of those (as found in note front matter).

        Returns:
            The parsed key path, or None when no usable ID is present.
        """
        if isinstance(value, (list, tuple)):
            value = next((v for v in value if v is not None), None)
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            value = str(value)
        if not isinstance(value, str):
            return None

        path = cls.parse(value, config)
        return path if path.segments else None

    @property
    def joined(self) -> str:
        """Slash-joined form. Never joined with commas."""
        return DEFAULT_CONFIG.separator.join(self.segments)

    def join(self, config: KeyConfig = DEFAULT_CONFIG) -> str:
        return config.separator.join(self.segments)

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def last(self) -> str | None:
        """Final segment, or None for the empty path."""
        return self.segments[-1] if self.segments else None

    @property
    def parent(self) -> KeyPath | None:
        """Path with the last segment removed, or None at the top level."""
        if len(self.segments) < 2:
            return None
        return KeyPath(self.segments[:-1])

    def child(self, segment: str) -> KeyPath:
        return KeyPath(self.segments + (segment,))

    def is_ancestor_of(self, other: KeyPath) -> bool:
        """True when this path is a proper prefix of *other*."""
        n = len(self.segments)
        return n < len(other.segments) and other.segments[:n] == self.segments

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.joined


@dataclass
class Item:
    """
    A flat record carrying a key path.

    ``id`` is the stable identity used for equality checks; several items
    may share a key path.
    """

    id: str
    key_path: KeyPath
    title: str = ""
    source: str | None = None  # where the item came from, e.g. a note path
    position: int | None = None
    payload: Any = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def generate_id() -> str:
        return f"item_{uuid.uuid4().hex[:12]}"

    @classmethod
    def create(
        cls,
        key: str | KeyPath,
        title: str = "",
        payload: Any = None,
        source: str | None = None,
    ) -> Item:
        """Create an item with a fresh ID from a raw or parsed key."""
        key_path = key if isinstance(key, KeyPath) else KeyPath.parse(key)
        return cls(
            id=cls.generate_id(),
            key_path=key_path,
            title=title,
            source=source,
            payload=payload,
        )

    @property
    def key(self) -> str:
        return self.key_path.joined

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "segments": list(self.key_path.segments),
            "title": self.title,
            "source": self.source,
            "position": self.position,
            "payload": self.payload,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        if "segments" in data and data["segments"] is not None:
            key_path = KeyPath.of(data["segments"])
        else:
            key_path = KeyPath.parse(str(data["key"]))
        return cls(
            id=data.get("id") or cls.generate_id(),
            key_path=key_path,
            title=data.get("title", ""),
            source=data.get("source"),
            position=data.get("position"),
            payload=data.get("payload"),
            metadata=data.get("metadata", {}),
        )


def order_items(items: Iterable[Item]) -> list[Item]:
    """Sort items by key path and number them.

    Returns copies with ``position`` set; the inputs are left untouched.
    The sort is stable, so items sharing a key path keep their input order.
    """
    ordered = sorted(items, key=lambda item: item.key_path)
    return [replace(item, position=i) for i, item in enumerate(ordered)]


def dedupe_items(items: Iterable[Item]) -> list[Item]:
    """Drop repeated (key path, source) pairs, keeping the first one.

    Useful when one source registers the same ID twice. Items that share
    a key path but come from different sources are all kept.
    """
    seen: set[tuple[KeyPath, str | None]] = set()
    result: list[Item] = []
    for item in items:
        marker = (item.key_path, item.source)
        if marker in seen:
            continue
        seen.add(marker)
        result.append(item)
    return result
