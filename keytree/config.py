"""Configuration for key generation and key path handling.

Defaults reproduce the canonical layout: five-digit bases, first-born
segments at ``00100`` and tail appends in steps of 100.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True)
class KeyConfig:
    """Tunable parameters for segments and key paths.

    Attributes:
        width: Number of zero-padded digits in a segment base.
        first_base: Base assigned to the first child of a parent.
        step: Gap left after the last sibling on a tail append.
        separator: Separator used when joining a key path.
        legacy_separator: Separator accepted (and re-split) when parsing
            raw IDs that were joined incorrectly.
        strict_floor: Raise instead of degrading when asked to insert
            below the ``00000`` floor.
    """

    width: int = 5
    first_base: int = 100
    step: int = 100
    separator: str = "/"
    legacy_separator: str = ","
    strict_floor: bool = False

    @property
    def max_base(self) -> int:
        """Largest base that still fits in ``width`` digits."""
        return 10**self.width - 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KeyConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = KeyConfig()
