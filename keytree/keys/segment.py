"""
Key segment parsing and formatting.

A segment is a zero-padded decimal base followed by an optional run of
lowercase letters, e.g. ``00100`` or ``00100mn``. Plain string comparison
of two segments matches their intended fractional order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from keytree.config import DEFAULT_CONFIG, KeyConfig

logger = logging.getLogger(__name__)

# Suffix alphabet bounds
SUFFIX_FLOOR = "a"
SUFFIX_CEILING = "z"

_SEGMENT_RE = re.compile(r"^(\d+)([a-z]*)$")


class InvalidSegmentError(ValueError):
    """Raised when a segment does not match the segment grammar."""


def _match(raw: str, config: KeyConfig) -> re.Match[str] | None:
    """Match *raw* against the grammar, requiring at least ``width`` digits."""
    match = _SEGMENT_RE.match(raw)
    if match is None or len(match.group(1)) < config.width:
        return None
    return match


def strip_path(raw: str, config: KeyConfig = DEFAULT_CONFIG) -> str:
    """Reduce a full key path to its final segment.

    Args:
        raw: A segment, or a path that was passed where a segment belongs.
        config: Supplies the separators.

    Returns:
        The last non-empty component of *raw*.
    """
    for sep in (config.separator, config.legacy_separator):
        if sep in raw:
            parts = [p for p in raw.split(sep) if p]
            raw = parts[-1] if parts else ""
    return raw


@dataclass(frozen=True, order=True)
class Segment:
    """
    A parsed key segment.

    Ordering compares the formatted text, so ``Segment`` instances sort
    exactly like the strings they came from.
    """

    text: str
    base: int
    suffix: str = ""

    @classmethod
    def build(cls, base: int, suffix: str = "", config: KeyConfig = DEFAULT_CONFIG) -> Segment:
        """Create a segment from its parts."""
        return cls(text=format_base(base, config) + suffix, base=base, suffix=suffix)

    @classmethod
    def parse(cls, raw: str, config: KeyConfig = DEFAULT_CONFIG) -> Segment:
        """Strictly parse a bare segment.

        Raises:
            InvalidSegmentError: If *raw* is not a valid segment.
        """
        match = _match(raw, config)
        if match is None:
            raise InvalidSegmentError(f"Invalid key segment: {raw!r}")
        return cls(text=raw, base=int(match.group(1)), suffix=match.group(2))

    @classmethod
    def coerce(cls, raw: str, config: KeyConfig = DEFAULT_CONFIG) -> Segment:
        """Parse a segment leniently at an API boundary.

        Paths are cut down to their final component first. Anything that
        still fails the grammar degrades to base 0 with an empty suffix
        and is logged, since it points at corrupted upstream data.
        """
        bare = strip_path(raw, config)
        if bare != raw:
            logger.warning("Segment %r contained a path; using %r", raw, bare)
        match = _match(bare, config)
        if match is None:
            logger.warning("Invalid key segment %r; treating it as base 0", raw)
            return cls.build(0, "", config)
        return cls(text=bare, base=int(match.group(1)), suffix=match.group(2))

    @staticmethod
    def is_valid(raw: str, config: KeyConfig = DEFAULT_CONFIG) -> bool:
        return _match(raw, config) is not None

    def __str__(self) -> str:
        return self.text


def format_base(base: int, config: KeyConfig = DEFAULT_CONFIG) -> str:
    """Zero-pad a base to the configured width."""
    if base > config.max_base:
        logger.warning(
            "Base %d exceeds %d digits; ordering against shorter bases is no longer guaranteed",
            base,
            config.width,
        )
    return str(base).zfill(config.width)
