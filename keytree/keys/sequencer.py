"""
Key sequencer.

Generates a new segment that sorts strictly between two neighbouring
segments, so items can be inserted anywhere without renumbering their
siblings. Integer bases are handed out sparsely (steps of 100, halving
and bisection); once two neighbours have adjacent bases the generator
falls back to bisecting an alphabetic suffix.
"""

from __future__ import annotations

import logging

from keytree.config import DEFAULT_CONFIG, KeyConfig
from keytree.keys.segment import SUFFIX_CEILING, SUFFIX_FLOOR, Segment, format_base

logger = logging.getLogger(__name__)

# Virtual bounds for suffix bisection: an exhausted lower bound reads as
# 'a', a missing upper bound as one past 'z'.
_FLOOR = ord(SUFFIX_FLOOR)
_CEILING = ord(SUFFIX_CEILING) + 1

# Suffix used when there is no room below the floor segment
FLOOR_SUFFIX = "m"


class KeySpaceExhaustedError(Exception):
    """Raised when no segment can be generated below the floor segment."""


def mid_suffix(prev: str, nxt: str | None) -> str:
    """Find a suffix strictly between *prev* and *nxt*.

    Args:
        prev: Lower bound (may be empty).
        nxt: Upper bound, or None for "no upper bound".

    Returns:
        A lowercase suffix ``s`` with ``prev < s`` and ``s < nxt``.
    """
    upper = nxt or ""
    locked = nxt is not None
    prefix: list[str] = []

    for i in range(max(len(prev), len(upper)) + 1):
        lo = ord(prev[i]) if i < len(prev) else _FLOOR
        if locked:
            if i >= len(upper):
                # prev has been padded up to nxt itself; nothing fits
                break
            hi = ord(upper[i])
        else:
            hi = _CEILING

        if hi - lo > 1:
            prefix.append(chr((lo + hi) // 2))
            return "".join(prefix)
        if hi - lo == 1:
            # Adjacent characters: keep lo here, anything deeper is free
            prefix.append(chr(lo))
            locked = False
            continue
        if hi == lo:
            prefix.append(chr(lo))
            continue
        break

    logger.warning("No suffix between %r and %r; appending %r", prev, nxt, FLOOR_SUFFIX)
    return prev + FLOOR_SUFFIX


class KeySequencer:
    """
    Generates order-preserving key segments.

    The sequencer is stateless apart from its config; the same pair of
    neighbours always yields the same segment.
    """

    def __init__(self, config: KeyConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def generate(self, prev_segment: str | None, next_segment: str | None) -> str:
        """Generate a segment between two neighbours.

        Args:
            prev_segment: Segment that must sort before the result, or None.
            next_segment: Segment that must sort after the result, or None.

        Returns:
            The new segment text.

        Raises:
            KeySpaceExhaustedError: Only with ``strict_floor`` enabled, when
                asked for a segment below a base-0 neighbour.
        """
        cfg = self.config

        if not prev_segment and not next_segment:
            return format_base(cfg.first_base, cfg)

        if not next_segment:
            return self._tail(Segment.coerce(prev_segment, cfg))  # type: ignore[arg-type]

        if not prev_segment:
            return self._head(Segment.coerce(next_segment, cfg))

        prev = Segment.coerce(prev_segment, cfg)
        nxt = Segment.coerce(next_segment, cfg)
        if prev.text >= nxt.text:
            logger.warning("Neighbours out of order: %r >= %r", prev.text, nxt.text)

        if nxt.base - prev.base > 1:
            return format_base((prev.base + nxt.base) // 2, cfg)

        # Adjacent bases: the next suffix only constrains us on the same base
        bound = nxt.suffix if nxt.base == prev.base else None
        return format_base(prev.base, cfg) + mid_suffix(prev.suffix, bound)

    def _tail(self, prev: Segment) -> str:
        """Generate a segment after the last sibling.

        Near the top of the base range the step no longer fits, so the
        remaining integer room is halved and then the suffix extended;
        a base within ``width`` digits never grows past it.
        """
        cfg = self.config
        if prev.base + cfg.step <= cfg.max_base:
            return format_base(prev.base + cfg.step, cfg)

        squeezed = (prev.base + cfg.max_base + 1) // 2
        if squeezed > prev.base:
            logger.warning(
                "Tail step past %r overflows %d digits; using %d",
                prev.text,
                cfg.width,
                squeezed,
            )
            return format_base(squeezed, cfg)
        return prev.text[: len(prev.text) - len(prev.suffix)] + mid_suffix(prev.suffix, None)

    def _head(self, nxt: Segment) -> str:
        """Generate a segment before the first sibling."""
        cfg = self.config
        if nxt.base > 1:
            return format_base(nxt.base // 2, cfg)
        if nxt.base == 1:
            return format_base(0, cfg)
        if nxt.suffix:
            # Room left below a suffixed floor segment such as 00000n
            return format_base(0, cfg) + mid_suffix("", nxt.suffix)

        if cfg.strict_floor:
            raise KeySpaceExhaustedError(
                f"No room below {nxt.text!r}: the floor segment has been reached"
            )
        # 00000m sorts after 00000; 00000 stays a reserved floor
        floor = format_base(0, cfg) + FLOOR_SUFFIX
        logger.warning(
            "Insert below floor segment %r; returning %r which does not sort before it",
            nxt.text,
            floor,
        )
        return floor


_default_sequencer = KeySequencer()


def generate_key(prev_segment: str | None, next_segment: str | None) -> str:
    """Generate a segment between two neighbours with the default config."""
    return _default_sequencer.generate(prev_segment, next_segment)
