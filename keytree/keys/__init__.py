"""
Keys module - order-preserving segment generation.

Segments sort by plain string comparison; the sequencer hands out new
segments between any two neighbours without touching existing ones.
"""

from keytree.keys.segment import InvalidSegmentError, Segment, format_base, strip_path
from keytree.keys.sequencer import (
    KeySequencer,
    KeySpaceExhaustedError,
    generate_key,
    mid_suffix,
)

__all__ = [
    "Segment",
    "InvalidSegmentError",
    "format_base",
    "strip_path",
    "KeySequencer",
    "KeySpaceExhaustedError",
    "generate_key",
    "mid_suffix",
]
