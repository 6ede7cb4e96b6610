"""Tests for the key sequencer and suffix bisection."""

from __future__ import annotations

import logging

import pytest

from keytree.config import KeyConfig
from keytree.keys.segment import Segment
from keytree.keys.sequencer import (
    KeySequencer,
    KeySpaceExhaustedError,
    generate_key,
    mid_suffix,
)

# ===================================================================
# mid_suffix
# ===================================================================


class TestMidSuffix:
    """Tests for alphabetic suffix bisection."""

    def test_unbounded_from_empty(self) -> None:
        assert mid_suffix("", None) == "n"

    def test_unbounded_from_letter(self) -> None:
        assert mid_suffix("n", None) == "t"

    def test_bounded_from_empty(self) -> None:
        assert mid_suffix("", "n") == "g"

    def test_adjacent_letters_go_deeper(self) -> None:
        assert mid_suffix("m", "n") == "mn"

    def test_z_extends_length(self) -> None:
        assert mid_suffix("zz", None) == "zzn"

    def test_adjacent_to_floor(self) -> None:
        assert mid_suffix("", "b") == "an"

    def test_shared_prefix(self) -> None:
        assert mid_suffix("zz", "zzz") == "zzm"

    @pytest.mark.parametrize(
        "prev,nxt",
        [("", "n"), ("m", "n"), ("mn", "n"), ("a", "b"), ("az", "b"), ("y", "yb"), ("", None), ("zzz", None)],
    )
    def test_result_strictly_between(self, prev: str, nxt: str | None) -> None:
        result = mid_suffix(prev, nxt)
        assert prev < result
        if nxt is not None:
            assert result < nxt

    def test_out_of_order_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="keytree.keys.sequencer"):
            assert mid_suffix("b", "a") == "bm"
        assert "No suffix between" in caplog.text


# ===================================================================
# generate_key - documented cases
# ===================================================================


class TestGenerateKey:
    """Tests for each neighbour case."""

    def test_no_neighbours(self) -> None:
        assert generate_key(None, None) == "00100"

    def test_tail_append(self) -> None:
        assert generate_key("00100", None) == "00200"

    def test_tail_append_keeps_step_from_suffixed(self) -> None:
        assert generate_key("00150m", None) == "00250"

    def test_head_insert_halves(self) -> None:
        assert generate_key(None, "00100") == "00050"
        assert generate_key(None, "00003") == "00001"

    def test_head_insert_at_one(self) -> None:
        assert generate_key(None, "00001") == "00000"

    def test_head_insert_at_floor(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="keytree.keys.sequencer"):
            assert generate_key(None, "00000") == "00000m"
        assert "floor" in caplog.text

    def test_head_insert_below_suffixed_floor(self) -> None:
        result = generate_key(None, "00000n")
        assert result == "00000g"
        assert result < "00000n"

    def test_middle_integer_gap(self) -> None:
        assert generate_key("00100", "00200") == "00150"
        assert generate_key("00100", "00102") == "00101"
        assert generate_key("00100", "00103") == "00101"

    def test_adjacent_bases_use_suffix(self) -> None:
        result = generate_key("00100", "00101")
        seg = Segment.parse(result)
        assert seg.base == 100
        assert seg.suffix != ""
        assert "00100" < result < "00101"

    def test_equal_bases_bisect_suffixes(self) -> None:
        assert generate_key("00100m", "00100n") == "00100mn"
        assert generate_key("00100", "00100n") == "00100g"

    def test_adjacent_bases_ignore_next_suffix(self) -> None:
        # 00101a does not constrain suffixes on base 100
        assert generate_key("00100z", "00101a") == "00100zn"

    def test_empty_strings_are_missing_neighbours(self) -> None:
        assert generate_key("", "") == "00100"

    def test_path_inputs_are_reduced(self) -> None:
        assert generate_key("00100/00200", None) == "00300"
        assert generate_key("00100/00200", "00100/00400") == "00300"

    def test_malformed_input_degrades(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="keytree.keys.segment"):
            assert generate_key("garbage", None) == "00100"
        assert "Invalid key segment" in caplog.text

    def test_out_of_order_neighbours_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="keytree.keys.sequencer"):
            generate_key("00200", "00100")
        assert "out of order" in caplog.text

    def test_deterministic(self) -> None:
        pairs = [(None, None), ("00100", None), (None, "00100"), ("00100", "00101"), ("00100m", "00100n")]
        for prev, nxt in pairs:
            assert generate_key(prev, nxt) == generate_key(prev, nxt)


# ===================================================================
# Ordering properties
# ===================================================================


_SEGMENTS = ["00001", "00002", "00100", "00100m", "00050zz", "00101", "12345", "00999z"]
_PAIRS = [
    ("00100", "00200"),
    ("00100", "00101"),
    ("00100m", "00100n"),
    ("00100", "00100n"),
    ("00100z", "00101"),
    ("00099zz", "00100"),
    ("00100mn", "00100n"),
    ("00000", "00001"),
    ("00100b", "00100c"),
]


class TestOrderingProperties:
    """Ordering and betweenness invariants."""

    @pytest.mark.parametrize("segment", _SEGMENTS)
    def test_tail_sorts_after(self, segment: str) -> None:
        assert generate_key(segment, None) > segment

    @pytest.mark.parametrize("segment", _SEGMENTS)
    def test_head_sorts_before(self, segment: str) -> None:
        assert generate_key(None, segment) < segment

    @pytest.mark.parametrize("prev,nxt", _PAIRS)
    def test_between(self, prev: str, nxt: str) -> None:
        result = generate_key(prev, nxt)
        assert prev < result < nxt

    def test_descending_bisection_converges(self) -> None:
        low, high = "00100", "00101"
        seen = set()
        for i in range(1, 41):
            result = generate_key(low, high)
            assert low < result < high
            assert result not in seen
            seen.add(result)
            suffix = Segment.parse(result).suffix
            assert len(suffix) <= i // 4 + 1
            high = result

    def test_ascending_bisection_converges(self) -> None:
        low, high = "00100", "00101"
        previous = low
        for i in range(1, 41):
            result = generate_key(low, high)
            assert previous < result < high
            assert len(Segment.parse(result).suffix) <= i // 4 + 1
            previous = low = result

    def test_alternating_bisection(self) -> None:
        low, high = "00100", "00200"
        for i in range(30):
            result = generate_key(low, high)
            assert low < result < high
            if i % 2:
                low = result
            else:
                high = result

    def test_repeated_tail_appends(self) -> None:
        keys = [generate_key(None, None)]
        for _ in range(20):
            keys.append(generate_key(keys[-1], None))
        assert keys == sorted(keys)
        assert keys[-1] == "02100"


# ===================================================================
# KeySequencer config
# ===================================================================


class TestKeySequencerConfig:
    """Tests for non-default configurations."""

    def test_strict_floor_raises(self) -> None:
        sequencer = KeySequencer(KeyConfig(strict_floor=True))
        with pytest.raises(KeySpaceExhaustedError):
            sequencer.generate(None, "00000")

    def test_strict_floor_allows_suffixed_floor(self) -> None:
        sequencer = KeySequencer(KeyConfig(strict_floor=True))
        assert sequencer.generate(None, "00000n") == "00000g"

    def test_custom_step_and_first(self) -> None:
        sequencer = KeySequencer(KeyConfig(first_base=10, step=10))
        assert sequencer.generate(None, None) == "00010"
        assert sequencer.generate("00010", None) == "00020"

    def test_custom_width(self) -> None:
        sequencer = KeySequencer(KeyConfig(width=3))
        assert sequencer.generate(None, None) == "100"
        assert sequencer.generate("100", "200") == "150"


# ===================================================================
# Top of the base range
# ===================================================================


class TestTailNearMaxBase:
    """Tail appends stay within width digits and keep sorting after."""

    def test_halves_remaining_room(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="keytree.keys.sequencer"):
            result = generate_key("99950", None)
        assert result == "99975"
        assert result > "99950"
        assert "overflows" in caplog.text

    def test_max_base_extends_suffix(self) -> None:
        result = generate_key("99999", None)
        assert result == "99999n"
        assert result > "99999"

    def test_suffixed_max_base(self) -> None:
        assert generate_key("99999n", None) == "99999t"

    def test_suffixed_prev_below_max(self) -> None:
        result = generate_key("99998z", None)
        assert result == "99999"
        assert result > "99998z"

    def test_last_full_step_still_allowed(self) -> None:
        assert generate_key("99899", None) == "99999"

    def test_repeated_appends_stay_ordered(self) -> None:
        keys = ["99000"]
        for _ in range(40):
            keys.append(generate_key(keys[-1], None))
        assert keys == sorted(keys)
        assert len(set(keys)) == len(keys)
        assert all(len(Segment.parse(k).text) - len(Segment.parse(k).suffix) == 5 for k in keys)

    def test_custom_width(self) -> None:
        sequencer = KeySequencer(KeyConfig(width=3))
        assert sequencer.generate("950", None) == "975"
        assert sequencer.generate("999", None) == "999n"
