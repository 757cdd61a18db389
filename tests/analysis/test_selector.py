from __future__ import annotations

import numpy as np
import pytest

from bytemap.analysis import ByteStatistic, analyze, select_candidates, significant


def _stats(variances: list[int]) -> list[ByteStatistic]:
    return [ByteStatistic(offset=i, min=0, max=v, variance=v) for i, v in enumerate(variances)]


def _offsets(chosen: list[ByteStatistic]) -> list[int]:
    return [s.offset for s in chosen]


def _coordinate_burst(count: int = 300) -> list[bytes]:
    """9-byte packets: offsets 1-2 ramp 0 -> 16000 LE, the rest near-constant."""
    rng = np.random.default_rng(0)
    packets = []
    for value in np.linspace(0, 16000, count).astype(int):
        noise = rng.integers(-5, 6, size=6)
        body = [0x07, value & 0xFF, value >> 8] + [int(100 + n) for n in noise]
        packets.append(bytes(body))
    return packets


class TestAdjacentPair:
    """16-bit signals are found as the first adjacent pair in offset order."""

    def test_linear_coordinate_burst(self):
        chosen = select_candidates(analyze(_coordinate_burst()), 2, 50)
        assert _offsets(chosen) == [1, 2]

    def test_first_pair_wins_over_stronger_later_pair(self):
        chosen = select_candidates(_stats([0, 60, 10, 0, 255, 255]), 2, 50)
        assert _offsets(chosen) == [1, 2]

    def test_pair_needs_both_bytes_varying(self):
        # No adjacent pair with both bytes nonzero: two strongest singles
        chosen = select_candidates(_stats([0, 200, 0, 100, 0]), 2, 50)
        assert _offsets(chosen) == [1, 3]

    def test_pair_needs_one_byte_above_threshold(self):
        chosen = select_candidates(_stats([0, 40, 45, 0, 120]), 2, 50)
        assert _offsets(chosen) == [4]

    def test_result_sorted_by_offset(self):
        chosen = select_candidates(_stats([0, 100, 0, 0, 200]), 2, 50)
        assert _offsets(chosen) == [1, 4]

    def test_nothing_significant(self):
        assert select_candidates(_stats([0, 10, 20, 50]), 2, 50) == []


class TestSingleByte:
    """Single-byte signals take the strongest byte."""

    def test_top_variance(self):
        chosen = select_candidates(_stats([0, 90, 200, 120]), 1, 50)
        assert _offsets(chosen) == [2]

    def test_tie_keeps_lower_offset(self):
        chosen = select_candidates(_stats([0, 80, 0, 80]), 1, 50)
        assert _offsets(chosen) == [1]

    def test_threshold_is_strict(self):
        assert select_candidates(_stats([50, 50]), 1, 50) == []

    def test_empty(self):
        assert select_candidates([], 1, 50) == []


class TestSignificant:
    def test_descending_and_filtered(self):
        ranked = significant(_stats([10, 300, 60, 300, 51]), 50)
        assert _offsets(ranked) == [1, 3, 2, 4]


@pytest.mark.parametrize("want_count", [0, -1])
def test_invalid_want_count(want_count):
    with pytest.raises(ValueError):
        select_candidates(_stats([0, 100]), want_count, 50)


def test_deterministic():
    stats = analyze(_coordinate_burst())
    assert select_candidates(stats, 2, 50) == select_candidates(stats, 2, 50)
