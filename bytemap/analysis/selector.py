"""
Candidate byte selection.

Given statistics for the offsets still in play (the caller has already
removed known offsets), pick the byte(s) most likely to carry the signal the
current step isolates.

Two-byte signals (X, Y, pressure) are little-endian 16-bit fields, so the
first numerically adjacent pair in ascending offset order wins. The high
byte of such a field may barely move when the value stays small, which is why
only one of the pair has to clear `min_variance`.
"""
from __future__ import annotations

from typing import Sequence

from .stats import ByteStatistic


DEFAULT_MIN_VARIANCE = 50


def significant(stats: Sequence[ByteStatistic], min_variance: int) -> list[ByteStatistic]:
    """Statistics above the noise threshold, highest variance first.

    The sort is stable, so equal variances keep ascending offset order.
    """
    return sorted(
        (s for s in stats if s.variance > min_variance),
        key=lambda s: s.variance,
        reverse=True,
    )


def select_candidates(
    stats: Sequence[ByteStatistic],
    want_count: int = 2,
    min_variance: int = DEFAULT_MIN_VARIANCE,
) -> list[ByteStatistic]:
    """
    Pick the offset(s) carrying the isolated signal.

    Returns the chosen statistics sorted by ascending offset. The result is
    empty when nothing clears the threshold.
    """
    if want_count < 1:
        raise ValueError(f"want_count must be >= 1, got {want_count}")

    ranked = significant(stats, min_variance)

    # Single-byte signals (tilt): just the top byte
    if want_count == 1:
        return ranked[:1]

    result: list[ByteStatistic] = []
    used: set[int] = set()

    # First adjacent pair in offset order; stop at the first hit so that an
    # unrelated pair further along (tilt bytes) is never picked up
    ordered = sorted(stats, key=lambda s: s.offset)
    for low, high in zip(ordered, ordered[1:]):
        if high.offset != low.offset + 1:
            continue
        if low.variance == 0 or high.variance == 0:
            continue
        if low.variance > min_variance or high.variance > min_variance:
            result = [low, high]
            used.update((low.offset, high.offset))
            break

    # No pair: fall back to the strongest single bytes
    if not result:
        for s in ranked:
            if s.offset in used:
                continue
            result.append(s)
            used.add(s.offset)
            if len(result) >= want_count:
                break

    return sorted(result, key=lambda s: s.offset)
