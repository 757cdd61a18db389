"""
Byte statistics over a burst of fixed-length packets.

Every offset gets its observed min, max and "variance" (max - min, not the
statistical variance). The whole burst is loaded into a 2-D uint8 array so
the per-offset reduction is a single numpy call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import numpy.typing as npt


Packet = bytes
PacketMatrix = npt.NDArray[np.uint8]  # shape (packets, length)


class PacketLengthError(ValueError):
    """Raised when packets inside one burst do not share the same length."""


@dataclass(frozen=True)
class ByteStatistic:
    offset: int
    min: int
    max: int
    variance: int


def as_matrix(packets: Sequence[bytes]) -> PacketMatrix:
    """
    Stack packets into a (n, length) uint8 matrix.

    Raises PacketLengthError if the packets disagree on length. Never
    truncates or pads.
    """
    if not packets:
        return np.zeros((0, 0), dtype=np.uint8)

    length = len(packets[0])
    for i, packet in enumerate(packets):
        if len(packet) != length:
            raise PacketLengthError(
                f"Packet {i} has {len(packet)} bytes, expected {length}"
            )

    return np.frombuffer(b"".join(bytes(p) for p in packets), dtype=np.uint8).reshape(
        len(packets), length
    )


def analyze(packets: Sequence[bytes]) -> list[ByteStatistic]:
    """Per-offset min/max/variance. An empty burst yields an empty list."""
    matrix = as_matrix(packets)
    if matrix.size == 0:
        return []

    mins = matrix.min(axis=0)
    maxs = matrix.max(axis=0)

    return [
        ByteStatistic(offset=i, min=int(lo), max=int(hi), variance=int(hi) - int(lo))
        for i, (lo, hi) in enumerate(zip(mins, maxs))
    ]


def exclude(stats: Iterable[ByteStatistic], offsets: Iterable[int]) -> list[ByteStatistic]:
    """Drop statistics for offsets already attributed elsewhere."""
    skip = frozenset(offsets)
    return [s for s in stats if s.offset not in skip]


def distinct_values(packets: Sequence[bytes], offset: int) -> set[int]:
    """Distinct raw values seen at `offset` across the burst."""
    matrix = as_matrix(packets)
    if matrix.size == 0:
        return set()
    return {int(v) for v in np.unique(matrix[:, offset])}


def little_endian_max(packets: Sequence[bytes], offsets: Sequence[int]) -> int | None:
    """
    Largest little-endian value reconstructed at `offsets` over the packets.

    Packets too short to hold every offset are skipped; returns None when no
    packet qualifies.
    """
    if not offsets:
        return None

    needed = max(offsets) + 1
    best: int | None = None
    for packet in packets:
        if len(packet) < needed:
            continue
        value = 0
        for shift, offset in enumerate(offsets):
            value |= packet[offset] << (8 * shift)
        if best is None or value > best:
            best = value
    return best
