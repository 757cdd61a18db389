"""
Tablet (express key) button detection.

Tablet buttons arrive in their own report mode, flagged by a distinguished
status code. Offsets in those reports mean something different from the pen
reports, so pen assignments are not excluded here; only the status byte is.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .stats import as_matrix


@dataclass(frozen=True)
class TabletButtonByte:
    offset: int
    codes: tuple[int, ...]  # distinct nonzero raw values, ascending


def button_mode_packets(
    packets: Sequence[bytes], status_offset: int, button_mode_code: int
) -> list[bytes]:
    return [
        p for p in packets
        if len(p) > status_offset and p[status_offset] == button_mode_code
    ]


def find_tablet_button_byte(
    packets: Sequence[bytes],
    status_offset: int,
    button_mode_code: int,
    excluded: Iterable[int] = (),
) -> TabletButtonByte | None:
    """
    First offset (ascending) taking more than one value across the
    button-mode packets.

    Raises PacketLengthError if the button-mode packets disagree on length.
    """
    selected = button_mode_packets(packets, status_offset, button_mode_code)
    if not selected:
        return None

    matrix = as_matrix(selected)
    skip = frozenset(excluded) | {status_offset}

    for offset in range(matrix.shape[1]):
        if offset in skip:
            continue
        values = np.unique(matrix[:, offset])
        if len(values) > 1:
            return TabletButtonByte(
                offset=offset,
                codes=tuple(int(v) for v in values if v != 0),
            )

    return None
