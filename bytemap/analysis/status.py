"""
Status/mode code detection and the status code table.

A status byte carries a handful of discrete codes (hover, contact, button
held, pen away) rather than a continuous measurement, so it is recognised by
its small set of distinct values.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Sequence

import numpy as np

from .stats import analyze, as_matrix


class StatusState(str, Enum):
    NONE = "none"
    HOVER = "hover"
    CONTACT = "contact"


class PenButton(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class StatusCode:
    """Semantic meaning of one raw status byte value."""

    state: StatusState
    primary_button_pressed: bool | None = None
    secondary_button_pressed: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"state": self.state.value}
        if self.primary_button_pressed is not None:
            out["primaryButtonPressed"] = self.primary_button_pressed
        if self.secondary_button_pressed is not None:
            out["secondaryButtonPressed"] = self.secondary_button_pressed
        return out


@dataclass(frozen=True)
class StatusCodeTable:
    """
    Immutable raw value -> StatusCode mapping.

    Entries are first-seen-wins: once a raw value is recorded, later
    observations never change its descriptor.
    """

    entries: tuple[tuple[int, StatusCode], ...] = ()

    def __contains__(self, value: object) -> bool:
        return any(raw == value for raw, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[int, StatusCode]]:
        return iter(self.entries)

    def get(self, value: int) -> StatusCode | None:
        for raw, code in self.entries:
            if raw == value:
                return code
        return None

    def with_code(self, value: int, code: StatusCode) -> StatusCodeTable:
        if not 0 <= value <= 255:
            raise ValueError(f"Status value must be a byte, got {value}")
        if value in self:
            return self
        return StatusCodeTable(self.entries + ((value, code),))

    def with_codes(self, codes: Iterable[tuple[int, StatusCode]]) -> StatusCodeTable:
        table = self
        for value, code in codes:
            table = table.with_code(value, code)
        return table

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {str(raw): code.to_dict() for raw, code in self.entries}


def find_status_byte(
    packets: Sequence[bytes],
    excluded: Iterable[int] = (),
    min_distinct: int = 2,
    max_distinct: int = 10,
) -> int | None:
    """
    First non-excluded, non-constant offset whose distinct value count lies
    in [min_distinct, max_distinct].

    Returns None when nothing qualifies (short capture, or more states than
    the band allows).
    """
    if not packets:
        return None

    skip = frozenset(excluded)
    matrix = as_matrix(packets)
    for stat in analyze(packets):
        if stat.offset in skip:
            continue
        # Constant bytes are usually the report id
        if stat.variance == 0:
            continue
        count = len(np.unique(matrix[:, stat.offset]))
        if min_distinct <= count <= max_distinct:
            return stat.offset

    return None


def is_away_packet(packet: bytes, status_offset: int) -> bool:
    """True when every byte after the status byte is zero (pen out of range)."""
    tail = packet[status_offset + 1:]
    return len(tail) > 0 and not any(tail)


def classify_status_packets(
    packets: Sequence[bytes],
    status_offset: int,
    condition: StatusState,
    button: PenButton | None = None,
    pressure_offsets: Sequence[int] = (),
) -> list[tuple[int, StatusCode]]:
    """
    Tag each distinct status value seen in the packets, in arrival order.

    Pen-away packets are always tagged NONE whatever the step was capturing.
    With a pen button held, contact vs hover is decided per packet by the
    pressure field; without known pressure offsets the step's condition is
    used.
    """
    seen: set[int] = set()
    tagged: list[tuple[int, StatusCode]] = []

    for packet in packets:
        if len(packet) <= status_offset:
            continue
        value = packet[status_offset]
        if value in seen:
            continue
        seen.add(value)

        if is_away_packet(packet, status_offset):
            tagged.append((value, StatusCode(StatusState.NONE)))
            continue

        if button is None:
            tagged.append((value, StatusCode(condition)))
            continue

        state = condition
        if pressure_offsets and all(o < len(packet) for o in pressure_offsets):
            pressed = any(packet[o] for o in pressure_offsets)
            state = StatusState.CONTACT if pressed else StatusState.HOVER

        tagged.append((
            value,
            StatusCode(
                state,
                primary_button_pressed=True if button is PenButton.PRIMARY else None,
                secondary_button_pressed=True if button is PenButton.SECONDARY else None,
            ),
        ))

    return tagged
