"""
Configuration synthesis.

Turns the per-signal assignments and the status table accumulated by the
walkthrough into a DeviceByteConfig. Pure: identical inputs give identical
output.

Coordinate maxima use the exact little-endian reconstruction
(low | high << 8), computed per packet when packets are available and from
the per-byte maxima otherwise.

Tilt ranges are a calibration assumption. With TiltRangeStrategy.OBSERVED,
values below `tilt_midpoint` are positive tilt and values at or above it are
negative tilt wrapping around from `negative_min_sentinel` (256), so a pen
reporting 0..60 and 196..255 yields positiveMax=60, negativeMin=256,
negativeMax=196. TiltRangeStrategy.FIXED emits the 127/128/255 split.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from .analysis.buttons import TabletButtonByte
from .analysis.stats import little_endian_max
from .analysis.status import StatusCodeTable, find_status_byte
from .config import DetectorConfig, TiltRangeStrategy
from .models import (
    CoordConfig,
    DeviceByteConfig,
    Signal,
    SignalAssignment,
    StatusConfig,
    TabletButtonsConfig,
    TiltConfig,
)


def coordinate_max(assignment: SignalAssignment, packets: Sequence[bytes] = ()) -> int:
    """Largest value the field was seen to carry; 0 when undetected."""
    if not assignment.detected:
        return 0

    observed = max(s.max for s in assignment.stats)
    if len(assignment.stats) == 1:
        return observed

    low, high = assignment.stats
    reconstructed = little_endian_max(packets, assignment.offsets)
    if reconstructed is None:
        reconstructed = low.max | (high.max << 8)
    return max(observed, reconstructed)


def tilt_range(
    assignment: SignalAssignment,
    packets: Sequence[bytes] = (),
    config: DetectorConfig | None = None,
) -> TiltConfig | None:
    if not assignment.detected:
        return None

    cfg = config or DetectorConfig()
    offset = assignment.offsets[0]
    midpoint = cfg.tilt_midpoint
    sentinel = cfg.negative_min_sentinel

    if cfg.tilt_range is TiltRangeStrategy.FIXED:
        return TiltConfig((offset,), midpoint - 1, midpoint, 255)

    values = [p[offset] for p in packets if len(p) > offset]
    stat = assignment.stats[0]
    values.extend((stat.min, stat.max))

    positive = [v for v in values if v < midpoint]
    negative = [v for v in values if v >= midpoint]
    positive_max = max(positive) if positive else None
    negative_max = min(negative) if negative else None

    # One-sided captures mirror the observed side
    if positive_max is None and negative_max is None:
        positive_max, negative_max = midpoint - 1, midpoint
    elif positive_max is None:
        positive_max = min(midpoint - 1, sentinel - negative_max)
    elif negative_max is None:
        negative_max = max(midpoint, min(255, sentinel - positive_max))

    return TiltConfig((offset,), positive_max, sentinel, negative_max)


def _by_signal(assignments: Mapping[Signal, SignalAssignment] | Iterable[SignalAssignment]) -> dict[Signal, SignalAssignment]:
    if isinstance(assignments, Mapping):
        return dict(assignments)
    return {a.signal: a for a in assignments}


def synthesize(
    assignments: Mapping[Signal, SignalAssignment] | Iterable[SignalAssignment],
    status_codes: StatusCodeTable,
    packets: Sequence[bytes] = (),
    status_offset: int | None = None,
    tablet_buttons: TabletButtonByte | None = None,
    config: DetectorConfig | None = None,
) -> DeviceByteConfig:
    """
    Build the device byte configuration.

    When `status_offset` is not supplied but status codes were recorded, the
    status byte is searched for in `packets` outside the assigned offsets.
    The status entry is omitted entirely when there are no codes or no
    status byte.
    """
    cfg = config or DetectorConfig()
    by_signal = _by_signal(assignments)

    def coord(signal: Signal) -> CoordConfig:
        a = by_signal.get(signal, SignalAssignment(signal))
        return CoordConfig(a.offsets, coordinate_max(a, packets))

    def tilt(signal: Signal) -> TiltConfig | None:
        a = by_signal.get(signal)
        return tilt_range(a, packets, cfg) if a is not None else None

    status: StatusConfig | None = None
    if len(status_codes) > 0:
        if status_offset is None:
            assigned = {o for a in by_signal.values() for o in a.offsets}
            status_offset = find_status_byte(
                packets, assigned, cfg.status_min_distinct, cfg.status_max_distinct
            )
        if status_offset is not None:
            status = StatusConfig(status_offset, status_codes)

    buttons: TabletButtonsConfig | None = None
    if tablet_buttons is not None and tablet_buttons.codes:
        buttons = TabletButtonsConfig(tablet_buttons.offset, tablet_buttons.codes)

    return DeviceByteConfig(
        x=coord(Signal.X),
        y=coord(Signal.Y),
        pressure=coord(Signal.PRESSURE),
        tilt_x=tilt(Signal.TILT_X),
        tilt_y=tilt(Signal.TILT_Y),
        status=status,
        tablet_buttons=buttons,
    )
