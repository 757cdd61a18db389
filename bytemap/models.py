"""
Signal assignments and the declarative device byte configuration.

Offsets are 0-based everywhere inside the package. The emitted configuration
uses 1-based `byteIndex` values; the conversion happens only in to_dict().
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .analysis.stats import ByteStatistic
from .analysis.status import StatusCodeTable


MULTI_BYTE_RANGE = "multi-byte-range"
BIPOLAR_RANGE = "bipolar-range"
CODE = "code"


class Signal(str, Enum):
    X = "x"
    Y = "y"
    PRESSURE = "pressure"
    TILT_X = "tiltX"
    TILT_Y = "tiltY"


@dataclass(frozen=True)
class SignalAssignment:
    """
    The byte(s) attributed to one signal by one walkthrough step.

    Either empty (not detected), a single byte, or two adjacent bytes forming
    a little-endian 16-bit value.
    """

    signal: Signal
    stats: tuple[ByteStatistic, ...] = ()

    def __post_init__(self) -> None:
        offsets = self.offsets
        if len(offsets) > 2:
            raise ValueError(f"{self.signal.value}: at most 2 bytes, got {offsets}")
        if len(offsets) == 2 and offsets[1] != offsets[0] + 1:
            raise ValueError(f"{self.signal.value}: bytes must be adjacent, got {offsets}")

    @property
    def offsets(self) -> tuple[int, ...]:
        return tuple(s.offset for s in self.stats)

    @property
    def detected(self) -> bool:
        return bool(self.stats)


def _one_based(offsets: tuple[int, ...]) -> list[int]:
    return [o + 1 for o in offsets]


@dataclass(frozen=True)
class CoordConfig:
    offsets: tuple[int, ...]
    max: int

    def to_dict(self) -> dict[str, Any]:
        return {"byteIndex": _one_based(self.offsets), "max": self.max, "type": MULTI_BYTE_RANGE}


@dataclass(frozen=True)
class TiltConfig:
    offsets: tuple[int, ...]
    positive_max: int
    negative_min: int
    negative_max: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "byteIndex": _one_based(self.offsets),
            "positiveMax": self.positive_max,
            "negativeMin": self.negative_min,
            "negativeMax": self.negative_max,
            "type": BIPOLAR_RANGE,
        }


@dataclass(frozen=True)
class StatusConfig:
    offset: int
    values: StatusCodeTable

    def to_dict(self) -> dict[str, Any]:
        return {"byteIndex": [self.offset + 1], "type": CODE, "values": self.values.to_dict()}


@dataclass(frozen=True)
class TabletButtonsConfig:
    offset: int
    codes: tuple[int, ...]  # raw values, button k is codes[k - 1]

    @property
    def button_count(self) -> int:
        return len(self.codes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "byteIndex": [self.offset + 1],
            "buttonCount": self.button_count,
            "type": CODE,
            "values": {str(raw): {"button": i} for i, raw in enumerate(self.codes, start=1)},
        }


@dataclass(frozen=True)
class DeviceByteConfig:
    x: CoordConfig
    y: CoordConfig
    pressure: CoordConfig
    tilt_x: TiltConfig | None = None
    tilt_y: TiltConfig | None = None
    status: StatusConfig | None = None
    tablet_buttons: TabletButtonsConfig | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "x": self.x.to_dict(),
            "y": self.y.to_dict(),
            "pressure": self.pressure.to_dict(),
        }
        if self.tilt_x is not None:
            out["tiltX"] = self.tilt_x.to_dict()
        if self.tilt_y is not None:
            out["tiltY"] = self.tilt_y.to_dict()
        if self.status is not None:
            out["status"] = self.status.to_dict()
        if self.tablet_buttons is not None:
            out["tabletButtons"] = self.tablet_buttons.to_dict()
        return out

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
