"""
Walkthrough state representation.

WalkthroughState is immutable (frozen dataclass) so every transition is a
pure function producing a new instance. The Phase enum is the linear
sequence of capture steps.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from ..analysis.buttons import TabletButtonByte
from ..analysis.status import StatusCodeTable
from ..config import DetectorConfig
from ..models import DeviceByteConfig, Signal, SignalAssignment


class Phase(Enum):
    """Walkthrough steps, in order."""

    # No walkthrough running
    IDLE = auto()

    # Contact steps
    AWAITING_HORIZONTAL = auto()
    AWAITING_VERTICAL = auto()
    AWAITING_PRESSURE = auto()

    # Hover confirmation (re-uses the contact X/Y assignments)
    AWAITING_HOVER_HORIZONTAL = auto()
    AWAITING_HOVER_VERTICAL = auto()

    # Single-byte signals
    AWAITING_TILT_X = auto()
    AWAITING_TILT_Y = auto()

    # Status code table growth
    AWAITING_PRIMARY_BUTTON = auto()
    AWAITING_SECONDARY_BUTTON = auto()

    # Optional express keys on the tablet itself
    AWAITING_TABLET_BUTTONS = auto()

    # User-supplied device information
    AWAITING_METADATA = auto()

    COMPLETE = auto()


@dataclass(frozen=True)
class StepCapture:
    """Packets committed by one finished capture step."""

    phase: Phase
    packets: tuple[bytes, ...]


@dataclass(frozen=True)
class WalkthroughState:
    """
    Immutable walkthrough state.

    `known_offsets` only ever grows (by union after each committed step)
    until a full reset. `capture` is the buffer for the step in progress;
    `last_capture` keeps the previous step's packets for live display.
    """

    phase: Phase = Phase.IDLE
    config: DetectorConfig = field(default_factory=DetectorConfig)

    # Packet buffers
    capture: tuple[bytes, ...] = ()
    last_capture: tuple[bytes, ...] = ()
    history: tuple[StepCapture, ...] = ()

    # Accumulated inference
    known_offsets: frozenset[int] = frozenset()
    assignments: tuple[SignalAssignment, ...] = ()
    status_offset: int | None = None
    status_codes: StatusCodeTable = field(default_factory=StatusCodeTable)
    tablet_buttons: TabletButtonByte | None = None

    # Outputs
    device_config: DeviceByteConfig | None = None
    complete_config: dict[str, Any] | None = None

    last_error: str | None = None

    def assignment(self, signal: Signal) -> SignalAssignment | None:
        for a in self.assignments:
            if a.signal is signal:
                return a
        return None

    @property
    def is_capturing(self) -> bool:
        return self.phase not in (Phase.IDLE, Phase.AWAITING_METADATA, Phase.COMPLETE)
