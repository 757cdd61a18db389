"""
Events are inputs to the walkthrough state machine.

The device or UI collaborator turns what happens (a packet arrives, the user
finishes a gesture, presses retry) into events.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..metadata import DeviceMetadata, UserMetadata


@dataclass(frozen=True)
class Event:
    """Base class for all walkthrough events."""
    pass


# === Lifecycle ===

@dataclass(frozen=True)
class StartWalkthrough(Event):
    """Begin at the first capture step with empty results."""
    pass


@dataclass(frozen=True)
class ResetWalkthrough(Event):
    """Discard everything and return to IDLE."""
    reason: str = "user_request"


# === Capture ===

@dataclass(frozen=True)
class PacketReceived(Event):
    """One raw report from the device (or a generator)."""
    data: bytes


@dataclass(frozen=True)
class PacketsReceived(Event):
    """A burst of raw reports, appended to the buffer in one go."""
    data: tuple[bytes, ...]


@dataclass(frozen=True)
class CaptureCompleted(Event):
    """The isolated gesture for the current step is done; analyze the buffer."""
    pass


@dataclass(frozen=True)
class CaptureReset(Event):
    """Retry the current step: drop its buffer, keep all committed results."""
    pass


@dataclass(frozen=True)
class SkipStep(Event):
    """Skip the current step. Only honoured for optional steps."""
    pass


# === Metadata ===

@dataclass(frozen=True)
class SubmitMetadata(Event):
    """User-provided device details for the final configuration."""
    user: UserMetadata
    device: DeviceMetadata = DeviceMetadata()
