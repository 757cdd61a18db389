"""
Walkthrough protocol - pure functional state machine.

WalkthroughProtocol.step() takes the current state and an event and returns
the new state plus the actions to execute. Device I/O and presentation live
outside this package.
"""
from .state import Phase, StepCapture, WalkthroughState
from .steps import FIRST_PHASE, STEP_TABLE, STEPS, StepKind, StepSpec
from .events import (
    Event,
    StartWalkthrough,
    ResetWalkthrough,
    PacketReceived,
    PacketsReceived,
    CaptureCompleted,
    CaptureReset,
    SkipStep,
    SubmitMetadata,
)
from .actions import (
    Action,
    StepCommitted,
    ConfigGenerated,
    CompleteConfigGenerated,
    AppNotify,
    Log,
)
from .machine import WalkthroughProtocol

__all__ = [
    # State
    "Phase",
    "StepCapture",
    "WalkthroughState",
    # Steps
    "FIRST_PHASE",
    "STEP_TABLE",
    "STEPS",
    "StepKind",
    "StepSpec",
    # Events
    "Event",
    "StartWalkthrough",
    "ResetWalkthrough",
    "PacketReceived",
    "PacketsReceived",
    "CaptureCompleted",
    "CaptureReset",
    "SkipStep",
    "SubmitMetadata",
    # Actions
    "Action",
    "StepCommitted",
    "ConfigGenerated",
    "CompleteConfigGenerated",
    "AppNotify",
    "Log",
    # Protocol
    "WalkthroughProtocol",
]
