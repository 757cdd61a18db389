"""
The walkthrough step table.

Each capture phase is described by data (which signal it isolates, the
physical condition the user is asked to hold, how many bytes to look for)
and run by one generic function in machine.py.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from ..analysis.status import PenButton, StatusState
from ..models import Signal
from .state import Phase


class StepKind(Enum):
    DETECT = auto()          # run the candidate selector for `signal`
    CONFIRM = auto()         # re-use an earlier assignment (hover)
    PEN_BUTTON = auto()      # grow the status code table
    TABLET_BUTTONS = auto()  # find the express key byte


@dataclass(frozen=True)
class StepSpec:
    phase: Phase
    next_phase: Phase
    kind: StepKind
    label: str
    signal: Signal | None = None
    condition: StatusState | None = None   # isolation assumption for status tracking
    want_count: int = 2
    button: PenButton | None = None
    optional: bool = False
    emits_config: bool = False            # synthesize the device config once committed


STEPS: tuple[StepSpec, ...] = (
    StepSpec(Phase.AWAITING_HORIZONTAL, Phase.AWAITING_VERTICAL, StepKind.DETECT,
             "horizontal movement (contact)", Signal.X, StatusState.CONTACT),
    StepSpec(Phase.AWAITING_VERTICAL, Phase.AWAITING_PRESSURE, StepKind.DETECT,
             "vertical movement (contact)", Signal.Y, StatusState.CONTACT),
    StepSpec(Phase.AWAITING_PRESSURE, Phase.AWAITING_HOVER_HORIZONTAL, StepKind.DETECT,
             "pressure", Signal.PRESSURE, StatusState.CONTACT),
    StepSpec(Phase.AWAITING_HOVER_HORIZONTAL, Phase.AWAITING_HOVER_VERTICAL, StepKind.CONFIRM,
             "horizontal movement (hover)", Signal.X, StatusState.HOVER),
    StepSpec(Phase.AWAITING_HOVER_VERTICAL, Phase.AWAITING_TILT_X, StepKind.CONFIRM,
             "vertical movement (hover)", Signal.Y, StatusState.HOVER),
    StepSpec(Phase.AWAITING_TILT_X, Phase.AWAITING_TILT_Y, StepKind.DETECT,
             "tilt X", Signal.TILT_X, want_count=1),
    StepSpec(Phase.AWAITING_TILT_Y, Phase.AWAITING_PRIMARY_BUTTON, StepKind.DETECT,
             "tilt Y", Signal.TILT_Y, want_count=1),
    StepSpec(Phase.AWAITING_PRIMARY_BUTTON, Phase.AWAITING_SECONDARY_BUTTON, StepKind.PEN_BUTTON,
             "primary pen button", condition=StatusState.CONTACT, button=PenButton.PRIMARY),
    StepSpec(Phase.AWAITING_SECONDARY_BUTTON, Phase.AWAITING_TABLET_BUTTONS, StepKind.PEN_BUTTON,
             "secondary pen button", condition=StatusState.CONTACT, button=PenButton.SECONDARY,
             emits_config=True),
    StepSpec(Phase.AWAITING_TABLET_BUTTONS, Phase.AWAITING_METADATA, StepKind.TABLET_BUTTONS,
             "tablet buttons", optional=True, emits_config=True),
)

STEP_TABLE: dict[Phase, StepSpec] = {s.phase: s for s in STEPS}

FIRST_PHASE = STEPS[0].phase
