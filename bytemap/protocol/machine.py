"""
Walkthrough State Machine.

The byte-mapping walkthrough implemented as a pure function:
    step(state, event) -> (new_state, actions)

No I/O, no device access, no clock dependency.
The engine executes the returned actions.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Callable, Sequence

from ..analysis.buttons import find_tablet_button_byte
from ..analysis.selector import select_candidates
from ..analysis.stats import ByteStatistic, PacketLengthError, analyze, exclude
from ..analysis.status import (
    StatusCode,
    StatusState,
    classify_status_packets,
    find_status_byte,
)
from ..metadata import generate_complete_config
from ..models import Signal, SignalAssignment
from ..synthesize import synthesize
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


# Type alias for the step function signature
StepResult = tuple[WalkthroughState, list[Action]]


class WalkthroughProtocol:
    """
    Pure functional state machine for the byte-mapping walkthrough.

    Usage:
        state = WalkthroughState()
        state, actions = WalkthroughProtocol.step(state, StartWalkthrough())
        state, actions = WalkthroughProtocol.step(state, PacketReceived(report))
        # ... more packets, then
        state, actions = WalkthroughProtocol.step(state, CaptureCompleted())
    """

    @staticmethod
    def step(state: WalkthroughState, event: Event) -> StepResult:
        """
        Process an event and return (new_state, actions).

        Events without a handler for the current phase leave the state
        untouched and produce no actions.
        """
        handler = _HANDLERS.get((type(state.phase).__name__, state.phase, type(event)))

        if handler:
            return handler(state, event)

        handler = _GLOBAL_HANDLERS.get(type(event))
        if handler:
            return handler(state, event)

        return (state, [])


# =============================================================================
# Lifecycle handlers
# =============================================================================

def _handle_start(state: WalkthroughState, event: StartWalkthrough) -> StepResult:
    """IDLE/COMPLETE + StartWalkthrough -> first capture step, empty results."""
    cfg = state.config
    known = frozenset() if cfg.status_offset is None else frozenset({cfg.status_offset})

    actions: list[Action] = [Log("info", f"[Walkthrough] Started at {FIRST_PHASE.name}")]
    if cfg.status_offset is not None:
        actions.append(Log("info", f"[Walkthrough] Using configured status byte at offset {cfg.status_offset}"))
    actions.append(AppNotify("walkthrough_started", {"step": FIRST_PHASE.name}))

    return (
        WalkthroughState(
            phase=FIRST_PHASE,
            config=cfg,
            known_offsets=known,
            status_offset=cfg.status_offset,
        ),
        actions,
    )


def _handle_reset(state: WalkthroughState, event: ResetWalkthrough) -> StepResult:
    """Any phase + ResetWalkthrough -> IDLE, keeping only the detector config."""
    if state.phase is Phase.IDLE:
        return (state, [])

    return (
        WalkthroughState(config=state.config),
        [
            Log("info", f"[Walkthrough] Reset from {state.phase.name}: {event.reason}"),
            AppNotify("walkthrough_reset", {"reason": event.reason}),
        ]
    )


# =============================================================================
# Capture handlers
# =============================================================================

def _handle_packet(state: WalkthroughState, event: PacketReceived) -> StepResult:
    """Capture phase + PacketReceived -> append to the active buffer."""
    # Copies the buffer per packet; feed PacketsReceived for long captures
    return (replace(state, capture=state.capture + (bytes(event.data),)), [])


def _handle_packets(state: WalkthroughState, event: PacketsReceived) -> StepResult:
    """Capture phase + PacketsReceived -> append the whole burst at once."""
    batch = tuple(bytes(p) for p in event.data)
    return (replace(state, capture=state.capture + batch), [])


def _handle_capture_reset(state: WalkthroughState, event: CaptureReset) -> StepResult:
    """Capture phase + CaptureReset -> drop the buffer, keep committed results."""
    dropped = len(state.capture)
    return (
        replace(state, capture=(), last_error=None),
        [
            Log("info", f"[Walkthrough] {state.phase.name}: capture reset ({dropped} packets dropped)"),
            AppNotify("capture_reset", {"step": state.phase.name, "dropped": dropped}),
        ]
    )


def _handle_capture_completed(state: WalkthroughState, event: CaptureCompleted) -> StepResult:
    """Capture phase + CaptureCompleted -> analyze, commit, advance."""
    step = STEP_TABLE[state.phase]

    try:
        new_state, actions = _run_step(state, step)
    except PacketLengthError as e:
        return (
            replace(state, capture=(), last_error=str(e)),
            [
                Log("error", f"[Walkthrough] {step.label}: capture rejected: {e}"),
                AppNotify("capture_rejected", {"step": step.phase.name, "reason": str(e)}),
            ]
        )

    return _advance(new_state, step, actions)


def _handle_skip(state: WalkthroughState, event: SkipStep) -> StepResult:
    """Capture phase + SkipStep -> advance if the step is optional."""
    step = STEP_TABLE[state.phase]
    if not step.optional:
        return (state, [Log("warn", f"[Walkthrough] {step.label} cannot be skipped")])

    state = replace(state, capture=())
    actions: list[Action] = [Log("info", f"[Walkthrough] {step.label} skipped")]
    if step.emits_config and state.device_config is None:
        state, more = _synthesize_config(state)
        actions.extend(more)

    return _advance(state, step, actions)


def _handle_submit_metadata(state: WalkthroughState, event: SubmitMetadata) -> StepResult:
    """AWAITING_METADATA + SubmitMetadata -> complete configuration, COMPLETE."""
    actions: list[Action] = []
    if state.device_config is None:
        state, actions = _synthesize_config(state)

    complete = generate_complete_config(event.device, event.user, state.device_config)

    return (
        replace(state, phase=Phase.COMPLETE, complete_config=complete, last_error=None),
        actions + [
            Log("info", f"[Walkthrough] Configuration for '{event.user.name}' complete"),
            CompleteConfigGenerated(complete),
            AppNotify("walkthrough_complete", {"name": event.user.name}),
        ]
    )


# =============================================================================
# Step execution
# =============================================================================

def _advance(state: WalkthroughState, step: StepSpec, actions: list[Action]) -> StepResult:
    state = replace(state, phase=step.next_phase, last_error=None)
    return (
        state,
        actions + [
            AppNotify("step_complete", {"step": step.phase.name, "next": step.next_phase.name}),
        ]
    )


def _run_step(state: WalkthroughState, step: StepSpec) -> StepResult:
    """Commit the current buffer as the capture for `step` and analyze it."""
    packets = state.capture
    state = replace(
        state,
        capture=(),
        last_capture=packets,
        history=state.history + (StepCapture(step.phase, packets),),
    )

    actions: list[Action] = [
        Log("debug", f"[Walkthrough] {step.label}: analyzing {len(packets)} packets"),
    ]
    if not packets:
        actions.append(Log("warn", f"[Walkthrough] {step.label}: no packets captured"))

    state, more = _RUNNERS[step.kind](state, step, packets)
    actions.extend(more)

    if step.emits_config:
        state, more = _synthesize_config(state)
        actions.extend(more)

    return (state, actions)


def _adjacent_only(chosen: list[ByteStatistic]) -> list[ByteStatistic]:
    """Two non-adjacent fallback bytes cannot form one value: keep the stronger."""
    if len(chosen) == 2 and chosen[1].offset != chosen[0].offset + 1:
        return [max(chosen, key=lambda s: s.variance)]
    return chosen


def _run_detect(state: WalkthroughState, step: StepSpec, packets: Sequence[bytes]) -> StepResult:
    cfg = state.config
    stats = exclude(analyze(packets), state.known_offsets)
    chosen = select_candidates(stats, step.want_count, cfg.min_variance)

    actions: list[Action] = []
    kept = _adjacent_only(chosen)
    if len(kept) != len(chosen):
        actions.append(Log(
            "warn",
            f"[Walkthrough] {step.label}: bytes {[s.offset for s in chosen]} are not adjacent, "
            f"keeping offset {kept[0].offset}",
        ))

    assignment = SignalAssignment(step.signal, tuple(kept))
    state = replace(
        state,
        assignments=state.assignments + (assignment,),
        known_offsets=state.known_offsets | frozenset(assignment.offsets),
    )

    if assignment.detected:
        actions.append(Log("info", f"[Walkthrough] {step.label}: {step.signal.value} at offsets {list(assignment.offsets)}"))
    elif packets:
        actions.append(Log("warn", f"[Walkthrough] {step.label}: no {step.signal.value} bytes above threshold"))
    actions.append(StepCommitted(step.phase.name, step.signal.value, assignment.offsets))

    if step.condition is not None:
        state, more = _track_status(state, step, packets)
        actions.extend(more)

    return (state, actions)


def _run_confirm(state: WalkthroughState, step: StepSpec, packets: Sequence[bytes]) -> StepResult:
    existing = state.assignment(step.signal)
    offsets = existing.offsets if existing is not None else ()

    actions: list[Action] = [
        Log("info", f"[Walkthrough] {step.label}: re-using {step.signal.value} offsets {list(offsets)}"),
        StepCommitted(step.phase.name, step.signal.value, offsets),
    ]
    state, more = _track_status(state, step, packets)
    return (state, actions + more)


def _run_pen_button(state: WalkthroughState, step: StepSpec, packets: Sequence[bytes]) -> StepResult:
    state, actions = _track_status(state, step, packets)
    offsets = () if state.status_offset is None else (state.status_offset,)
    actions.append(StepCommitted(step.phase.name, None, offsets))
    return (state, actions)


def _run_tablet_buttons(state: WalkthroughState, step: StepSpec, packets: Sequence[bytes]) -> StepResult:
    if state.status_offset is None:
        return (
            state,
            [
                Log("warn", f"[Walkthrough] {step.label}: status byte unknown, cannot isolate button reports"),
                StepCommitted(step.phase.name, None, ()),
            ]
        )

    found = find_tablet_button_byte(packets, state.status_offset, state.config.button_mode_code)
    state = replace(state, tablet_buttons=found)

    if found is None:
        log = Log("warn", f"[Walkthrough] {step.label}: no button byte found")
    else:
        log = Log("info", f"[Walkthrough] {step.label}: offset {found.offset}, {len(found.codes)} buttons")

    return (
        state,
        [log, StepCommitted(step.phase.name, None, () if found is None else (found.offset,))]
    )


_RUNNERS: dict[StepKind, Callable[[WalkthroughState, StepSpec, Sequence[bytes]], StepResult]] = {
    StepKind.DETECT: _run_detect,
    StepKind.CONFIRM: _run_confirm,
    StepKind.PEN_BUTTON: _run_pen_button,
    StepKind.TABLET_BUTTONS: _run_tablet_buttons,
}


# =============================================================================
# Status tracking
# =============================================================================

def _status_codes_for(
    state: WalkthroughState, step: StepSpec, packets: Sequence[bytes]
) -> list[tuple[int, StatusCode]]:
    pressure = state.assignment(Signal.PRESSURE)
    return classify_status_packets(
        packets,
        state.status_offset,
        step.condition or StatusState.CONTACT,
        step.button,
        pressure.offsets if pressure is not None else (),
    )


def _track_status(state: WalkthroughState, step: StepSpec, packets: Sequence[bytes]) -> StepResult:
    """Record this step's status codes, detecting the status byte first if needed."""
    if state.status_offset is None:
        return _detect_status(state)

    before = len(state.status_codes)
    table = state.status_codes.with_codes(_status_codes_for(state, step, packets))
    state = replace(state, status_codes=table)

    added = len(table) - before
    if not added:
        return (state, [])
    return (state, [Log("debug", f"[Walkthrough] {step.label}: {added} new status codes")])


def _condition_history(state: WalkthroughState) -> list[tuple[StepSpec, tuple[bytes, ...]]]:
    return [
        (STEP_TABLE[h.phase], h.packets)
        for h in state.history
        if STEP_TABLE[h.phase].condition is not None and h.packets
    ]


def _detect_status(state: WalkthroughState) -> StepResult:
    """
    Look for the status byte over the cumulative condition-step captures.

    A single condition gives the byte no reason to vary, so detection waits
    for both contact and hover captures (or a pen-button capture). On success
    the table is back-filled from every earlier condition step in order.
    """
    pool_steps = _condition_history(state)
    if not pool_steps:
        return (state, [])

    conditions = {step.condition for step, _ in pool_steps}
    has_button = any(step.button is not None for step, _ in pool_steps)
    if len(conditions) < 2 and not has_button:
        return (state, [])

    # Other interfaces may interleave their reports; keep the dominant shape
    lengths = Counter(len(p) for _, packets in pool_steps for p in packets)
    length = lengths.most_common(1)[0][0]
    pool = [p for _, packets in pool_steps for p in packets if len(p) == length]

    cfg = state.config
    offset = find_status_byte(pool, state.known_offsets, cfg.status_min_distinct, cfg.status_max_distinct)
    if offset is None:
        return (state, [Log("warn", f"[Walkthrough] Status byte not found in {len(pool)} packets")])

    state = replace(state, status_offset=offset, known_offsets=state.known_offsets | {offset})

    table = state.status_codes
    for step, packets in pool_steps:
        shaped = [p for p in packets if len(p) == length]
        table = table.with_codes(_status_codes_for(state, step, shaped))
    state = replace(state, status_codes=table)

    return (
        state,
        [
            Log("info", f"[Walkthrough] Status byte at offset {offset}, {len(table)} codes"),
            AppNotify("status_byte_detected", {"offset": offset, "codes": len(table)}),
        ]
    )


# =============================================================================
# Synthesis
# =============================================================================

def _synthesis_packets(state: WalkthroughState) -> list[bytes]:
    """Pen reports from every committed step; button-mode reports are a different layout."""
    return [
        p
        for h in state.history
        if STEP_TABLE[h.phase].kind is not StepKind.TABLET_BUTTONS
        for p in h.packets
    ]


def _synthesize_config(state: WalkthroughState) -> StepResult:
    config = synthesize(
        state.assignments,
        state.status_codes,
        _synthesis_packets(state),
        state.status_offset,
        state.tablet_buttons,
        state.config,
    )
    return (
        replace(state, device_config=config),
        [
            Log("info", "[Walkthrough] Device byte configuration generated"),
            ConfigGenerated(config),
        ]
    )


# =============================================================================
# Handler registry
# =============================================================================

_HANDLERS: dict[tuple, Callable[[WalkthroughState, Event], StepResult]] = {
    ("Phase", Phase.IDLE, StartWalkthrough): _handle_start,
    ("Phase", Phase.COMPLETE, StartWalkthrough): _handle_start,
    ("Phase", Phase.AWAITING_METADATA, SubmitMetadata): _handle_submit_metadata,
}

for _step in STEPS:
    _HANDLERS[("Phase", _step.phase, PacketReceived)] = _handle_packet
    _HANDLERS[("Phase", _step.phase, PacketsReceived)] = _handle_packets
    _HANDLERS[("Phase", _step.phase, CaptureCompleted)] = _handle_capture_completed
    _HANDLERS[("Phase", _step.phase, CaptureReset)] = _handle_capture_reset
    _HANDLERS[("Phase", _step.phase, SkipStep)] = _handle_skip
del _step


_GLOBAL_HANDLERS: dict[type, Callable[[WalkthroughState, Event], StepResult]] = {
    ResetWalkthrough: _handle_reset,
}
