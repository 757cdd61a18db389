"""
Walkthrough Engine - Executes protocol actions.

The engine bridges the pure walkthrough protocol to the outside world:
- Packet sources (a HID reader, or SyntheticTablet)
- Logging
- Application callbacks (UI, CLI driver)

It owns the single mutable reference to the current WalkthroughState.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from .config import DetectorConfig
from .metadata import DeviceMetadata, UserMetadata
from .models import DeviceByteConfig
from .protocol import (
    WalkthroughProtocol,
    WalkthroughState,
    Phase,
    Event,
    Action,
    # Events
    StartWalkthrough,
    ResetWalkthrough,
    PacketReceived,
    PacketsReceived,
    CaptureCompleted,
    CaptureReset,
    SkipStep,
    SubmitMetadata,
    # Actions
    StepCommitted,
    ConfigGenerated,
    CompleteConfigGenerated,
    AppNotify,
    Log,
)
from .source.interface import IPacketSource


_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def default_logger(name: str = "bytemap") -> Callable[[str, str], None]:
    """(level, message) logger forwarding to the standard logging module."""
    log = logging.getLogger(name)

    def _log(level: str, msg: str) -> None:
        log.log(_LEVELS.get(level, logging.INFO), msg)

    return _log


class WalkthroughEngine:
    """
    Executes walkthrough actions and exposes the results.

    Usage:
        engine = WalkthroughEngine()
        engine.on_config = lambda cfg: print(cfg.to_json())
        engine.start()
        for report in reports:
            engine.on_packet(report)
        engine.complete_step()
    """

    def __init__(
        self,
        config: DetectorConfig | None = None,
        logger: Callable[[str, str], None] | None = None,
    ):
        self._logger = logger or default_logger()

        # Protocol state
        self._state = WalkthroughState(config=config or DetectorConfig())

        # Application callbacks
        self.on_event: Callable[[str, dict[str, Any]], None] | None = None
        self.on_step: Callable[[StepCommitted], None] | None = None
        self.on_config: Callable[[DeviceByteConfig], None] | None = None
        self.on_complete: Callable[[dict[str, Any]], None] | None = None

    # === Properties ===

    @property
    def state(self) -> WalkthroughState:
        """Current walkthrough state (read-only)."""
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def known_offsets(self) -> frozenset[int]:
        return self._state.known_offsets

    @property
    def last_capture(self) -> tuple[bytes, ...]:
        """Packets of the most recently committed step, for live display."""
        return self._state.last_capture

    @property
    def device_config(self) -> DeviceByteConfig | None:
        return self._state.device_config

    @property
    def complete_config(self) -> dict[str, Any] | None:
        return self._state.complete_config

    @property
    def is_complete(self) -> bool:
        return self._state.phase == Phase.COMPLETE

    # === Event Feeding ===

    def feed_event(self, event: Event) -> None:
        """
        Feed an event to the walkthrough state machine.

        The protocol returns actions which are immediately executed.
        """
        new_state, actions = WalkthroughProtocol.step(self._state, event)
        self._state = new_state

        for action in actions:
            self._execute(action)

    def start(self) -> None:
        self.feed_event(StartWalkthrough())

    def on_packet(self, data: bytes | bytearray | memoryview) -> None:
        """Packet callback; pass this to a packet source."""
        self.feed_event(PacketReceived(bytes(data)))

    def on_packets(self, batch: Iterable[bytes]) -> None:
        """Feed a burst of reports as one event."""
        self.feed_event(PacketsReceived(tuple(bytes(p) for p in batch)))

    def complete_step(self) -> None:
        self.feed_event(CaptureCompleted())

    def reset_step(self) -> None:
        self.feed_event(CaptureReset())

    def skip_step(self) -> None:
        self.feed_event(SkipStep())

    def submit_metadata(self, user: UserMetadata, device: DeviceMetadata | None = None) -> None:
        self.feed_event(SubmitMetadata(user, device or DeviceMetadata()))

    def reset(self, reason: str = "user_request") -> None:
        self.feed_event(ResetWalkthrough(reason))

    def attach(self, source: IPacketSource) -> None:
        """Subscribe to a packet source so its reports reach the walkthrough."""
        source.subscribe(self.on_packet)
        self._logger("debug", f"[Engine] Attached packet source ({source.layout})")

    # === Action Execution ===

    def _execute(self, action: Action) -> None:
        """Execute a single action."""

        match action:
            case Log(level, message):
                self._logger(level, message)

            case StepCommitted(step, signal, offsets):
                self._logger("debug", f"[Engine] Step committed: {step} {signal} {list(offsets)}")
                if self.on_step:
                    self.on_step(action)

            case ConfigGenerated(config):
                if self.on_config:
                    self.on_config(config)

            case CompleteConfigGenerated(config):
                if self.on_complete:
                    self.on_complete(config)

            case AppNotify(event_type, details):
                self._logger("debug", f"[Engine] App event: {event_type} {details}")
                if self.on_event:
                    self.on_event(event_type, details)

            case _:
                self._logger("warn", f"[Engine] Unknown action: {action}")
