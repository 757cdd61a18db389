"""
Actions are outputs from the walkthrough state machine.

The engine executes them: logging, notifying subscribers (a UI, a CLI
driver), handing over the synthesized configuration.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..models import DeviceByteConfig


@dataclass(frozen=True)
class Action:
    """Base class for all walkthrough actions."""
    pass


@dataclass(frozen=True)
class StepCommitted(Action):
    """A capture step's result was committed."""
    step: str                 # Phase name
    signal: str | None        # Signal value, None for status-only steps
    offsets: tuple[int, ...]  # 0-based


@dataclass(frozen=True)
class ConfigGenerated(Action):
    """The device byte configuration was (re)synthesized."""
    config: DeviceByteConfig


@dataclass(frozen=True)
class CompleteConfigGenerated(Action):
    """The full configuration document including metadata is ready."""
    config: dict[str, Any]


@dataclass(frozen=True)
class AppNotify(Action):
    """Notify subscribers of a walkthrough event."""
    event_type: str  # "walkthrough_started", "step_complete", "capture_rejected", ...
    details: dict[str, Any] = field(default_factory=dict)


# === Logging ===

@dataclass(frozen=True)
class Log(Action):
    """Emit a log message."""
    level: str  # "debug", "info", "warn", "error"
    message: str
