"""
Synthetic tablet.

Generates XP-Pen style reports for each walkthrough gesture so the whole
walkthrough can run without hardware. Pen reports carry:

    status | X (u16 LE) | Y (u16 LE) | pressure (u16 LE) | tiltX | tiltY | 0 0

optionally preceded by the report id. Tablet button reports carry the
button-mode status code followed by the pressed button number.

Output is deterministic for a given seed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..protocol.state import Phase
from .interface import PacketCallback, PacketLayout


STATUS_CODES: dict[str, int] = {
    "none": 192,
    "hover": 160,
    "hover_secondary": 162,
    "hover_primary": 164,
    "contact": 161,
    "contact_secondary": 163,
    "contact_primary": 165,
    "buttons": 240,
}


@dataclass(frozen=True)
class TabletSpecs:
    pen_report_id: int = 7
    button_report_id: int = 6
    pen_report_length: int = 12     # with report id
    button_report_length: int = 8   # with report id
    max_x: int = 16000
    max_y: int = 9000
    max_pressure: int = 16383
    max_tilt: int = 60              # degrees either way
    button_count: int = 8


def tilt_to_byte(angle: float) -> int:
    """Degrees to the wraparound byte: 0..60 positive, 196..255 negative."""
    a = int(round(max(-60.0, min(60.0, angle))))
    return a if a >= 0 else 256 + a


def status_code(contact: bool, primary: bool = False, secondary: bool = False) -> int:
    prefix = "contact" if contact else "hover"
    if primary:
        return STATUS_CODES[f"{prefix}_primary"]
    if secondary:
        return STATUS_CODES[f"{prefix}_secondary"]
    return STATUS_CODES[prefix]


_PHASE_GESTURES: dict[Phase, str] = {
    Phase.AWAITING_HORIZONTAL: "horizontal",
    Phase.AWAITING_VERTICAL: "vertical",
    Phase.AWAITING_PRESSURE: "pressure",
    Phase.AWAITING_HOVER_HORIZONTAL: "hover_horizontal",
    Phase.AWAITING_HOVER_VERTICAL: "hover_vertical",
    Phase.AWAITING_TILT_X: "tilt_x",
    Phase.AWAITING_TILT_Y: "tilt_y",
    Phase.AWAITING_PRIMARY_BUTTON: "primary_button",
    Phase.AWAITING_SECONDARY_BUTTON: "secondary_button",
    Phase.AWAITING_TABLET_BUTTONS: "tablet_buttons",
}


class SyntheticTablet:
    """
    Deterministic stand-in for a pen tablet.

    Usage:
        tablet = SyntheticTablet(seed=1)
        tablet.subscribe(engine.on_packet)
        tablet.play("horizontal")
    """

    def __init__(
        self,
        seed: int = 0,
        samples: int = 120,
        include_report_id: bool = False,
        jitter: int = 24,
        specs: TabletSpecs | None = None,
    ):
        if samples < 4:
            raise ValueError(f"samples must be >= 4, got {samples}")
        self.specs = specs or TabletSpecs()
        self.samples = samples
        self.include_report_id = include_report_id
        self.jitter = jitter
        self._rng = np.random.default_rng(seed)
        self._subscribers: list[PacketCallback] = []

    # === IPacketSource ===

    @property
    def layout(self) -> PacketLayout:
        length = self.specs.pen_report_length
        if not self.include_report_id:
            return PacketLayout(report_id=None, length=length - 1)
        return PacketLayout(report_id=self.specs.pen_report_id, length=length)

    def subscribe(self, callback: PacketCallback) -> None:
        self._subscribers.append(callback)

    # === Reports ===

    def pen_report(
        self,
        x: int,
        y: int,
        pressure: int = 0,
        tilt_x: float = 0.0,
        tilt_y: float = 0.0,
        contact: bool = True,
        primary: bool = False,
        secondary: bool = False,
    ) -> bytes:
        body = bytearray(self.specs.pen_report_length - 1)
        body[0] = status_code(contact, primary, secondary)
        body[1:3] = int(x).to_bytes(2, "little")
        body[3:5] = int(y).to_bytes(2, "little")
        body[5:7] = (int(pressure) if contact else 0).to_bytes(2, "little")
        body[7] = tilt_to_byte(tilt_x)
        body[8] = tilt_to_byte(tilt_y)
        return self._framed(self.specs.pen_report_id, body)

    def away_report(self) -> bytes:
        body = bytearray(self.specs.pen_report_length - 1)
        body[0] = STATUS_CODES["none"]
        return self._framed(self.specs.pen_report_id, body)

    def button_report(self, button: int | None) -> bytes:
        body = bytearray(self.specs.button_report_length - 1)
        body[0] = STATUS_CODES["buttons"]
        if button is not None:
            body[1] = button
        return self._framed(self.specs.button_report_id, body)

    def _framed(self, report_id: int, body: bytearray) -> bytes:
        if self.include_report_id:
            return bytes([report_id]) + bytes(body)
        return bytes(body)

    # === Gestures ===

    def _sweep(self, top: int, lo: float = 0.0, hi: float = 1.0) -> np.ndarray:
        """Full-range sweep there and back, hitting both ends exactly."""
        half = self.samples // 2
        up = np.linspace(lo * top, hi * top, half)
        down = up[::-1][1:]
        path = np.concatenate([up, down, up[:self.samples - len(up) - len(down)]])
        return np.rint(path).astype(np.int64)

    def _held(self, value: int, top: int) -> np.ndarray:
        """A position held by hand: small jitter around `value`."""
        noise = self._rng.integers(-self.jitter, self.jitter + 1, size=self.samples)
        return np.clip(value + noise, 0, top)

    def _tilt_sweep(self) -> np.ndarray:
        t = self.specs.max_tilt
        return self._sweep(2 * t) - t

    def gesture(self, name: str) -> list[bytes]:
        """Reports for one isolated gesture."""
        s = self.specs
        n = self.samples
        cx, cy, cp = s.max_x // 2, s.max_y // 2, s.max_pressure // 2

        if name == "horizontal":
            xs, ys, ps = self._sweep(s.max_x), self._held(cy, s.max_y), self._held(cp, s.max_pressure)
            return [self.pen_report(x, y, p) for x, y, p in zip(xs, ys, ps)]

        if name == "vertical":
            xs, ys, ps = self._held(cx, s.max_x), self._sweep(s.max_y), self._held(cp, s.max_pressure)
            return [self.pen_report(x, y, p) for x, y, p in zip(xs, ys, ps)]

        if name == "pressure":
            xs, ys = self._held(cx, s.max_x), self._held(cy, s.max_y)
            ps = self._sweep(s.max_pressure, lo=0.02)
            return [self.pen_report(x, y, p) for x, y, p in zip(xs, ys, ps)]

        if name in ("hover_horizontal", "hover_vertical"):
            if name == "hover_horizontal":
                xs, ys = self._sweep(s.max_x, lo=0.1, hi=0.9), self._held(cy, s.max_y)
            else:
                xs, ys = self._held(cx, s.max_x), self._sweep(s.max_y, lo=0.1, hi=0.9)
            packets = [self.pen_report(x, y, contact=False) for x, y in zip(xs, ys)]
            # Pen lifted out of range at the end
            return packets + [self.away_report() for _ in range(3)]

        if name in ("tilt_x", "tilt_y"):
            xs, ys = self._held(cx, s.max_x), self._held(cy, s.max_y)
            tilt = self._tilt_sweep()
            if name == "tilt_x":
                return [self.pen_report(x, y, tilt_x=t, contact=False) for x, y, t in zip(xs, ys, tilt)]
            return [self.pen_report(x, y, tilt_y=t, contact=False) for x, y, t in zip(xs, ys, tilt)]

        if name in ("primary_button", "secondary_button"):
            primary = name == "primary_button"
            xs, ys = self._held(cx, s.max_x), self._held(cy, s.max_y)
            ps = self._held(cp, s.max_pressure)
            # First half hovering with the button held, then pressed down
            contact = np.arange(n) >= n // 2
            return [
                self.pen_report(x, y, p, contact=bool(c), primary=primary, secondary=not primary)
                for x, y, p, c in zip(xs, ys, ps, contact)
            ]

        if name == "tablet_buttons":
            packets: list[bytes] = []
            for button in range(1, s.button_count + 1):
                packets.extend(self.button_report(button) for _ in range(3))
                packets.append(self.button_report(None))
            return packets

        if name == "away":
            return [self.away_report() for _ in range(n)]

        raise ValueError(f"Unknown gesture '{name}'. Available: {sorted(GESTURES)}")

    def gesture_for(self, phase: Phase) -> list[bytes]:
        """Reports for the gesture a walkthrough phase asks the user to perform."""
        try:
            name = _PHASE_GESTURES[phase]
        except KeyError:
            raise ValueError(f"Phase {phase.name} has no capture gesture") from None
        return self.gesture(name)

    def play(self, gesture: str | Phase | Sequence[bytes], callback: PacketCallback | None = None) -> int:
        """
        Push a gesture's reports to `callback`, or to every subscriber.

        Returns the number of reports delivered.
        """
        if isinstance(gesture, Phase):
            packets = self.gesture_for(gesture)
        elif isinstance(gesture, str):
            packets = self.gesture(gesture)
        else:
            packets = list(gesture)

        targets = [callback] if callback is not None else self._subscribers
        for packet in packets:
            for target in targets:
                target(packet)
        return len(packets)


GESTURES = frozenset(_PHASE_GESTURES.values()) | {"away"}
