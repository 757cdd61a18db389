"""
Packet source interface.

A packet source pushes raw HID reports, one at a time, to subscribed
callbacks. Where the report id byte ends up (stripped by the host API or
left at offset 0) is part of the source's layout.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable


PacketCallback = Callable[[bytes], None]


@dataclass(frozen=True)
class PacketLayout:
    report_id: int | None  # None when reports arrive with the id stripped
    length: int

    @property
    def has_report_id(self) -> bool:
        return self.report_id is not None


@runtime_checkable
class IPacketSource(Protocol):
    """
    Push-based packet source.

    Packets are delivered in arrival order; the source never buffers on
    behalf of the walkthrough.
    """

    @property
    def layout(self) -> PacketLayout:
        """Layout of the pen reports this source produces."""
        ...

    def subscribe(self, callback: PacketCallback) -> None:
        """Register a callback receiving every report as bytes."""
        ...
