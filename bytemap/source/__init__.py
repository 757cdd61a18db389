"""
Packet sources feeding the walkthrough.
"""
from .interface import IPacketSource, PacketCallback, PacketLayout
from .synthetic import STATUS_CODES, SyntheticTablet, TabletSpecs

__all__ = [
    "IPacketSource",
    "PacketCallback",
    "PacketLayout",
    "STATUS_CODES",
    "SyntheticTablet",
    "TabletSpecs",
]
