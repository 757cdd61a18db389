"""
Byte-level analysis primitives.

All functions here are pure: packets in, statistics or offsets out.
"""
from .stats import (
    ByteStatistic,
    PacketLengthError,
    analyze,
    as_matrix,
    distinct_values,
    exclude,
    little_endian_max,
)
from .selector import select_candidates, significant
from .status import (
    PenButton,
    StatusCode,
    StatusCodeTable,
    StatusState,
    classify_status_packets,
    find_status_byte,
    is_away_packet,
)
from .buttons import TabletButtonByte, button_mode_packets, find_tablet_button_byte

__all__ = [
    # Statistics
    "ByteStatistic",
    "PacketLengthError",
    "analyze",
    "as_matrix",
    "distinct_values",
    "exclude",
    "little_endian_max",
    # Selection
    "select_candidates",
    "significant",
    # Status
    "PenButton",
    "StatusCode",
    "StatusCodeTable",
    "StatusState",
    "classify_status_packets",
    "find_status_byte",
    "is_away_packet",
    # Tablet buttons
    "TabletButtonByte",
    "button_mode_packets",
    "find_tablet_button_byte",
]
