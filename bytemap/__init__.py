from .analysis import (
    ByteStatistic,
    PacketLengthError,
    StatusCode,
    StatusCodeTable,
    StatusState,
    analyze,
    find_status_byte,
    select_candidates,
)
from .config import DetectorConfig, TiltRangeStrategy, load_config
from .engine import WalkthroughEngine
from .metadata import DeviceMetadata, UserMetadata, generate_complete_config
from .models import DeviceByteConfig, Signal, SignalAssignment
from .protocol import Phase, WalkthroughProtocol, WalkthroughState
from .source import PacketLayout, SyntheticTablet
from .synthesize import synthesize

__all__ = [
    "ByteStatistic",
    "PacketLengthError",
    "StatusCode",
    "StatusCodeTable",
    "StatusState",
    "analyze",
    "find_status_byte",
    "select_candidates",
    "DetectorConfig",
    "TiltRangeStrategy",
    "load_config",
    "WalkthroughEngine",
    "DeviceMetadata",
    "UserMetadata",
    "generate_complete_config",
    "DeviceByteConfig",
    "Signal",
    "SignalAssignment",
    "Phase",
    "WalkthroughProtocol",
    "WalkthroughState",
    "PacketLayout",
    "SyntheticTablet",
    "synthesize",
]

__version__ = "0.1.0"
