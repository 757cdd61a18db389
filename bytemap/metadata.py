"""
Complete device configuration: detected byte mappings plus device and
user-supplied metadata.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .analysis.status import StatusState
from .models import DeviceByteConfig


DIGITIZER_USAGE_PAGE = 13
PEN_USAGE = 2
DEFAULT_PRESSURE_LEVELS = 8192
DEFAULT_RESOLUTION = (16000, 9000)


@dataclass(frozen=True)
class Collection:
    usage_page: int
    usage: int


@dataclass(frozen=True)
class DeviceMetadata:
    """What the device connection reports about itself."""

    vendor_id: int | None = None
    product_id: int | None = None
    product_name: str | None = None
    collections: tuple[Collection, ...] = ()
    interfaces: tuple[int, ...] = ()   # usage pages of every interface seen
    report_id: int | None = None


@dataclass(frozen=True)
class UserMetadata:
    """What the user types into the final walkthrough step."""

    name: str
    manufacturer: str = ""
    model: str = ""
    description: str = ""
    button_count: int = 0

    def __post_init__(self) -> None:
        if self.button_count < 0:
            raise ValueError(f"button_count must be >= 0, got {self.button_count}")


def infer_capabilities(mappings: DeviceByteConfig) -> dict[str, Any]:
    has_pressure = bool(mappings.pressure.offsets)
    has_tilt = mappings.tilt_x is not None or mappings.tilt_y is not None

    # Nearest power of two above the observed maximum
    pressure_levels = DEFAULT_PRESSURE_LEVELS
    if mappings.pressure.max:
        pressure_levels = 2 ** round(math.log2(mappings.pressure.max + 1))

    return {
        "hasButtons": False,
        "buttonCount": 0,
        "hasPressure": has_pressure,
        "pressureLevels": pressure_levels,
        "hasTilt": has_tilt,
        "resolution": {
            "x": mappings.x.max or DEFAULT_RESOLUTION[0],
            "y": mappings.y.max or DEFAULT_RESOLUTION[1],
        },
    }


def detect_digitizer_usage_page(collections: tuple[Collection, ...] = ()) -> int:
    if not collections:
        return DIGITIZER_USAGE_PAGE
    for c in collections:
        if c.usage_page == DIGITIZER_USAGE_PAGE and c.usage == PEN_USAGE:
            return c.usage_page
    return collections[0].usage_page


def detect_stylus_mode_status_byte(mappings: DeviceByteConfig) -> int | None:
    """Raw status value meaning "hovering, no pen button held", if recorded."""
    if mappings.status is None:
        return None
    for raw, code in mappings.status.values:
        if (
            code.state is StatusState.HOVER
            and not code.primary_button_pressed
            and not code.secondary_button_pressed
        ):
            return raw
    return None


def detect_excluded_usage_pages(
    interfaces: tuple[int, ...] = (), digitizer_usage_page: int | None = None
) -> list[int]:
    page = digitizer_usage_page or DIGITIZER_USAGE_PAGE
    return [up for up in interfaces if up != page]


def generate_complete_config(
    device: DeviceMetadata,
    user: UserMetadata,
    mappings: DeviceByteConfig,
) -> dict[str, Any]:
    capabilities = infer_capabilities(mappings)
    digitizer_usage_page = detect_digitizer_usage_page(device.collections)
    stylus_mode_status_byte = detect_stylus_mode_status_byte(mappings)
    excluded = detect_excluded_usage_pages(device.interfaces, digitizer_usage_page)

    capabilities["hasButtons"] = user.button_count > 0
    capabilities["buttonCount"] = user.button_count

    first = device.collections[0] if device.collections else None

    config: dict[str, Any] = {
        "name": user.name,
        "manufacturer": user.manufacturer,
        "model": user.model,
        "description": user.description,
        "vendorId": f"0x{device.vendor_id:x}" if device.vendor_id else "0x0000",
        "productId": f"0x{device.product_id:x}" if device.product_id else "0x0000",
        "deviceInfo": {
            "vendor_id": device.vendor_id or 0,
            "product_id": device.product_id or 0,
            "product_string": device.product_name or "",
            "usage_page": first.usage_page if first else DIGITIZER_USAGE_PAGE,
            "usage": first.usage if first else PEN_USAGE,
            "interfaces": list(device.interfaces),
        },
        "reportId": device.report_id or 0,
        "digitizerUsagePage": digitizer_usage_page,
    }
    if stylus_mode_status_byte is not None:
        config["stylusModeStatusByte"] = stylus_mode_status_byte
    if excluded:
        config["excludedUsagePages"] = excluded
    config["capabilities"] = capabilities
    config["byteCodeMappings"] = mappings.to_dict()

    return config
