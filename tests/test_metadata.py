from __future__ import annotations

import pytest

from bytemap.analysis import StatusCode, StatusCodeTable, StatusState
from bytemap.metadata import (
    Collection,
    DeviceMetadata,
    UserMetadata,
    detect_digitizer_usage_page,
    detect_excluded_usage_pages,
    detect_stylus_mode_status_byte,
    generate_complete_config,
    infer_capabilities,
)
from bytemap.models import CoordConfig, DeviceByteConfig, StatusConfig, TiltConfig


def _mappings(pressure_max: int = 16383, status: StatusCodeTable | None = None) -> DeviceByteConfig:
    return DeviceByteConfig(
        x=CoordConfig((1, 2), 16000),
        y=CoordConfig((3, 4), 9000),
        pressure=CoordConfig((5, 6) if pressure_max else (), pressure_max),
        tilt_x=TiltConfig((7,), 60, 256, 196),
        status=StatusConfig(0, status) if status is not None else None,
    )


class TestCapabilities:
    """Capabilities inferred from the byte mappings."""

    @pytest.mark.parametrize("pressure_max,levels", [
        (16383, 16384),
        (8191, 8192),
        (1000, 1024),
    ])
    def test_pressure_levels(self, pressure_max, levels):
        assert infer_capabilities(_mappings(pressure_max))["pressureLevels"] == levels

    def test_defaults_without_pressure(self):
        caps = infer_capabilities(_mappings(0))
        assert caps["hasPressure"] is False
        assert caps["pressureLevels"] == 8192

    def test_resolution_and_tilt(self):
        caps = infer_capabilities(_mappings())
        assert caps["resolution"] == {"x": 16000, "y": 9000}
        assert caps["hasTilt"] is True

    def test_resolution_defaults(self):
        mappings = DeviceByteConfig(x=CoordConfig((), 0), y=CoordConfig((), 0), pressure=CoordConfig((), 0))
        caps = infer_capabilities(mappings)
        assert caps["resolution"] == {"x": 16000, "y": 9000}
        assert caps["hasTilt"] is False


class TestDetection:
    def test_digitizer_page_default(self):
        assert detect_digitizer_usage_page(()) == 13

    def test_digitizer_page_preferred(self):
        collections = (Collection(65280, 1), Collection(13, 2))
        assert detect_digitizer_usage_page(collections) == 13

    def test_digitizer_page_fallback(self):
        assert detect_digitizer_usage_page((Collection(65280, 1),)) == 65280

    def test_stylus_mode_status_byte(self):
        table = StatusCodeTable().with_codes([
            (161, StatusCode(StatusState.CONTACT)),
            (164, StatusCode(StatusState.HOVER, primary_button_pressed=True)),
            (160, StatusCode(StatusState.HOVER)),
        ])
        assert detect_stylus_mode_status_byte(_mappings(status=table)) == 160

    def test_stylus_mode_status_byte_missing(self):
        assert detect_stylus_mode_status_byte(_mappings()) is None

    def test_excluded_usage_pages(self):
        assert detect_excluded_usage_pages((13, 1, 12), 13) == [1, 12]


class TestCompleteConfig:
    """The full document combining mappings and metadata."""

    def test_layout(self):
        table = StatusCodeTable().with_code(160, StatusCode(StatusState.HOVER))
        device = DeviceMetadata(
            vendor_id=0x28BD,
            product_id=0x2904,
            product_name="Deco 640",
            collections=(Collection(13, 2),),
            interfaces=(13, 1),
            report_id=7,
        )
        user = UserMetadata(name="Deco 640", manufacturer="XP-Pen", model="Deco 640", button_count=8)

        config = generate_complete_config(device, user, _mappings(status=table))

        assert config["vendorId"] == "0x28bd"
        assert config["productId"] == "0x2904"
        assert config["reportId"] == 7
        assert config["digitizerUsagePage"] == 13
        assert config["stylusModeStatusByte"] == 160
        assert config["excludedUsagePages"] == [1]
        assert config["deviceInfo"]["product_string"] == "Deco 640"
        assert config["deviceInfo"]["usage"] == 2
        assert config["capabilities"]["hasButtons"] is True
        assert config["capabilities"]["buttonCount"] == 8
        assert config["byteCodeMappings"]["x"]["byteIndex"] == [2, 3]

    def test_unknown_device(self):
        config = generate_complete_config(DeviceMetadata(), UserMetadata(name="Mystery"), _mappings())
        assert config["vendorId"] == "0x0000"
        assert config["reportId"] == 0
        assert "stylusModeStatusByte" not in config
        assert "excludedUsagePages" not in config
        assert config["capabilities"]["hasButtons"] is False

    def test_negative_button_count(self):
        with pytest.raises(ValueError):
            UserMetadata(name="x", button_count=-1)
