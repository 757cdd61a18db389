from __future__ import annotations

import pytest

from bytemap.config import DetectorConfig, TiltRangeStrategy, load_config


class TestDetectorConfig:
    """Detector settings and their validation."""

    def test_defaults(self):
        cfg = DetectorConfig()
        assert cfg.min_variance == 50
        assert (cfg.status_min_distinct, cfg.status_max_distinct) == (2, 10)
        assert cfg.status_offset is None
        assert cfg.tilt_range is TiltRangeStrategy.OBSERVED
        assert cfg.negative_min_sentinel == 256
        assert cfg.button_mode_code == 240

    @pytest.mark.parametrize("kwargs", [
        {"min_variance": -1},
        {"status_min_distinct": 5, "status_max_distinct": 4},
        {"status_min_distinct": 0},
        {"status_offset": -2},
        {"tilt_midpoint": 0},
        {"button_mode_code": 256},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            DetectorConfig(**kwargs)


class TestLoadConfig:
    """Building a DetectorConfig from YAML or a mapping."""

    def test_none_gives_defaults(self):
        assert load_config() == DetectorConfig()

    def test_mapping(self):
        cfg = load_config({"min_variance": "30", "tilt_range": "FIXED", "unknown": 1})
        assert cfg.min_variance == 30
        assert cfg.tilt_range is TiltRangeStrategy.FIXED

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "detector.yaml"
        path.write_text(
            "detector:\n"
            "  min_variance: 40\n"
            "  status_offset: 0\n"
            "  status_max_distinct: 12\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.min_variance == 40
        assert cfg.status_offset == 0
        assert cfg.status_max_distinct == 12

    def test_yaml_top_level(self, tmp_path):
        path = tmp_path / "detector.yaml"
        path.write_text("tilt_range: observed\nstatus_offset: null\n", encoding="utf-8")
        cfg = load_config(str(path))
        assert cfg.tilt_range is TiltRangeStrategy.OBSERVED
        assert cfg.status_offset is None

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == DetectorConfig()

    def test_unknown_tilt_range(self):
        with pytest.raises(ValueError, match="tilt_range"):
            load_config({"tilt_range": "guess"})

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)
