"""
Detector configuration.

Every heuristic constant used by the walkthrough lives in DetectorConfig so a
device family can be calibrated from a YAML file instead of code.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml


class TiltRangeStrategy(Enum):
    # Wraparound range derived from observed values (0..N positive, M..255 negative)
    OBSERVED = "observed"
    # Fixed 0..127 positive / 128..255 negative split
    FIXED = "fixed"


@dataclass(frozen=True)
class DetectorConfig:
    min_variance: int = 50
    status_min_distinct: int = 2
    status_max_distinct: int = 10
    status_offset: int | None = None        # conventionally fixed status byte, if any
    tilt_midpoint: int = 128
    tilt_range: TiltRangeStrategy = TiltRangeStrategy.OBSERVED
    negative_min_sentinel: int = 256
    button_mode_code: int = 240

    def __post_init__(self) -> None:
        if self.min_variance < 0:
            raise ValueError(f"min_variance must be >= 0, got {self.min_variance}")
        if not 1 <= self.status_min_distinct <= self.status_max_distinct:
            raise ValueError(
                "status distinct band must satisfy 1 <= min <= max, got "
                f"[{self.status_min_distinct}, {self.status_max_distinct}]"
            )
        if self.status_offset is not None and self.status_offset < 0:
            raise ValueError(f"status_offset must be >= 0, got {self.status_offset}")
        if not 1 <= self.tilt_midpoint <= 255:
            raise ValueError(f"tilt_midpoint must be within 1..255, got {self.tilt_midpoint}")
        if not 0 <= self.button_mode_code <= 255:
            raise ValueError(f"button_mode_code must be a byte, got {self.button_mode_code}")


def load_config(source: str | Path | Mapping[str, Any] | None = None) -> DetectorConfig:
    """
    Build a DetectorConfig from a mapping, a YAML file, or defaults.

    A YAML file may hold the settings at top level or under a `detector` key.
    """
    if source is None:
        return DetectorConfig()

    if isinstance(source, Mapping):
        data: Any = source
    else:
        with open(source, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"{source}: expected a mapping at top level")
        data = data.get("detector", data)

    return _mk_detector_config(data)


def _mk_detector_config(d: Mapping[str, Any]) -> DetectorConfig:
    known = {f.name for f in fields(DetectorConfig)}
    kwargs: dict[str, Any] = {}

    for key, value in d.items():
        if key not in known:
            continue
        if key == "tilt_range":
            try:
                kwargs[key] = (
                    value if isinstance(value, TiltRangeStrategy)
                    else TiltRangeStrategy(str(value).lower())
                )
            except ValueError:
                raise ValueError(
                    f"Unsupported tilt_range '{value}'. "
                    f"Available: {[s.value for s in TiltRangeStrategy]}"
                ) from None
        elif key == "status_offset":
            kwargs[key] = None if value is None else int(value)
        else:
            kwargs[key] = int(value)

    return DetectorConfig(**kwargs)
