from __future__ import annotations

from dataclasses import dataclass, fields
import logging
from pathlib import Path
import tomllib
from typing import Any

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMELINE_COLUMN_ID = "x"
DEFAULT_ANIMATION_DURATION_MS = 500.0


@dataclass(frozen=True)
class ViewerConfig:
    timeline_column_id: str = DEFAULT_TIMELINE_COLUMN_ID
    animation_duration_ms: float = DEFAULT_ANIMATION_DURATION_MS
    aspect_ratio: float = 1.5
    height_fraction: float = 0.5
    target_fps: int = 60
    max_frames: int = 600

    def __post_init__(self) -> None:
        if not self.timeline_column_id:
            raise ValueError("timeline_column_id must be non-empty")
        if self.animation_duration_ms <= 0:
            raise ValueError("animation_duration_ms must be > 0")
        if self.aspect_ratio <= 0:
            raise ValueError("aspect_ratio must be > 0")
        if self.height_fraction <= 0 or self.height_fraction > 1:
            raise ValueError("height_fraction must be in (0, 1]")
        if self.target_fps <= 0:
            raise ValueError("target_fps must be > 0")
        if self.max_frames <= 0:
            raise ValueError("max_frames must be > 0")

    @property
    def frame_interval_ms(self) -> float:
        return 1000.0 / float(self.target_fps)


def load_config(path: str | Path) -> ViewerConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"viewer config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("viewer", {})
    if not isinstance(table, dict):
        raise ValueError("[viewer] must be a table")
    return config_from_mapping(table)


def config_from_mapping(table: dict[str, Any]) -> ViewerConfig:
    known = {f.name: f for f in fields(ViewerConfig)}
    kwargs: dict[str, Any] = {}
    for key, value in table.items():
        if key not in known:
            LOGGER.warning("ignoring unknown viewer config key: %s", key)
            continue
        if key == "timeline_column_id":
            kwargs[key] = _coerce_str(value, key)
        elif key in ("target_fps", "max_frames"):
            kwargs[key] = _coerce_int(value, key)
        else:
            kwargs[key] = _coerce_float(value, key)
    return ViewerConfig(**kwargs)


def _coerce_str(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _coerce_int(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    return value


def _coerce_float(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(value)
