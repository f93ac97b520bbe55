from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

import numpy as np


Range = tuple[float, float]


@dataclass(frozen=True, eq=False)
class Series:
    id: str
    name: str
    color: str
    values: np.ndarray


@dataclass(frozen=True)
class Transition:
    """In-flight y-axis rescale from `initial_range` toward the current boundary."""

    progress: float
    initial_range: Range
    generation: int

    def __post_init__(self) -> None:
        if self.progress < 0.0 or self.progress > 1.0:
            raise ValueError("transition progress must be in [0, 1]")


@dataclass(frozen=True)
class ViewportDimensions:
    width: float
    charts_height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.charts_height <= 0:
            raise ValueError("viewport width/charts_height must be > 0")

    @classmethod
    def measure(
        cls,
        width: float,
        height: float,
        *,
        aspect_ratio: float = 1.5,
        height_fraction: float = 0.5,
    ) -> "ViewportDimensions":
        return cls(
            width=float(width),
            charts_height=min(float(width) / aspect_ratio, float(height) * height_fraction),
        )


@dataclass(frozen=True, eq=False)
class ChartState:
    timeline: np.ndarray
    charts: tuple[Series, ...]
    visible_chart_ids: tuple[str, ...]
    visible_range: tuple[int, int]
    viewport: ViewportDimensions
    transition: Transition | None = None
    animation_generation: int = 0

    @property
    def is_animating(self) -> bool:
        return self.transition is not None and self.transition.progress < 1.0

    def merge(self, patch: Mapping[str, Any]) -> "ChartState":
        """Shallow-merge a reducer patch; untouched fields keep their identity."""

        if not patch:
            return self
        unknown = set(patch) - _STATE_FIELDS
        if unknown:
            raise KeyError(f"unknown state fields in patch: {', '.join(sorted(unknown))}")
        return replace(self, **patch)


_STATE_FIELDS = frozenset(f.name for f in fields(ChartState))
