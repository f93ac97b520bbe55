from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ToggleChart:
    chart_id: str


@dataclass(frozen=True)
class AnimationStep:
    """One frame of a rescale animation; `start` stays pinned to the first frame."""

    start: float
    time: float
    generation: int


Message = Union[ToggleChart, AnimationStep]
