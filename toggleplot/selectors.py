from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import math
from typing import Any, Callable, Generic, TypeVar

import numpy as np

from .state import ChartState, Range, Series, Transition


T = TypeVar("T")


class MemoizedSelector(Generic[T]):
    """Single-slot cache keyed on argument identity.

    Arguments are compared with `is`, never `==`; callers must replace state
    slices instead of mutating them, or the cache serves stale results.
    """

    def __init__(self, fn: Callable[..., T]) -> None:
        self._fn = fn
        self._last_args: tuple[Any, ...] | None = None
        self._last_result: T | None = None
        self.recomputations = 0
        self.__name__ = getattr(fn, "__name__", "selector")

    def __call__(self, *args: Any) -> T:
        if not self._same_args(args):
            self._last_result = self._fn(*args)
            self._last_args = args
            self.recomputations += 1
        return self._last_result  # type: ignore[return-value]

    def _same_args(self, args: tuple[Any, ...]) -> bool:
        last = self._last_args
        if last is None or len(last) != len(args):
            return False
        return all(a is b for a, b in zip(args, last))


@dataclass(frozen=True)
class LinearScaler:
    """Two-point linear map from `domain` onto `output`.

    `floor` clamps results from below. A zero-width or non-finite domain maps
    every input to the middle of the output range.
    """

    domain: Range
    output: Range
    floor: float | None = None

    @property
    def is_degenerate(self) -> bool:
        lo, hi = self.domain
        return not (math.isfinite(lo) and math.isfinite(hi)) or lo == hi

    def __call__(self, x: Any) -> Any:
        in_min, in_max = self.domain
        out_min, out_max = self.output
        if self.is_degenerate:
            mid = out_min + (out_max - out_min) / 2.0
            result = np.full(np.shape(x), mid, dtype=np.float64) if np.ndim(x) else mid
        else:
            # Weighted form keeps scale(in_min) == out_min and scale(in_max) == out_max bit-exact.
            t = (np.asarray(x, dtype=np.float64) - in_min) / (in_max - in_min)
            result = out_min * (1.0 - t) + out_max * t
            if np.ndim(result) == 0:
                result = float(result)
        if self.floor is not None:
            result = np.maximum(result, self.floor) if np.ndim(result) else max(float(result), self.floor)
        return result


def compute_boundary(series: Iterable[Series]) -> Range:
    lo = math.inf
    hi = -math.inf
    for item in series:
        if item.values.size == 0:
            continue
        lo = min(lo, float(np.min(item.values)))
        hi = max(hi, float(np.max(item.values)))
    return (lo, hi)


def resting_boundary(series: Iterable[Series]) -> Range:
    """`compute_boundary` with unit padding around a flat range.

    Animations start and end on this range, so a flat series settles on the
    midline it is drawn at once idle.
    """

    lo, hi = compute_boundary(series)
    if lo == hi:
        return (lo - 1.0, hi + 1.0)
    return (lo, hi)


def interpolate_range(initial: Range, target: Range, progress: float) -> Range:
    return (
        initial[0] + (target[0] - initial[0]) * progress,
        initial[1] + (target[1] - initial[1]) * progress,
    )


def select_visible_series(charts: tuple[Series, ...], visible_ids: tuple[str, ...]) -> tuple[Series, ...]:
    wanted = set(visible_ids)
    return tuple(series for series in charts if series.id in wanted)


def build_values_scaler(
    visible: tuple[Series, ...],
    charts_height: float,
    transition: Transition | None,
) -> LinearScaler:
    boundary = resting_boundary(visible)
    if transition is not None:
        boundary = interpolate_range(transition.initial_range, boundary, transition.progress)
    return LinearScaler(domain=boundary, output=(0.0, float(charts_height)), floor=0.0)


def build_timeline_scaler(timeline: np.ndarray, visible_range: tuple[int, int], width: float) -> LinearScaler:
    start, end = visible_range
    return LinearScaler(domain=(float(timeline[start]), float(timeline[end])), output=(0.0, float(width)))


def scale_timeline(timeline: np.ndarray, scaler: LinearScaler) -> np.ndarray:
    scaled = np.asarray(scaler(timeline), dtype=np.float64)
    scaled.flags.writeable = False
    return scaled


class ChartSelectors:
    """Per-session memoized derivations of render-time values from `ChartState`."""

    def __init__(self) -> None:
        self.visible_series = MemoizedSelector(select_visible_series)
        self.values_scaler = MemoizedSelector(build_values_scaler)
        self.timeline_scaler = MemoizedSelector(build_timeline_scaler)
        self.scaled_timeline = MemoizedSelector(scale_timeline)

    def visible_for(self, state: ChartState) -> tuple[Series, ...]:
        return self.visible_series(state.charts, state.visible_chart_ids)

    def values_scaler_for(self, state: ChartState) -> LinearScaler:
        return self.values_scaler(self.visible_for(state), state.viewport.charts_height, state.transition)

    def timeline_scaler_for(self, state: ChartState) -> LinearScaler:
        return self.timeline_scaler(state.timeline, state.visible_range, state.viewport.width)

    def scaled_timeline_for(self, state: ChartState) -> np.ndarray:
        return self.scaled_timeline(state.timeline, self.timeline_scaler_for(state))
