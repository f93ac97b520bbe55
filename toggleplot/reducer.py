from __future__ import annotations

import logging
from typing import Any

from .config import ViewerConfig
from .effects import Effect, FrameScheduler, next_frame
from .errors import UnknownMessageError
from .messages import AnimationStep, Message, ToggleChart
from .selectors import ChartSelectors, resting_boundary
from .state import ChartState, Transition

LOGGER = logging.getLogger(__name__)

StatePatch = dict[str, Any]


def update(
    state: ChartState,
    message: Message,
    *,
    selectors: ChartSelectors,
    scheduler: FrameScheduler,
    config: ViewerConfig,
) -> tuple[StatePatch, Effect | None]:
    """Apply one message; returns the changed fields and an optional follow-up effect."""

    if isinstance(message, ToggleChart):
        return _toggle_chart(state, message, selectors=selectors, scheduler=scheduler)
    if isinstance(message, AnimationStep):
        return _animation_step(state, message, scheduler=scheduler, config=config)
    raise UnknownMessageError(message)


def _toggle_chart(
    state: ChartState,
    message: ToggleChart,
    *,
    selectors: ChartSelectors,
    scheduler: FrameScheduler,
) -> tuple[StatePatch, Effect | None]:
    if all(series.id != message.chart_id for series in state.charts):
        raise ValueError(f"unknown chart id: {message.chart_id}")
    current = state.visible_chart_ids
    if message.chart_id in current:
        next_visible = tuple(chart_id for chart_id in current if chart_id != message.chart_id)
    else:
        next_visible = current + (message.chart_id,)

    generation = state.animation_generation + 1
    should_animate = len(next_visible) != 0 and len(current) != 0
    transition = None
    effect = None
    if should_animate:
        transition = Transition(
            progress=0.0,
            initial_range=resting_boundary(selectors.visible_for(state)),
            generation=generation,
        )
        effect = next_frame(
            scheduler,
            lambda t: AnimationStep(start=t, time=t, generation=generation),
        )
    LOGGER.debug("toggle %s -> visible=%s animate=%s", message.chart_id, next_visible, should_animate)
    patch: StatePatch = {
        "visible_chart_ids": next_visible,
        "transition": transition,
        "animation_generation": generation,
    }
    return patch, effect


def _animation_step(
    state: ChartState,
    message: AnimationStep,
    *,
    scheduler: FrameScheduler,
    config: ViewerConfig,
) -> tuple[StatePatch, Effect | None]:
    transition = state.transition
    if transition is None or transition.generation != message.generation:
        LOGGER.debug("dropping stale animation step for generation %d", message.generation)
        return {}, None

    elapsed = (message.time - message.start) / config.animation_duration_ms
    progress = max(transition.progress, min(1.0, max(0.0, elapsed)))
    if progress >= 1.0:
        return {"transition": None}, None

    start = message.start
    generation = message.generation
    effect = next_frame(
        scheduler,
        lambda t: AnimationStep(start=start, time=t, generation=generation),
    )
    next_transition = Transition(
        progress=progress,
        initial_range=transition.initial_range,
        generation=generation,
    )
    return {"transition": next_transition}, effect
