from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from .config import ViewerConfig
from .dataset import build_initial_state
from .effects import FrameScheduler
from .host import Container, DomEvent
from .messages import Message
from .reducer import update
from .selectors import ChartSelectors
from .state import ChartState, ViewportDimensions
from .view import SubscriptionTable, view

LOGGER = logging.getLogger(__name__)


class ChartController:
    """Sole owner and writer of a session's `ChartState`."""

    def __init__(
        self,
        container: Container,
        state: ChartState,
        *,
        scheduler: FrameScheduler,
        config: ViewerConfig | None = None,
    ) -> None:
        self._container = container
        self._state = state
        self._scheduler = scheduler
        self._config = config or ViewerConfig()
        self._selectors = ChartSelectors()
        self._subscriptions = SubscriptionTable(())
        self._patching = False
        self._started = False
        self.render_count = 0

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def selectors(self) -> ChartSelectors:
        return self._selectors

    def start(self) -> None:
        if self._started:
            raise RuntimeError("controller already started")
        self._started = True
        self._render()
        for event_kind in self._subscriptions.event_kinds:
            self._container.add_event_listener(event_kind, self.handle_event)
        LOGGER.debug("delegating event kinds: %s", ", ".join(self._subscriptions.event_kinds))

    def handle_event(self, event: DomEvent) -> None:
        message = self._subscriptions.resolve(event.event_kind, event.target_id)
        if message is None:
            LOGGER.debug("ignoring %s on unbound element %r", event.event_kind, event.target_id)
            return
        self.patch(message)

    def patch(self, message: Message) -> None:
        if self._patching:
            raise RuntimeError("patch called re-entrantly; effects must schedule, not dispatch")
        self._patching = True
        previous = self._state
        try:
            changes, effect = update(
                self._state,
                message,
                selectors=self._selectors,
                scheduler=self._scheduler,
                config=self._config,
            )
            self._state = self._state.merge(changes)
            self._render()
            if effect is not None:
                effect(self.patch)
        except Exception:
            # A failed patch leaves no half-applied transition behind.
            if self._state is not previous:
                self._state = previous
                self._render()
            raise
        finally:
            self._patching = False

    def _render(self) -> None:
        markup, subscriptions = view(self._state, self._selectors)
        self._subscriptions = SubscriptionTable(subscriptions)
        self._container.set_content(markup)
        self.render_count += 1


def init(
    container: Container,
    dataset: Mapping[str, Any],
    *,
    scheduler: FrameScheduler,
    config: ViewerConfig | None = None,
) -> ChartController:
    """Measure `container`, build state from `dataset` and wire delegated events."""

    config = config or ViewerConfig()
    viewport = ViewportDimensions.measure(
        container.width,
        container.height,
        aspect_ratio=config.aspect_ratio,
        height_fraction=config.height_fraction,
    )
    state = build_initial_state(dataset, viewport, timeline_id=config.timeline_column_id)
    controller = ChartController(container, state, scheduler=scheduler, config=config)
    controller.start()
    return controller
