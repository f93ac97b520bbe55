from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union
import xml.etree.ElementTree as ET

import numpy as np

from .messages import Message, ToggleChart
from .selectors import ChartSelectors, LinearScaler
from .state import ChartState, Series


CLICK = "click"


@dataclass(frozen=True)
class Subscription:
    element_id: str
    event_kind: str
    message: Message


Fragment = tuple[ET.Element, tuple[Subscription, ...]]


class ViewBuilder:
    """Collects subscriptions from nested fragments while markup is assembled."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def unwrap(self, fragment: Union[Fragment, ET.Element]) -> ET.Element:
        if isinstance(fragment, ET.Element):
            return fragment
        element, subscriptions = fragment
        self._subscriptions.extend(subscriptions)
        return element

    def wrap(self, element: ET.Element, subscriptions: Iterable[Subscription] = ()) -> Fragment:
        return element, tuple(self._subscriptions) + tuple(subscriptions)


class SubscriptionTable:
    """Lookup of messages by `(event_kind, element_id)`."""

    def __init__(self, subscriptions: Iterable[Subscription]) -> None:
        self._by_key: dict[tuple[str, str], Message] = {}
        for sub in subscriptions:
            key = (sub.event_kind, sub.element_id)
            if key in self._by_key:
                raise ValueError(f"duplicate subscription for {sub.event_kind} on `{sub.element_id}`")
            self._by_key[key] = sub.message

    def __len__(self) -> int:
        return len(self._by_key)

    @property
    def event_kinds(self) -> tuple[str, ...]:
        return tuple(sorted({kind for kind, _ in self._by_key}))

    def resolve(self, event_kind: str, element_id: str | None) -> Message | None:
        if element_id is None:
            return None
        return self._by_key.get((event_kind, element_id))


def polyline_id(series_id: str) -> str:
    return f"chart-{series_id}"


def button_id(series_id: str) -> str:
    return f"{series_id}-button"


def view(state: ChartState, selectors: ChartSelectors) -> tuple[str, tuple[Subscription, ...]]:
    builder = ViewBuilder()
    root = ET.Element("div", {"class": "toggleplot"})
    root.append(builder.unwrap(view_charts(state, selectors)))
    root.append(builder.unwrap(view_buttons(state)))
    element, subscriptions = builder.wrap(root)
    return ET.tostring(element, encoding="unicode", short_empty_elements=False), subscriptions


def view_charts(state: ChartState, selectors: ChartSelectors) -> ET.Element:
    width = state.viewport.width
    height = state.viewport.charts_height
    panel = ET.Element("div", {"class": "charts"})
    svg = ET.SubElement(
        panel,
        "svg",
        {
            "width": _fmt(width),
            "height": _fmt(height),
            # Origin moved to the bottom-left so plotted y values grow upward.
            "viewBox": f"0 {_fmt(-height)} {_fmt(width)} {_fmt(height)}",
        },
    )
    timeline = selectors.scaled_timeline_for(state)
    scaler = selectors.values_scaler_for(state)
    for series in selectors.visible_for(state):
        svg.append(view_polyline(series, timeline, scaler))
    return panel


def view_polyline(series: Series, timeline: np.ndarray, scaler: LinearScaler) -> ET.Element:
    ys = scaler(series.values)
    points = " ".join(f"{_fmt(x)},{_fmt(-y)}" for x, y in zip(timeline.tolist(), np.asarray(ys).tolist()))
    return ET.Element(
        "polyline",
        {
            "id": polyline_id(series.id),
            "points": points,
            "fill": "none",
            "stroke": series.color,
        },
    )


def view_buttons(state: ChartState) -> Fragment:
    builder = ViewBuilder()
    panel = ET.Element("div", {"class": "buttons"})
    visible = set(state.visible_chart_ids)
    subscriptions: list[Subscription] = []
    for series in state.charts:
        element_id = button_id(series.id)
        button = ET.SubElement(
            panel,
            "button",
            {
                "id": element_id,
                "aria-pressed": "true" if series.id in visible else "false",
                "style": f"border-color: {series.color}",
            },
        )
        button.text = series.name
        subscriptions.append(Subscription(element_id, CLICK, ToggleChart(series.id)))
    return builder.wrap(panel, subscriptions)


def _fmt(value: float) -> str:
    out = f"{float(value):.3f}".rstrip("0").rstrip(".")
    if out in ("-0", ""):
        out = "0"
    return out
