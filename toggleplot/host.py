from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol


@dataclass(frozen=True)
class DomEvent:
    event_kind: str
    target_id: str | None
    timestamp: float = 0.0


EventListener = Callable[[DomEvent], None]


class Container(Protocol):
    """Stable host element whose content is replaced on every render."""

    @property
    def width(self) -> float:
        ...

    @property
    def height(self) -> float:
        ...

    def set_content(self, markup: str) -> None:
        ...

    def add_event_listener(self, event_kind: str, listener: EventListener) -> None:
        ...


@dataclass
class MemoryContainer:
    """Headless container that keeps the latest markup and replays events."""

    width: float
    height: float
    content: str = ""
    content_writes: int = 0
    _listeners: dict[str, list[EventListener]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("container width/height must be > 0")

    def set_content(self, markup: str) -> None:
        self.content = markup
        self.content_writes += 1

    def add_event_listener(self, event_kind: str, listener: EventListener) -> None:
        self._listeners.setdefault(event_kind, []).append(listener)

    def listener_count(self, event_kind: str | None = None) -> int:
        if event_kind is not None:
            return len(self._listeners.get(event_kind, []))
        return sum(len(items) for items in self._listeners.values())

    def emit(self, event: DomEvent) -> None:
        for listener in list(self._listeners.get(event.event_kind, [])):
            listener(event)

    def click(self, target_id: str | None, *, timestamp: float = 0.0) -> None:
        self.emit(DomEvent(event_kind="click", target_id=target_id, timestamp=timestamp))
