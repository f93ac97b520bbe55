from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import logging
from typing import Callable, Protocol

from .messages import Message

LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]
Dispatch = Callable[[Message], None]
Effect = Callable[[Dispatch], None]


class FrameScheduler(Protocol):
    """Host frame primitive: run `callback(timestamp_ms)` once, on a later frame."""

    def request_frame(self, callback: FrameCallback) -> None:
        ...


def next_frame(scheduler: FrameScheduler, build_message: Callable[[float], Message]) -> Effect:
    """Effect that registers exactly one frame callback and returns immediately.

    The callback dispatches `build_message(timestamp)`; nothing is dispatched
    synchronously from inside the effect itself.
    """

    def effect(dispatch: Dispatch) -> None:
        scheduler.request_frame(lambda timestamp: dispatch(build_message(timestamp)))

    return effect


@dataclass
class FrameQueue:
    """Deterministic frame scheduler for headless sessions.

    Callbacks requested while a frame is running are deferred to the next frame,
    matching how browsers service animation-frame requests.
    """

    _pending: deque[FrameCallback] = field(default_factory=deque)
    frames_run: int = 0

    def request_frame(self, callback: FrameCallback) -> None:
        self._pending.append(callback)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self, now: float) -> int:
        batch = list(self._pending)
        self._pending.clear()
        for callback in batch:
            callback(now)
        self.frames_run += 1
        return len(batch)

    def run_until_idle(self, start: float, *, fps: int = 60, max_frames: int = 600) -> float:
        """Advance frames at `fps` until nothing is pending; returns the last timestamp."""

        if fps <= 0:
            raise ValueError("fps must be > 0")
        if max_frames <= 0:
            raise ValueError("max_frames must be > 0")
        dt = 1000.0 / float(fps)
        now = float(start)
        frames = 0
        while self._pending:
            if frames >= max_frames:
                raise RuntimeError(f"frame queue still busy after {max_frames} frames")
            self.run_frame(now)
            frames += 1
            now += dt
        LOGGER.debug("frame queue idle after %d frames", frames)
        return now - dt if frames else now
