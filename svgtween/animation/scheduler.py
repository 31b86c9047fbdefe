"""Frame schedulers the timeline runs on.

The timeline never sleeps or reads a clock itself; it asks a scheduler for the
next frame callback and for the current time in milliseconds.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Protocol, Set, Tuple

from svgtween.utils.config import settings

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):
    def now(self) -> float: ...

    def request_frame(self, callback: FrameCallback) -> int: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int: ...

    def cancel(self, handle: int) -> None: ...


class _QueueScheduler:
    """Shared queue bookkeeping: frame callbacks plus timed callbacks on a heap.

    A handle stays in `_live` until its callback runs or is dropped, and only
    live handles can be cancelled.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._frames: List[Tuple[int, FrameCallback]] = []
        self._timers: List[Tuple[float, int, Callable[[], None]]] = []
        self._live: Set[int] = set()
        self._cancelled: Set[int] = set()

    def now(self) -> float:
        raise NotImplementedError

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._frames.append((handle, callback))
        self._live.add(handle)
        return handle

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        heapq.heappush(self._timers, (self.now() + max(0.0, delay_ms), handle, callback))
        self._live.add(handle)
        return handle

    def cancel(self, handle: int) -> None:
        if handle in self._live:
            self._live.discard(handle)
            self._cancelled.add(handle)

    @property
    def pending(self) -> bool:
        return bool(self._live)

    def _release(self, handle: int) -> bool:
        """Forget a popped handle; True when it was cancelled."""
        self._live.discard(handle)
        if handle in self._cancelled:
            self._cancelled.discard(handle)
            return True
        return False

    def _next_timer_at(self) -> Optional[float]:
        while self._timers and self._timers[0][1] in self._cancelled:
            _, handle, _ = heapq.heappop(self._timers)
            self._release(handle)
        return self._timers[0][0] if self._timers else None

    def _run_due_timers(self) -> None:
        while True:
            due = self._next_timer_at()
            if due is None or due > self.now():
                return
            _, handle, callback = heapq.heappop(self._timers)
            self._release(handle)
            callback()

    def _run_frames(self) -> None:
        frames, self._frames = self._frames, []
        timestamp = self.now()
        for handle, callback in frames:
            if self._release(handle):
                continue
            callback(timestamp)


class ManualFrameScheduler(_QueueScheduler):
    """Virtual clock advanced explicitly; used by tests and offline rendering."""

    def __init__(self, start: float = 0.0, frame_interval_ms: Optional[float] = None) -> None:
        super().__init__()
        self._now = start
        self.frame_interval_ms = frame_interval_ms or settings.frame_interval_ms

    def now(self) -> float:
        return self._now

    def tick(self) -> None:
        """Run due timers, then every frame callback requested so far."""
        self._run_due_timers()
        self._run_frames()

    def advance(self, ms: float) -> None:
        """Move the clock forward `ms`, firing a frame every frame interval."""
        target = self._now + ms
        while self._now < target:
            self._now = min(target, self._now + self.frame_interval_ms)
            self.tick()


class BlockingFrameScheduler(_QueueScheduler):
    """Runs queued callbacks against the wall clock until nothing is left."""

    def __init__(self, frame_interval_ms: Optional[float] = None) -> None:
        super().__init__()
        self.frame_interval_ms = frame_interval_ms or settings.frame_interval_ms

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def run(self, max_ms: Optional[float] = None) -> None:
        started = self.now()
        while self.pending:
            if max_ms is not None and self.now() - started >= max_ms:
                logger.info(f"Stopping frame loop after {max_ms:.0f} ms")
                return
            self._run_due_timers()
            self._run_frames()
            time.sleep(self.frame_interval_ms / 1000.0)
