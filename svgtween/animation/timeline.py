"""Timeline: owns compiled items and drives rendering through a frame scheduler."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from svgtween.animation.compiler import TweenCompiler
from svgtween.animation.records import AnimationItem, CompileIssue, TimelineClock, TweenRecord
from svgtween.animation.renderer import FrameRenderer
from svgtween.animation.scheduler import FrameScheduler, ManualFrameScheduler
from svgtween.animation.schema import AnimationSpec, TimelineConfig
from svgtween.scene.element import Scene

logger = logging.getLogger(__name__)


class Timeline:
    """Play, pause, reverse and seek a set of compiled animations.

    Usage:
        tl = Timeline(scene, loop=True)
        tl.add({"targets": "#dot", "translateX": [{"value": 100, "duration": 500}]})
        tl.seek(50)
    """

    def __init__(
        self,
        scene: Scene,
        config: Optional[TimelineConfig] = None,
        scheduler: Optional[FrameScheduler] = None,
        **options: Any,
    ) -> None:
        if config is None:
            config = TimelineConfig(**options)
        elif options:
            config = TimelineConfig(**{**config.model_dump(), **options})
        self.scene = scene
        self.config = config
        self.scheduler = scheduler or ManualFrameScheduler()
        self.compiler = TweenCompiler(scene, config)
        self.renderer = FrameRenderer(scene, config)
        self.items: List[AnimationItem] = []
        self.records: List[TweenRecord] = []
        self._clock = TimelineClock(speed=config.speed, loop=config.loop)
        self._max_duration = 0.0
        self._issues: List[CompileIssue] = []
        self._frame_handle: Optional[int] = None
        self._startup_handle: Optional[int] = None
        self._full_reset = False

    # -- read-only state ----------------------------------------------------

    @property
    def clock(self) -> TimelineClock:
        return self._clock

    @property
    def max_duration(self) -> float:
        return self._max_duration

    @property
    def progress(self) -> float:
        return self._clock.progress

    @property
    def is_playing(self) -> bool:
        return self._clock.playing

    @property
    def is_completed(self) -> bool:
        return self._clock.completed

    @property
    def compile_issues(self) -> Tuple[CompileIssue, ...]:
        return tuple(self._issues)

    # -- building -----------------------------------------------------------

    def add(self, spec: Union[AnimationSpec, Dict[str, Any]]) -> "Timeline":
        if not isinstance(spec, AnimationSpec):
            spec = AnimationSpec.model_validate(spec)
        items, issues = self.compiler.compile(spec)
        self.items.extend(items)
        self._issues.extend(issues)
        self._compile_timeline()
        logger.debug(f"Added {len(items)} item(s) for {spec.targets!r}; duration {self._max_duration:.0f} ms")
        if self.config.autoplay:
            self.play()
        return self

    def remove(self, targets: str) -> "Timeline":
        """Restore and drop every item added with exactly this selector."""
        for item in self.items:
            if item.targets == targets:
                item.snapshot.restore(item.target)
        self.items = [item for item in self.items if item.targets != targets]
        self._issues = [issue for issue in self._issues if issue.targets != targets]
        self._compile_timeline()
        return self

    def _compile_timeline(self) -> None:
        self.records = [record for item in self.items for record in item.records()]
        computed = max((r.delay + r.duration for r in self.records), default=0.0)
        self._max_duration = float(self.config.duration or computed)
        self.renderer.load(self.records)

    # -- playback -----------------------------------------------------------

    def play(self, direction: int = 1, restart: bool = False, reversing: bool = False) -> None:
        self.pause()
        if restart or (self._clock.completed and not reversing):
            self._reset()
        self._startup_handle = self.scheduler.call_later(
            self.config.startup_delay_ms, lambda: self._start(direction, reversing)
        )

    def pause(self) -> None:
        self._clock.playing = False
        if self._frame_handle is not None:
            self.scheduler.cancel(self._frame_handle)
            self._frame_handle = None
        if self._startup_handle is not None:
            self.scheduler.cancel(self._startup_handle)
            self._startup_handle = None

    def reverse(self) -> None:
        self.play(-1, False, True)

    def restart(self) -> None:
        self.play(1, True)

    def seek(self, percent: float) -> None:
        self.pause()
        self.renderer.clean_dirty()
        self._clock.progress = percent
        self._clock.elapsed = percent / 100 * self._max_duration
        self._render(self._clock.elapsed)

    def time(self, ms: float) -> None:
        self.seek(ms / self._max_duration * 100 if self._max_duration else 0.0)

    def _reset(self, percent: float = 0.0) -> None:
        self._full_reset = True
        try:
            self.seek(percent)
        finally:
            self._full_reset = False

    def _render(self, elapsed: float) -> None:
        self.renderer.render(elapsed, playing=self._clock.playing, full_reset=self._full_reset)

    def _set_progress(self, elapsed: float) -> None:
        self._clock.elapsed = elapsed
        self._clock.progress = elapsed / self._max_duration * 100 if self._max_duration else 0.0

    def _start(self, direction: int, reversing: bool) -> None:
        self._startup_handle = None
        self.renderer.clean_dirty()
        clock = self._clock
        clock.playing = True
        clock.completed = False
        clock.direction = direction
        if direction == 1 and clock.elapsed >= self._max_duration:
            clock.elapsed = 0.0
        if direction == -1 and clock.elapsed <= 0:
            clock.elapsed = self._max_duration

        state = {"initial": clock.elapsed, "origin": None}

        def tick(now: float) -> None:
            if state["origin"] is None:
                state["origin"] = now
            delta = (now - state["origin"]) * clock.speed
            elapsed = state["initial"] + delta if direction == 1 else state["initial"] - delta

            if elapsed > self._max_duration or elapsed < 0:
                if clock.loop and self._max_duration > 0:
                    elapsed %= self._max_duration
                    state["initial"], state["origin"] = elapsed, now
                else:
                    self._finish(elapsed, reversing)
                    return

            self._set_progress(elapsed)
            self._render(elapsed)
            if self.config.on_update:
                self.config.on_update()
            self._frame_handle = self.scheduler.request_frame(tick)

        self._frame_handle = self.scheduler.request_frame(tick)

    def _finish(self, elapsed: float, reversing: bool) -> None:
        end = self._max_duration if elapsed > self._max_duration else 0.0
        self._set_progress(end)
        self._render(end)
        if self.config.on_complete:
            self.config.on_complete()
        self.pause()
        if end == self._max_duration:
            self._clock.completed = True
        if reversing and end == 0:
            self._reset()
