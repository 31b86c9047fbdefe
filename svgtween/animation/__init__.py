"""Animation Timeline Module.

Components:
- schema: declarative animation specs and timeline configuration
- properties: property kinds and the canonical property order
- easing: named cubic-bezier curves
- colors: solid color and gradient normalization
- compiler: spec -> tween records, one item per target
- renderer: writes interpolated values into the scene
- scheduler: frame schedulers (manual and blocking)
- timeline: play / pause / reverse / seek control
"""

from svgtween.animation.compiler import TweenCompiler, stagger_delay

from svgtween.animation.easing import EASINGS, resolve_easing

from svgtween.animation.records import (
    AnimationItem,
    CompileIssue,
    Ghost,
    Snapshot,
    TimelineClock,
    TweenRecord,
)

from svgtween.animation.renderer import FrameRenderer

from svgtween.animation.scheduler import (
    BlockingFrameScheduler,
    FrameScheduler,
    ManualFrameScheduler,
)

from svgtween.animation.schema import AnimationSpec, AnimationStep, TimelineConfig

from svgtween.animation.timeline import Timeline

__all__ = [
    "TweenCompiler",
    "stagger_delay",
    "EASINGS",
    "resolve_easing",
    "AnimationItem",
    "CompileIssue",
    "Ghost",
    "Snapshot",
    "TimelineClock",
    "TweenRecord",
    "FrameRenderer",
    "BlockingFrameScheduler",
    "FrameScheduler",
    "ManualFrameScheduler",
    "AnimationSpec",
    "AnimationStep",
    "TimelineConfig",
    "Timeline",
]
