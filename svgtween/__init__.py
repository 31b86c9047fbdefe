"""svgtween: SVG path morphing and tween timelines."""

from svgtween.animation import AnimationSpec, Timeline, TimelineConfig
from svgtween.path import PathMorpher, PathReshaper, build_morph
from svgtween.scene import SvgScene

__version__ = "0.1.0"

__all__ = [
    "AnimationSpec",
    "Timeline",
    "TimelineConfig",
    "PathMorpher",
    "PathReshaper",
    "build_morph",
    "SvgScene",
]
