"""Compiled timeline state: tween records, ghosts, snapshots and the clock."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from svgtween.animation.properties import PropertyKind
from svgtween.geometry.bezier import CubicBezierEasing
from svgtween.geometry.matrix import Matrix, TransformComponents
from svgtween.scene.element import Box, VectorElement

Anchor = Tuple[float, float]
DEFAULT_ANCHOR: Anchor = (0.5, 0.5)
_UNSET = object()


def _lerp(a: float, b: float, t: float) -> float:
    return (1 - t) * a + t * b


def interpolate(start: Any, end: Any, t: float) -> Any:
    """Linear interpolation of numbers, number sequences or numeric strings."""
    if isinstance(start, (list, tuple)) and isinstance(end, (list, tuple)):
        values = [_lerp(float(a), float(b), t) for a, b in zip(start, end)]
        return tuple(values) if isinstance(end, tuple) else values
    try:
        return _lerp(float(start), float(end), t)
    except (TypeError, ValueError):
        return end if t >= 1 else start


@dataclass
class Ghost:
    """Non-rendered shadow of a target.

    Holds the cached local bbox, the anchor and the transform components the
    element's transform is rebuilt from every frame.
    """
    bbox: Box
    anchor: Anchor = DEFAULT_ANCHOR
    components: TransformComponents = field(default_factory=TransformComponents)
    last_geometry: Dict[int, Any] = field(default_factory=dict)

    def origin(self) -> Tuple[float, float]:
        return self.bbox.point_at(*self.anchor)

    def matrix(self) -> Matrix:
        return Matrix.compose(self.components, self.origin())

    def set_component(self, prop: str, value: float) -> None:
        self.components = self.components.with_value(prop, value)

    def geometry_changed(self, key: int, value: Any) -> bool:
        """Remember `value` for record `key`; True when it differs from last time."""
        changed = self.last_geometry.get(key, _UNSET) != value
        self.last_geometry[key] = value
        return changed


@dataclass(frozen=True)
class Snapshot:
    """Pre-animation transform and attributes of a target."""
    transform: Matrix
    attrs: Tuple[Tuple[str, str], ...]

    @classmethod
    def capture(cls, el: VectorElement) -> "Snapshot":
        return cls(transform=el.transform(), attrs=tuple(el.attrs().items()))

    def restore(self, el: VectorElement) -> None:
        el.replace_attrs(dict(self.attrs))
        el.set_transform(self.transform)


@dataclass
class TweenRecord:
    target: VectorElement
    targets: str
    prop: str
    kind: PropertyKind
    start: Any
    end: Any
    easing: CubicBezierEasing
    delay: float
    duration: float
    ghost: Ghost
    step_index: int = 0
    staggered: bool = False
    interpolator: Optional[Callable[[float], Any]] = None
    is_color: bool = False
    followed_path: Optional[VectorElement] = None
    centered: bool = False
    rotated: bool = False
    dash_length: Optional[float] = None
    gradient_kind: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def chain_head(self) -> bool:
        return self.step_index == 0

    def effective_delay(self, full_reset: bool = False) -> float:
        """Delay for one render pass; a full reset zeroes staggered delays."""
        return 0.0 if full_reset and self.staggered else self.delay

    def local_progress(self, elapsed: float, full_reset: bool = False) -> float:
        delay = self.effective_delay(full_reset)
        return max(0.0, min(1.0, (elapsed - delay) / (self.duration or 1)))

    def value_at(self, progress: float) -> Any:
        eased = self.easing(progress)
        if self.interpolator is not None:
            return self.interpolator(eased)
        return interpolate(self.start, self.end, eased)


@dataclass
class AnimationItem:
    """Everything one `add` call compiled for one target."""
    target: VectorElement
    targets: str
    ghost: Ghost
    snapshot: Snapshot
    tweens: Dict[str, List[TweenRecord]] = field(default_factory=dict)

    def records(self) -> List[TweenRecord]:
        return [tw for steps in self.tweens.values() for tw in steps]


@dataclass
class CompileIssue:
    targets: str
    prop: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.targets} {self.prop}: {self.error}"


@dataclass
class TimelineClock:
    elapsed: float = 0.0
    direction: int = 1
    speed: float = 1.0
    loop: bool = False
    completed: bool = False
    playing: bool = False
    progress: float = 0.0
