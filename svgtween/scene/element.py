"""Capability interface the engine expects from a vector scene."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from svgtween.geometry.matrix import Matrix

Point = Tuple[float, float]
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class Box:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def cx(self) -> float:
        return self.x + self.width / 2

    @property
    def cy(self) -> float:
        return self.y + self.height / 2

    def point_at(self, fx: float, fy: float) -> Point:
        """Absolute point for fractional box coordinates (anchor)."""
        return (self.x + self.width * fx, self.y + self.height * fy)


@dataclass(frozen=True)
class GradientStop:
    color: str
    offset: float  # percent, 0..100


@dataclass(frozen=True)
class GradientHandle:
    gradient_id: str
    kind: str  # linear | radial

    @property
    def paint(self) -> str:
        return f"url(#{self.gradient_id})"


Paint = Union[str, GradientHandle]


@runtime_checkable
class VectorElement(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def type(self) -> str: ...

    def bbox(self) -> Box: ...

    def transform(self) -> Matrix: ...

    def set_transform(self, matrix: Matrix) -> None: ...

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]: ...

    def set_attr(self, name: str, value: object) -> None: ...

    def attrs(self) -> Dict[str, str]: ...

    def replace_attrs(self, attrs: Dict[str, str]) -> None: ...

    def clone(self, deep: bool = True) -> "VectorElement": ...

    def native_total_length(self) -> Optional[float]: ...

    def point_at_length(self, length: float) -> Point: ...

    def set_size(self, width: float, height: float) -> None: ...

    def set_font_size(self, size: float) -> None: ...

    def set_paint(self, channel: str, paint: Paint) -> None: ...

    def center(self, cx: float, cy: float) -> None: ...

    def find_one(self, selector: str) -> Optional["VectorElement"]: ...


class Scene(Protocol):
    def find(self, selector: str) -> List[VectorElement]: ...

    def contains(self, element: VectorElement) -> bool: ...

    def gradient(self, kind: str, gradient_id: str, stops: Sequence[GradientStop], angle: float) -> GradientHandle: ...


def _num(el: VectorElement, name: str) -> float:
    raw = el.attr(name)
    if raw is None:
        return 0.0
    match = NUMBER_RE.search(str(raw))
    return float(match.group(0)) if match else 0.0


def parse_points(raw: Optional[str]) -> List[Point]:
    nums = [float(n) for n in NUMBER_RE.findall(raw or "")]
    return list(zip(nums[0::2], nums[1::2]))


def polyline_length(points: Sequence[Point], closed: bool = False) -> float:
    total = sum(math.dist(a, b) for a, b in zip(points, points[1:]))
    if closed and len(points) > 1:
        total += math.dist(points[-1], points[0])
    return total


def total_length(el: VectorElement) -> float:
    """Native path length, with closed forms for basic shapes."""
    native = el.native_total_length()
    if native is not None:
        return native
    kind = el.type
    if kind == "circle":
        return math.pi * 2 * _num(el, "r")
    if kind == "rect":
        return _num(el, "width") * 2 + _num(el, "height") * 2
    if kind == "line":
        return math.dist((_num(el, "x1"), _num(el, "y1")), (_num(el, "x2"), _num(el, "y2")))
    if kind == "polyline":
        return polyline_length(parse_points(el.attr("points")))
    if kind == "polygon":
        return polyline_length(parse_points(el.attr("points")), closed=True)
    return 0.0
