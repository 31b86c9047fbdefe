"""Cubic Bezier evaluation, De Casteljau splitting and cubic-bezier easing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

Point = Tuple[float, float]

_NEWTON_ITERATIONS = 8
_BISECTION_ITERATIONS = 40
_EPSILON = 1e-7


def cubic(p0: float, p1: float, p2: float, p3: float, t: float) -> float:
    """Evaluate the cubic Bernstein polynomial at t (extrapolates outside [0, 1])."""
    mt = 1 - t
    return mt * mt * mt * p0 + 3 * mt * mt * t * p1 + 3 * mt * t * t * p2 + t * t * t * p3


def cubic_point(start: Point, c1: Point, c2: Point, end: Point, t: float) -> Point:
    return (
        cubic(start[0], c1[0], c2[0], end[0], t),
        cubic(start[1], c1[1], c2[1], end[1], t),
    )


def _lerp_point(a: Point, b: Point, t: float) -> Point:
    return ((1 - t) * a[0] + t * b[0], (1 - t) * a[1] + t * b[1])


@dataclass(frozen=True)
class CubicSplit:
    """Result of splitting a cubic segment at t.

    `point` is the new on-curve point, `incoming`/`outgoing` its control
    points, `start_control` the replacement outgoing control of the segment
    start and `end_control` the replacement incoming control of the segment end.
    """
    point: Point
    incoming: Point
    outgoing: Point
    start_control: Point
    end_control: Point


def split_cubic(start: Point, c1: Point, c2: Point, end: Point, t: float = 0.5) -> CubicSplit:
    """De Casteljau subdivision of one cubic segment."""
    b0 = _lerp_point(start, c1, t)
    b1 = _lerp_point(c1, c2, t)
    b2 = _lerp_point(c2, end, t)
    b01 = _lerp_point(b0, b1, t)
    b12 = _lerp_point(b1, b2, t)
    b012 = _lerp_point(b01, b12, t)
    return CubicSplit(point=b012, incoming=b01, outgoing=b12, start_control=b0, end_control=b2)


class CubicBezierEasing:
    """CSS-style cubic-bezier timing curve through (0,0), (x1,y1), (x2,y2), (1,1)."""

    def __init__(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.x1 = float(x1)
        self.y1 = float(y1)
        self.x2 = float(x2)
        self.y2 = float(y2)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "CubicBezierEasing":
        if len(values) != 4:
            raise ValueError(f"Easing curve needs 4 numbers, got {len(values)}")
        return cls(*values)

    @property
    def is_linear(self) -> bool:
        return self.x1 == self.y1 and self.x2 == self.y2

    def __repr__(self) -> str:
        return f"CubicBezierEasing({self.x1}, {self.y1}, {self.x2}, {self.y2})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubicBezierEasing):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (other.x1, other.y1, other.x2, other.y2)

    def __hash__(self) -> int:
        return hash((self.x1, self.y1, self.x2, self.y2))

    def _x_derivative(self, s: float) -> float:
        ms = 1 - s
        return 3 * ms * ms * self.x1 + 6 * ms * s * (self.x2 - self.x1) + 3 * s * s * (1 - self.x2)

    def _solve_parameter(self, x: float) -> float:
        s = x
        for _ in range(_NEWTON_ITERATIONS):
            err = cubic(0.0, self.x1, self.x2, 1.0, s) - x
            if abs(err) < _EPSILON:
                return s
            slope = self._x_derivative(s)
            if abs(slope) < 1e-6:
                break
            s -= err / slope
        lo, hi = 0.0, 1.0
        s = x
        for _ in range(_BISECTION_ITERATIONS):
            value = cubic(0.0, self.x1, self.x2, 1.0, s)
            if abs(value - x) < _EPSILON:
                break
            if value < x:
                lo = s
            else:
                hi = s
            s = (lo + hi) / 2
        return s

    def __call__(self, x: float) -> float:
        if x < 0:
            if self.x1 > 0:
                return self.y1 / self.x1 * x
            if self.x2 > 0:
                return self.y2 / self.x2 * x
            return 0.0
        if x > 1:
            if self.x2 < 1:
                return (1 - self.y2) / (1 - self.x2) * x + (self.y2 - self.x2) / (1 - self.x2)
            if self.x1 < 1:
                return (1 - self.y1) / (1 - self.x1) * x + (self.y1 - self.x1) / (1 - self.x1)
            return 1.0
        if x == 0 or x == 1 or self.is_linear:
            return float(x)
        s = self._solve_parameter(x)
        return cubic(0.0, self.y1, self.y2, 1.0, s)
