"""Arc-length sampling of outlines.

The path measurement itself is a host capability (`PathMeasurer`). The default
implementation measures with svgpathtools; hosts with their own geometry engine
can inject another measurer into PathMorpher.
"""
from __future__ import annotations

import bisect
import logging
from functools import lru_cache
from typing import List, Protocol, Sequence, Tuple

from svgpathtools import parse_path

from svgtween.errors import OutlineError

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class PathMeasure(Protocol):
    length: float

    def point_at(self, distance: float) -> Point:
        ...


class PathMeasurer(Protocol):
    def measure(self, d: str) -> PathMeasure:
        ...


class SvgPathMeasure:
    """Total length and point-at-length for one parsed path."""

    def __init__(self, d: str) -> None:
        try:
            path = parse_path(d)
        except Exception as exc:  # svgpathtools raises bare Exception/ValueError on bad tokens
            raise OutlineError(f"Cannot parse path data {d[:40]!r}: {exc}") from exc
        self._segments = [seg for seg in path if seg.length() > 0]
        self._start = path[0].start if len(path) else complex(0, 0)
        self._ends: List[float] = []
        total = 0.0
        for seg in self._segments:
            total += seg.length()
            self._ends.append(total)
        self.length = total

    def point_at(self, distance: float) -> Point:
        if not self._segments:
            return (self._start.real, self._start.imag)
        distance = min(max(distance, 0.0), self.length)
        index = min(bisect.bisect_left(self._ends, distance), len(self._segments) - 1)
        seg = self._segments[index]
        seg_start = self._ends[index - 1] if index else 0.0
        local = min(max(distance - seg_start, 0.0), seg.length())
        if local <= 0:
            z = seg.start
        elif local >= seg.length():
            z = seg.end
        else:
            z = seg.point(seg.ilength(local))
        return (z.real, z.imag)


@lru_cache(maxsize=256)
def _measure(d: str) -> SvgPathMeasure:
    return SvgPathMeasure(d)


class SvgPathMeasurer:
    """Default PathMeasurer backed by svgpathtools (results are cached per path string)."""

    def measure(self, d: str) -> SvgPathMeasure:
        return _measure(d)


def sample(d: str, segments: int, measurer: PathMeasurer) -> List[Point]:
    """Return segments + 1 points at equal arc-length intervals along d."""
    if segments < 1:
        raise ValueError(f"segments must be >= 1, got {segments}")
    measure = measurer.measure(d)
    length = measure.length
    if length == 0:
        logger.debug(f"Sampling zero-length outline {d[:40]!r}")
    return [measure.point_at(i / segments * length) for i in range(segments + 1)]


def resample(points: Sequence[Point], target_count: int) -> List[Point]:
    """Linearly resample a polyline to target_count points."""
    if target_count <= 0 or not points:
        return []
    if target_count == 1:
        return [tuple(points[0])]
    last = len(points) - 1
    resampled: List[Point] = []
    for i in range(target_count):
        idx = i / (target_count - 1) * last
        i0 = int(idx)
        i1 = min(last, i0 + 1)
        alpha = idx - i0
        x = points[i0][0] * (1 - alpha) + points[i1][0] * alpha
        y = points[i0][1] * (1 - alpha) + points[i1][1] * alpha
        resampled.append((x, y))
    return resampled
