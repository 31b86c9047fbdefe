"""Equalize two outlines that differ by one inserted on-curve point.

When one outline has exactly one endpoint the other lacks, the shorter outline
gets a matching point by splitting its corresponding cubic (De Casteljau), so
both outlines can be morphed number by number instead of being resampled.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from svgtween.geometry.bezier import cubic_point, split_cubic
from svgtween.path.outline import (
    COMMAND_RE,
    GROUP_SIZE,
    ControlPointArena,
    Endpoint,
    parse_numbers,
    to_cubic_outline,
)

logger = logging.getLogger(__name__)

MATCH_TOLERANCE = 0.001
DEFAULT_STEPS = 150

Point = Tuple[float, float]


@dataclass(frozen=True)
class AddedPoint:
    point: Endpoint
    insert_index: int

    @property
    def prev_index(self) -> int:
        return self.insert_index - 1

    @property
    def next_index(self) -> int:
        return self.insert_index + 1


@dataclass(frozen=True)
class ReshapeResult:
    first: str
    second: str
    reshaped: Optional[int] = None  # 0 or 1: which argument received a new point
    insert_index: Optional[int] = None
    t: Optional[float] = None

    @property
    def changed(self) -> bool:
        return self.reshaped is not None

    def as_tuple(self) -> Tuple[str, str]:
        return (self.first, self.second)


def same_endpoint(p1: Endpoint, p2: Endpoint, eps: float = MATCH_TOLERANCE) -> bool:
    return abs(p1.x - p2.x) < eps and abs(p1.y - p2.y) < eps


def find_added_point(shorter: ControlPointArena, longer: ControlPointArena) -> Optional[AddedPoint]:
    """First endpoint of `longer` with no counterpart in `shorter`."""
    for i, candidate in enumerate(longer):
        if not any(same_endpoint(p, candidate) for p in shorter):
            return AddedPoint(point=candidate, insert_index=i)
    return None


def sample_outline(d: str, steps: int = DEFAULT_STEPS) -> List[Point]:
    """Sample every cubic of an outline at `steps` uniform parameter steps."""
    points: List[Point] = []
    current = (0.0, 0.0)
    for command, body in COMMAND_RE.findall(d or ""):
        nums = parse_numbers(body)
        if command == "M":
            current = (nums[0], nums[1])
            continue
        for i in range(0, len(nums) - GROUP_SIZE + 1, GROUP_SIZE):
            x1, y1, x2, y2, x, y = nums[i:i + GROUP_SIZE]
            for k in range(steps + 1):
                points.append(cubic_point(current, (x1, y1), (x2, y2), (x, y), k / steps))
            current = (x, y)
    return points


def _closest_index(samples: Sequence[Point], target: Point, start: int = 0) -> int:
    best, best_dist = start, float("inf")
    for i in range(start, len(samples)):
        dist = (samples[i][0] - target[0]) ** 2 + (samples[i][1] - target[1]) ** 2
        if dist < best_dist:
            best, best_dist = i, dist
    return best


def relative_position(
    samples: Sequence[Point],
    added: Point,
    start: Point,
    end: Point,
    by_length: bool = True,
) -> float:
    """Normalized position of `added` along the samples between `start` and `end`.

    Indices are located by nearest sample. By default the position is the
    sampled arc length from start to added over the arc length from start to
    end; with `by_length=False` it is the plain sample index ratio.
    """
    i_start = _closest_index(samples, start)
    i_added = _closest_index(samples, added, i_start)
    i_end = _closest_index(samples, end, i_added)
    if i_end <= i_start:
        return 0.5
    if not by_length:
        return (i_added - i_start) / (i_end - i_start)
    lengths = [0.0]
    for a, b in zip(samples[i_start:i_end], samples[i_start + 1:i_end + 1]):
        lengths.append(lengths[-1] + math.dist(a, b))
    total = lengths[-1]
    if total == 0:
        return (i_added - i_start) / (i_end - i_start)
    return lengths[i_added - i_start] / total


class PathReshaper:
    """Outlines in other forms are converted to absolute move + cubic first."""

    def __init__(self, steps: int = DEFAULT_STEPS, by_length: bool = True) -> None:
        self.steps = steps
        self.by_length = by_length

    def reshape(self, path1: str, path2: str) -> Tuple[str, str]:
        return self.reshape_detailed(path1, path2).as_tuple()

    def reshape_detailed(self, path1: str, path2: str) -> ReshapeResult:
        path1, path2 = to_cubic_outline(path1), to_cubic_outline(path2)
        points1 = ControlPointArena.parse(path1)
        points2 = ControlPointArena.parse(path2)
        unchanged = ReshapeResult(path1, path2)
        if len(points1) == len(points2):
            return unchanged

        # The outline with fewer points receives the new point; the other is kept.
        reshaped_index = 0 if len(points2) > len(points1) else 1
        to_reshape, to_keep = (points1, points2) if reshaped_index == 0 else (points2, points1)
        path_to_keep = path2 if reshaped_index == 0 else path1

        diff = find_added_point(to_reshape, to_keep)
        if diff is None:
            return unchanged
        if diff.prev_index < 0 or diff.next_index >= len(to_keep) or diff.insert_index > len(to_reshape) - 1:
            logger.debug(f"Added point at index {diff.insert_index} has no neighbours on both sides")
            return unchanged

        start, end = to_keep[diff.prev_index], to_keep[diff.next_index]
        samples = sample_outline(path_to_keep, self.steps)
        t = relative_position(samples, diff.point.xy, start.xy, end.xy, self.by_length)

        seg_start = to_reshape[diff.prev_index]
        seg_end = to_reshape[diff.insert_index]
        split = split_cubic(
            seg_start.xy,
            (seg_start.cp1.x, seg_start.cp1.y),
            (seg_end.cp0.x, seg_end.cp0.y),
            seg_end.xy,
            t,
        )
        to_reshape.insert(diff.insert_index, split.point[0], split.point[1], split.incoming, split.outgoing)
        prev_point = to_reshape[diff.prev_index]
        next_point = to_reshape[diff.next_index]
        prev_point.cp1.x, prev_point.cp1.y = split.start_control
        next_point.cp0.x, next_point.cp0.y = split.end_control

        generated = to_reshape.render()
        if reshaped_index == 0:
            return ReshapeResult(generated, path_to_keep, 0, diff.insert_index, t)
        return ReshapeResult(path_to_keep, generated, 1, diff.insert_index, t)
