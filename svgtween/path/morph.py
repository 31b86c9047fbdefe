"""Build interpolation functions between two outlines."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from svgtween.path.align import align_by_rotation, best_rotation
from svgtween.path.outline import (
    GROUP_SIZE,
    cubic_count,
    cubic_endpoints,
    parse_numbers,
    render_numbers,
    render_points,
    subpath_count,
    to_cubic_outline,
)
from svgtween.path.sampler import PathMeasurer, SvgPathMeasurer, resample, sample

logger = logging.getLogger(__name__)

DEFAULT_SEGMENTS = 220

MorphFunction = Callable[[float], str]


def _lerp(a: float, b: float, t: float) -> float:
    return (1 - t) * a + t * b


class PathMorpher:
    """Produces `t -> outline` functions for pairs of outlines.

    Both outlines are first brought to absolute move + cubic form. Single
    subpaths with the same number of cubics are interpolated number by number
    after a cyclic realignment of the destination's cubic groups. Anything
    else is sampled at equal arc-length steps, aligned and rebuilt as a smooth
    cubic chain, which approximates both ends.
    """

    def __init__(self, measurer: Optional[PathMeasurer] = None, segments: int = DEFAULT_SEGMENTS) -> None:
        self.measurer = measurer or SvgPathMeasurer()
        self.segments = segments

    def build_morph(self, d1: str, d2: str, segments: Optional[int] = None) -> MorphFunction:
        d1 = to_cubic_outline(d1)
        d2 = to_cubic_outline(d2)
        count1 = cubic_count(d1)
        count2 = cubic_count(d2)
        single = subpath_count(d1) == 1 and subpath_count(d2) == 1
        if single and count1 == count2 and count1 > 0:
            return self._structural_morph(d1, d2, count1)
        logger.debug(f"Resampling morph ({count1} vs {count2} cubics)")
        return self._resampled_morph(d1, d2, segments or self.segments)

    def _structural_morph(self, d1: str, d2: str, count: int) -> MorphFunction:
        nums1 = parse_numbers(d1)
        nums2 = parse_numbers(d2)

        shift = best_rotation(cubic_endpoints(nums1), cubic_endpoints(nums2))

        # Move point stays; cubic groups are rotated by the endpoint shift.
        shifted = nums2[:2]
        for i in range(count):
            base = 2 + ((i + shift) % count) * GROUP_SIZE
            shifted.extend(nums2[base:base + GROUP_SIZE])

        def morph(t: float) -> str:
            return render_numbers([_lerp(a, b, t) for a, b in zip(nums1, shifted)])

        return morph

    def _resampled_morph(self, d1: str, d2: str, segments: int) -> MorphFunction:
        pts1 = sample(d1, segments, self.measurer)
        pts2 = sample(d2, segments, self.measurer)
        if len(pts2) != len(pts1):
            pts2 = resample(pts2, len(pts1))
        pts2 = align_by_rotation(pts1, pts2)

        def morph(t: float) -> str:
            points: List = [
                (_lerp(p[0], q[0], t), _lerp(p[1], q[1], t))
                for p, q in zip(pts1, pts2)
            ]
            return render_points(points)

        return morph


_default_morpher: Optional[PathMorpher] = None


def build_morph(d1: str, d2: str, segments: int = DEFAULT_SEGMENTS) -> MorphFunction:
    """Module-level shortcut using a shared svgpathtools-backed morpher."""
    global _default_morpher
    if _default_morpher is None:
        _default_morpher = PathMorpher()
    return _default_morpher.build_morph(d1, d2, segments=segments)
