"""Path Morphing Module.

Components:
- outline: move + cubic outline codec and control point arena
- sampler: arc-length sampling with an injectable path measurer
- align: cyclic alignment of point sequences
- morph: t -> outline interpolation functions
- reshape: one-point reshaping of structurally close outlines
"""

from svgtween.path.align import align_by_rotation, best_rotation
from svgtween.path.morph import DEFAULT_SEGMENTS, PathMorpher, build_morph
from svgtween.path.reshape import PathReshaper, ReshapeResult
from svgtween.path.sampler import PathMeasurer, SvgPathMeasurer, resample, sample

__all__ = [
    "align_by_rotation",
    "best_rotation",
    "DEFAULT_SEGMENTS",
    "PathMorpher",
    "build_morph",
    "PathReshaper",
    "ReshapeResult",
    "PathMeasurer",
    "SvgPathMeasurer",
    "resample",
    "sample",
]
