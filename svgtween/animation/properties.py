"""Property kinds and the static property tables."""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Tuple


class PropertyKind(str, Enum):
    """How a property is compiled and rendered; resolved once per tween."""
    TRANSFORM = "transform"
    COLOR = "color"
    MORPH_TO = "morph_to"
    PATH_DATA = "path_data"
    FOLLOW_PATH = "follow_path"
    SIZE = "size"
    STROKE = "stroke"
    EFFECT = "effect"
    ATTRIBUTE = "attribute"


# Transform/anchor first so the Ghost is settled before size/stroke/path read it.
CANONICAL_ORDER: Tuple[str, ...] = (
    "translateX",
    "translateY",
    "anchor",
    "scaleX",
    "scaleY",
    "rotate",
    "width",
    "height",
    "strokeDashoffset",
)

TRANSFORM_PROPERTIES = frozenset({"translateX", "translateY", "scaleX", "scaleY", "rotate", "anchor"})
SCALE_PROPERTIES = frozenset({"scaleX", "scaleY"})
SIZE_PROPERTIES = frozenset({"width", "height"})
COLOR_PROPERTIES = frozenset({"fill", "stroke"})
EFFECT_PROPERTIES = frozenset({"effectX", "effectY", "effectBlur", "effectColor"})

STROKE_ATTRIBUTES: Mapping[str, str] = MappingProxyType({
    "strokeWidth": "stroke-width",
    "strokeDasharray": "stroke-dasharray",
    "strokeDashoffset": "stroke-dashoffset",
})

# Writes that change the element's own geometry (and so its bounding box).
GEOMETRY_ALTERING_PROPERTIES = frozenset({"d", "morphTo", "points", "width", "height"})

_PATH_KINDS: Mapping[str, PropertyKind] = MappingProxyType({
    "morphTo": PropertyKind.MORPH_TO,
    "d": PropertyKind.PATH_DATA,
    "followPath": PropertyKind.FOLLOW_PATH,
})


def classify(prop: str) -> PropertyKind:
    if prop in TRANSFORM_PROPERTIES:
        return PropertyKind.TRANSFORM
    if prop in COLOR_PROPERTIES:
        return PropertyKind.COLOR
    if prop in _PATH_KINDS:
        return _PATH_KINDS[prop]
    if prop in SIZE_PROPERTIES:
        return PropertyKind.SIZE
    if prop in STROKE_ATTRIBUTES:
        return PropertyKind.STROKE
    if prop in EFFECT_PROPERTIES:
        return PropertyKind.EFFECT
    return PropertyKind.ATTRIBUTE


def attribute_name(prop: str) -> str:
    """SVG attribute written for a property."""
    return STROKE_ATTRIBUTES.get(prop, prop)


def canonical_order(props: Iterable[str]) -> List[str]:
    """Canonical properties first, then the remaining ones in their given order."""
    props = list(props)
    ordered = [p for p in CANONICAL_ORDER if p in props]
    ordered.extend(p for p in props if p not in ordered)
    return ordered
