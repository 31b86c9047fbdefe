"""Vector scene capabilities and the ElementTree SVG adapter."""

from svgtween.scene.element import (
    Box,
    GradientHandle,
    GradientStop,
    Scene,
    VectorElement,
    total_length,
)
from svgtween.scene.svg_scene import SvgElement, SvgScene

__all__ = [
    "Box",
    "GradientHandle",
    "GradientStop",
    "Scene",
    "VectorElement",
    "total_length",
    "SvgElement",
    "SvgScene",
]
