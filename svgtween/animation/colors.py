"""Solid color and CSS-gradient normalization for interpolation.

Gradients are flattened to [angle, r, g, b, a, offset, r, g, b, a, offset, ...]
so solid colors and gradients can both be tweened as plain number arrays.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from PIL import ImageColor

from svgtween.scene.element import GradientStop

RGBA = Tuple[float, float, float, float]

RGBA_RE = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)(%?)\s*)?\)$",
    re.IGNORECASE,
)
GRADIENT_RE = re.compile(r"^\s*(linear|radial)-gradient\((.*)\)\s*$", re.IGNORECASE | re.DOTALL)
STOP_RE = re.compile(r"^(.*?)\s+(-?[\d.]+)%$", re.DOTALL)
ANGLE_RE = re.compile(r"^(-?[\d.]+)deg$", re.IGNORECASE)
STOP_SIZE = 5


def parse_color(value: str) -> RGBA:
    """Parse hex, rgb(), rgba() (fractional alpha) or any color Pillow knows."""
    text = str(value).strip()
    match = RGBA_RE.match(text)
    if match:
        r, g, b, a, percent = match.groups()
        alpha = 1.0 if a is None else float(a) / (100.0 if percent else 1.0)
        return (float(r), float(g), float(b), alpha)
    rgb = ImageColor.getrgb(text)
    alpha = rgb[3] / 255 if len(rgb) == 4 else 1.0
    return (float(rgb[0]), float(rgb[1]), float(rgb[2]), alpha)


def is_color(value: object) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        parse_color(value)
    except ValueError:
        return False
    return True


def is_gradient(value: object) -> bool:
    return isinstance(value, str) and "%" in value and "gradient(" in value.lower()


def _clamp(rgba: Sequence[float]) -> RGBA:
    r, g, b = (max(0.0, min(255.0, c)) for c in rgba[:3])
    return (r, g, b, max(0.0, min(1.0, rgba[3])))


def format_color(rgba: RGBA) -> str:
    r, g, b, a = _clamp(rgba)
    if a >= 1:
        return "#{:02x}{:02x}{:02x}".format(round(r), round(g), round(b))
    return f"rgba({round(r)},{round(g)},{round(b)},{round(a, 3)})"


def _split_top_level(body: str) -> List[str]:
    parts, depth, current = [], 0, []
    for ch in body:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    if current:
        parts.append("".join(current).strip())
    return [p for p in parts if p]


@dataclass
class GradientData:
    kind: str
    angle: float = 180.0
    stops: List[Tuple[RGBA, float]] = field(default_factory=list)

    def to_array(self) -> List[float]:
        values = [float(self.angle)]
        for rgba, offset in self.stops:
            values.extend([*rgba, float(offset)])
        return values


def parse_gradient(value: str) -> GradientData:
    match = GRADIENT_RE.match(value)
    if not match:
        raise ValueError(f"Not a linear/radial gradient: {value!r}")
    kind, body = match.group(1).lower(), match.group(2)
    parts = _split_top_level(body)
    data = GradientData(kind=kind)
    if parts:
        angle = ANGLE_RE.match(parts[0])
        if angle:
            data.angle = float(angle.group(1))
            parts = parts[1:]
        elif not is_color(STOP_RE.sub(r"\1", parts[0])):
            parts = parts[1:]  # radial shape / position descriptor
    raw_stops: List[Tuple[RGBA, Optional[float]]] = []
    for part in parts:
        stop = STOP_RE.match(part)
        if stop:
            raw_stops.append((parse_color(stop.group(1)), float(stop.group(2))))
        else:
            raw_stops.append((parse_color(part), None))
    count = len(raw_stops)
    for i, (rgba, offset) in enumerate(raw_stops):
        if offset is None:
            offset = 100.0 * i / (count - 1) if count > 1 else 0.0
        data.stops.append((rgba, offset))
    return data


def array_to_stops(values: Sequence[float]) -> Tuple[float, List[GradientStop]]:
    """Inverse of GradientData.to_array: angle and renderable stops."""
    angle = values[0]
    stops = []
    for i in range(1, len(values) - STOP_SIZE + 1, STOP_SIZE):
        r, g, b, a, offset = values[i:i + STOP_SIZE]
        rgba = _clamp((r, g, b, a))
        color = f"rgba({round(rgba[0])},{round(rgba[1])},{round(rgba[2])},{round(rgba[3], 3)})"
        stops.append(GradientStop(color=color, offset=offset))
    return angle, stops


def _pad(data: GradientData, count: int) -> GradientData:
    stops = list(data.stops)
    while stops and len(stops) < count:
        stops.append(stops[-1])
    return GradientData(kind=data.kind, angle=data.angle, stops=stops)


def normalize_gradient_pair(start: str, end: str) -> Tuple[List[float], List[float], str]:
    """Flatten two paints (at least one a gradient) to equal-length arrays.

    A solid endpoint adopts the gradient's angle and offsets with every stop
    set to the solid color. Returns (start_array, end_array, gradient_kind).
    """
    if is_gradient(start) and is_gradient(end):
        g_start, g_end = parse_gradient(start), parse_gradient(end)
    elif is_gradient(end):
        g_end = parse_gradient(end)
        solid = parse_color(start)
        g_start = GradientData(g_end.kind, g_end.angle, [(solid, off) for _, off in g_end.stops])
    else:
        g_start = parse_gradient(start)
        solid = parse_color(end)
        g_end = GradientData(g_start.kind, g_start.angle, [(solid, off) for _, off in g_start.stops])
    count = max(len(g_start.stops), len(g_end.stops))
    g_start, g_end = _pad(g_start, count), _pad(g_end, count)
    kind = g_end.kind if is_gradient(end) else g_start.kind
    return g_start.to_array(), g_end.to_array(), kind
