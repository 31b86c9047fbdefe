"""Outline codec: move + cubic path strings <-> numbers and control points.

Morphing and reshaping work on absolute `M x y C ...` outlines. Path data in
any other form is first converted with `to_cubic_outline`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from svgpathtools import CubicBezier, Line, QuadraticBezier, parse_path

from svgtween.errors import OutlineError

NUMBER_RE = re.compile(r"[+-]?\d*\.?\d+(?:e[+-]?\d+)?", re.IGNORECASE)
COMMAND_RE = re.compile(r"([MC])([^MC]*)")
LETTER_RE = re.compile(r"[A-Za-z]")

GROUP_SIZE = 6  # x1 y1 x2 y2 x y per cubic
ARC_PIECES = 4  # cubics per arc segment


def format_number(value: float) -> str:
    """Shortest text for a coordinate: integers lose their decimal point."""
    value = float(value)
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def parse_numbers(d: str) -> List[float]:
    return [float(n) for n in NUMBER_RE.findall(d or "")]


def command_letters(d: str) -> List[str]:
    return LETTER_RE.findall(NUMBER_RE.sub(" ", d or ""))


def subpath_count(d: str) -> int:
    return sum(1 for letter in command_letters(d) if letter in "Mm")


def cubic_count(d: str) -> int:
    """Cubic groups after the move point of a move + cubic outline.

    Groups repeated under a single `C` are counted one by one.
    """
    return max(0, (len(parse_numbers(d)) - 2) // GROUP_SIZE)


def is_cubic_outline(d: str) -> bool:
    """True for one absolute move followed only by absolute cubics."""
    letters = command_letters(d)
    return bool(letters) and letters[0] == "M" and letters.count("M") == 1 and set(letters) <= {"M", "C"}


def _as_cubics(seg) -> List[Tuple[complex, complex, complex]]:
    """(control1, control2, end) triples for one svgpathtools segment."""
    if isinstance(seg, CubicBezier):
        return [(seg.control1, seg.control2, seg.end)]
    if isinstance(seg, QuadraticBezier):
        return [(
            seg.start + (seg.control - seg.start) * 2 / 3,
            seg.end + (seg.control - seg.end) * 2 / 3,
            seg.end,
        )]
    if isinstance(seg, Line):
        delta = seg.end - seg.start
        return [(seg.start + delta / 3, seg.start + delta * 2 / 3, seg.end)]
    # Arcs: one Hermite cubic per piece, controls along the arc's tangents
    pieces = []
    for i in range(ARC_PIECES):
        t0, t1 = i / ARC_PIECES, (i + 1) / ARC_PIECES
        scale = (t1 - t0) / 3
        p0, p1 = seg.point(t0), seg.point(t1)
        pieces.append((p0 + seg.derivative(t0) * scale, p1 - seg.derivative(t1) * scale, p1))
    return pieces


def to_cubic_outline(d: str) -> str:
    """Absolute move + cubic form of any path data.

    Outlines already in that form are returned as given. Lines and quadratics
    convert exactly, arcs are approximated, and every discontinuity starts a
    new `M`.
    """
    if not d or not d.strip():
        return ""
    if is_cubic_outline(d):
        count = len(parse_numbers(d))
        if count < 2 or (count - 2) % GROUP_SIZE:
            raise OutlineError(f"Outline {d[:40]!r} does not split into whole cubics ({count} numbers)")
        return d
    try:
        path = parse_path(d)
    except Exception as exc:  # svgpathtools raises bare Exception/ValueError on bad tokens
        raise OutlineError(f"Cannot parse path data {d[:40]!r}: {exc}") from exc

    parts: List[str] = []
    end = None
    for seg in path:
        if end is None or abs(seg.start - end) > 1e-9:
            parts.append(f"M{format_number(seg.start.real)} {format_number(seg.start.imag)}")
        for c1, c2, point in _as_cubics(seg):
            values = (c1.real, c1.imag, c2.real, c2.imag, point.real, point.imag)
            parts.append("C" + " ".join(format_number(v) for v in values))
        end = seg.end
    if not parts:
        numbers = parse_numbers(d)
        if len(numbers) < 2:
            raise OutlineError(f"Outline needs a move point, got {d[:40]!r}")
        return f"M{format_number(numbers[0])} {format_number(numbers[1])}"
    return "".join(parts)


def render_numbers(numbers: Sequence[float]) -> str:
    """Render [mx, my, (x1 y1 x2 y2 x y)*] as an outline string."""
    if len(numbers) < 2:
        raise OutlineError(f"Outline needs a move point, got {len(numbers)} numbers")
    parts = [f"M{format_number(numbers[0])} {format_number(numbers[1])}"]
    for i in range(2, len(numbers) - GROUP_SIZE + 1, GROUP_SIZE):
        parts.append("C" + " ".join(format_number(v) for v in numbers[i:i + GROUP_SIZE]))
    return "".join(parts)


def cubic_endpoints(numbers: Sequence[float]) -> List[Tuple[float, float]]:
    """Endpoint of every cubic group in a flat move+cubic number list."""
    return [
        (numbers[i + 4], numbers[i + 5])
        for i in range(2, len(numbers) - GROUP_SIZE + 1, GROUP_SIZE)
    ]


def render_points(points: Sequence[Tuple[float, float]]) -> str:
    """Smooth outline through sampled points, one cubic per consecutive pair.

    Controls sit at one and two thirds of each chord.
    """
    if not points:
        return ""
    first = points[0]
    parts = [f"M{format_number(first[0])} {format_number(first[1])}"]
    for prev, p in zip(points, points[1:]):
        c1 = ((prev[0] * 2 + p[0]) / 3, (prev[1] * 2 + p[1]) / 3)
        c2 = ((prev[0] + p[0] * 2) / 3, (prev[1] + p[1] * 2) / 3)
        parts.append(
            "C" + " ".join(format_number(v) for v in (c1[0], c1[1], c2[0], c2[1], p[0], p[1]))
        )
    return "".join(parts)


# ---------------------------------------------------------------------------
# Control point arena (used by the reshaper)
# ---------------------------------------------------------------------------

@dataclass
class Handle:
    """A control point; `owner` is the index of its endpoint in the arena."""
    x: float
    y: float
    owner: int


@dataclass
class Endpoint:
    x: float
    y: float
    cp0: Handle  # incoming control
    cp1: Handle  # outgoing control

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass
class ControlPointArena:
    """Ordered endpoints of one outline; handles refer back by index."""
    points: List[Endpoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Endpoint:
        return self.points[index]

    def append(self, x: float, y: float, cp0: Tuple[float, float], cp1: Tuple[float, float]) -> Endpoint:
        index = len(self.points)
        point = Endpoint(x, y, Handle(cp0[0], cp0[1], index), Handle(cp1[0], cp1[1], index))
        self.points.append(point)
        return point

    def insert(self, index: int, x: float, y: float, cp0: Tuple[float, float], cp1: Tuple[float, float]) -> Endpoint:
        point = Endpoint(x, y, Handle(cp0[0], cp0[1], index), Handle(cp1[0], cp1[1], index))
        self.points.insert(index, point)
        for i in range(index + 1, len(self.points)):
            self.points[i].cp0.owner = i
            self.points[i].cp1.owner = i
        return point

    def owner_of(self, handle: Handle) -> Endpoint:
        return self.points[handle.owner]

    @classmethod
    def parse(cls, d: str) -> "ControlPointArena":
        arena = cls()
        prev = None
        for command, body in COMMAND_RE.findall(d or ""):
            nums = parse_numbers(body)
            if command == "M":
                if len(nums) < 2:
                    raise OutlineError(f"Move command without coordinates in {d!r}")
                x, y = nums[0], nums[1]
                prev = arena.append(x, y, (x, y), (x, y))
                continue
            for i in range(0, len(nums) - GROUP_SIZE + 1, GROUP_SIZE):
                x1, y1, x2, y2, x, y = nums[i:i + GROUP_SIZE]
                if prev is not None:
                    prev.cp1.x, prev.cp1.y = x1, y1
                prev = arena.append(x, y, (x2, y2), (x, y))
        return arena

    def render(self) -> str:
        if not self.points:
            return ""
        first = self.points[0]
        parts = [f"M{format_number(first.x)} {format_number(first.y)}"]
        for prev, ep in zip(self.points, self.points[1:]):
            values = (prev.cp1.x, prev.cp1.y, ep.cp0.x, ep.cp0.y, ep.x, ep.y)
            parts.append("C" + " ".join(format_number(v) for v in values))
        return "".join(parts)
