"""ElementTree-backed SVG scene implementing the vector element capabilities."""
from __future__ import annotations

import copy
import logging
import math
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from xml.etree import ElementTree as ET

from svgpathtools import parse_path

from svgtween.geometry.matrix import Matrix
from svgtween.path.outline import format_number
from svgtween.path.sampler import SvgPathMeasurer
from svgtween.scene.element import (
    Box,
    GradientHandle,
    GradientStop,
    Paint,
    Point,
    parse_points,
)

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
SIMPLE_SELECTOR_RE = re.compile(r"^(?P<tag>[a-zA-Z][\w-]*)?(?P<id>#[\w-]+)?(?P<classes>(?:\.[\w-]+)*)$")
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
BOX_TAGS = {"rect", "image", "use", "svg", "foreignObject"}
NON_RENDERED_TAGS = {
    "defs", "title", "desc", "style", "metadata", "linearGradient", "radialGradient",
    "filter", "clipPath", "mask", "pattern", "symbol", "marker", "stop",
}
DEFAULT_FONT_SIZE = 16.0

_measurer = SvgPathMeasurer()


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _register_svg_namespace() -> None:
    """Ensure the default SVG namespace is registered for serialization."""
    ET.register_namespace("", SVG_NS)


def _parse_float(value: Optional[str], default: float = 0.0) -> float:
    if value is None:
        return default
    match = NUMBER_RE.search(str(value))
    return float(match.group(0)) if match else default


def _matches_simple(node: ET.Element, selector: str) -> bool:
    match = SIMPLE_SELECTOR_RE.match(selector)
    if not match:
        logger.warning(f"Unsupported selector: {selector!r}")
        return False
    tag, el_id, classes = match.group("tag"), match.group("id"), match.group("classes")
    if tag and _strip_ns(node.tag) != tag:
        return False
    if el_id and node.get("id") != el_id[1:]:
        return False
    if classes:
        have = set((node.get("class") or "").split())
        if not all(c in have for c in classes.split(".")[1:]):
            return False
    return True


def _select(root: ET.Element, selector: str, include_root: bool = True) -> List[ET.Element]:
    """Document-ordered matches for comma lists of simple/descendant selectors."""
    found: List[ET.Element] = []
    seen = set()
    for group in (s.strip() for s in selector.split(",")):
        if not group:
            continue
        parts = group.split()
        scopes = [root]
        for depth, part in enumerate(parts):
            matches: List[ET.Element] = []
            for scope in scopes:
                for node in scope.iter():
                    if node is scope and (depth > 0 or not include_root):
                        continue
                    if _matches_simple(node, part) and node not in matches:
                        matches.append(node)
            scopes = matches
        for node in scopes:
            if id(node) not in seen:
                seen.add(id(node))
                found.append(node)
    order = {id(node): i for i, node in enumerate(root.iter())}
    found.sort(key=lambda n: order.get(id(n), 0))
    return found


def _bounds_of(points: Iterable[Point]) -> Box:
    points = list(points)
    if not points:
        return Box()
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return Box(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


class SvgElement:
    """Wrapper around one ElementTree node."""

    def __init__(self, node: ET.Element, scene: Optional["SvgScene"] = None) -> None:
        self.node = node
        self.scene = scene

    def __repr__(self) -> str:
        return f"SvgElement(<{self.type} id={self.id!r}>)"

    @property
    def id(self) -> str:
        return self.node.get("id") or ""

    @property
    def type(self) -> str:
        return _strip_ns(self.node.tag)

    # -- attributes ---------------------------------------------------------

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.node.get(name, default)

    def set_attr(self, name: str, value: object) -> None:
        if value is None:
            self.node.attrib.pop(name, None)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            self.node.set(name, format_number(value))
        else:
            self.node.set(name, str(value))

    def attrs(self) -> Dict[str, str]:
        return dict(self.node.attrib)

    def replace_attrs(self, attrs: Dict[str, str]) -> None:
        self.node.attrib.clear()
        self.node.attrib.update(attrs)

    def _num(self, name: str, default: float = 0.0) -> float:
        return _parse_float(self.node.get(name), default)

    # -- transform ----------------------------------------------------------

    def transform(self) -> Matrix:
        return Matrix.parse(self.node.get("transform"))

    def set_transform(self, matrix: Matrix) -> None:
        if matrix.is_identity():
            self.node.attrib.pop("transform", None)
        else:
            self.node.set("transform", matrix.to_svg())

    # -- geometry -----------------------------------------------------------

    def font_size(self) -> float:
        return self._num("font-size", DEFAULT_FONT_SIZE)

    def bbox(self) -> Box:
        """Local (untransformed) bounding box."""
        kind = self.type
        if kind in BOX_TAGS:
            return Box(self._num("x"), self._num("y"), self._num("width"), self._num("height"))
        if kind == "circle":
            r = self._num("r")
            return Box(self._num("cx") - r, self._num("cy") - r, 2 * r, 2 * r)
        if kind == "ellipse":
            rx, ry = self._num("rx"), self._num("ry")
            return Box(self._num("cx") - rx, self._num("cy") - ry, 2 * rx, 2 * ry)
        if kind == "line":
            return _bounds_of([(self._num("x1"), self._num("y1")), (self._num("x2"), self._num("y2"))])
        if kind in ("polyline", "polygon"):
            return _bounds_of(parse_points(self.node.get("points")))
        if kind == "path":
            path = parse_path(self.node.get("d") or "")
            if not len(path):
                return Box()
            xmin, xmax, ymin, ymax = path.bbox()
            return Box(xmin, ymin, xmax - xmin, ymax - ymin)
        if kind == "text":
            size = self.font_size()
            text = "".join(self.node.itertext())
            return Box(self._num("x"), self._num("y") - size, len(text) * size * 0.6, size)
        corners: List[Point] = []
        for child in self.node:
            child_el = SvgElement(child, self.scene)
            if child_el.type in NON_RENDERED_TAGS:
                continue
            box = child_el.bbox()
            m = child_el.transform()
            corners.extend(
                m.apply(x, y)
                for x, y in ((box.x, box.y), (box.x + box.width, box.y),
                             (box.x, box.y + box.height), (box.x + box.width, box.y + box.height))
            )
        return _bounds_of(corners)

    def _path_data(self) -> Optional[str]:
        kind = self.type
        if kind == "path":
            return self.node.get("d") or ""
        if kind == "rect":
            x, y, w, h = self._num("x"), self._num("y"), self._num("width"), self._num("height")
            return f"M{x} {y} L{x + w} {y} L{x + w} {y + h} L{x} {y + h} Z"
        if kind == "circle":
            cx, cy, r = self._num("cx"), self._num("cy"), self._num("r")
            return f"M{cx - r} {cy} A{r} {r} 0 1 0 {cx + r} {cy} A{r} {r} 0 1 0 {cx - r} {cy}"
        if kind == "line":
            return f"M{self._num('x1')} {self._num('y1')} L{self._num('x2')} {self._num('y2')}"
        if kind in ("polyline", "polygon"):
            pts = parse_points(self.node.get("points"))
            if not pts:
                return None
            d = "M" + " L".join(f"{x} {y}" for x, y in pts)
            return d + (" Z" if kind == "polygon" else "")
        return None

    def native_total_length(self) -> Optional[float]:
        if self.type != "path":
            return None
        return _measurer.measure(self.node.get("d") or "").length

    def point_at_length(self, length: float) -> Point:
        d = self._path_data()
        if d is None:
            raise ValueError(f"<{self.type}> has no measurable geometry")
        return _measurer.measure(d).point_at(length)

    def set_size(self, width: float, height: float) -> None:
        kind = self.type
        if kind in BOX_TAGS:
            self.set_attr("width", width)
            self.set_attr("height", height)
        elif kind == "circle":
            self.set_attr("r", width / 2)
        elif kind == "ellipse":
            self.set_attr("rx", width / 2)
            self.set_attr("ry", height / 2)
        elif kind == "text":
            self.set_font_size(height)
        elif kind in ("path", "line", "polyline", "polygon"):
            box = self.bbox()
            sx = width / box.width if box.width else 1.0
            sy = height / box.height if box.height else 1.0
            self._scale_geometry(sx, sy, (box.x, box.y))
        else:
            logger.debug(f"Size change ignored for <{kind}>")

    def _scale_geometry(self, sx: float, sy: float, origin: Point) -> None:
        ox, oy = origin
        kind = self.type
        if kind == "path":
            path = parse_path(self.node.get("d") or "")
            if len(path):
                path = path.translated(complex(-ox, -oy)).scaled(sx, sy).translated(complex(ox, oy))
                self.node.set("d", path.d())
        elif kind == "line":
            for xa, ya in (("x1", "y1"), ("x2", "y2")):
                self.set_attr(xa, ox + (self._num(xa) - ox) * sx)
                self.set_attr(ya, oy + (self._num(ya) - oy) * sy)
        else:
            pts = parse_points(self.node.get("points"))
            scaled = [(ox + (x - ox) * sx, oy + (y - oy) * sy) for x, y in pts]
            self.node.set("points", " ".join(f"{format_number(x)},{format_number(y)}" for x, y in scaled))

    def set_font_size(self, size: float) -> None:
        self.set_attr("font-size", size)

    def set_paint(self, channel: str, paint: Paint) -> None:
        value = paint.paint if isinstance(paint, GradientHandle) else paint
        self.set_attr(channel, value)

    def center(self, cx: float, cy: float) -> None:
        box = self.bbox()
        dx, dy = cx - box.cx, cy - box.cy
        kind = self.type
        if kind == "path":
            path = parse_path(self.node.get("d") or "")
            if len(path):
                self.node.set("d", path.translated(complex(dx, dy)).d())
        elif kind in ("circle", "ellipse"):
            self.set_attr("cx", self._num("cx") + dx)
            self.set_attr("cy", self._num("cy") + dy)
        elif kind in BOX_TAGS or kind == "text":
            self.set_attr("x", self._num("x") + dx)
            self.set_attr("y", self._num("y") + dy)
        else:
            self.set_transform(Matrix.translation(dx, dy).multiply(self.transform()))

    # -- tree ---------------------------------------------------------------

    def clone(self, deep: bool = True) -> "SvgElement":
        node = copy.deepcopy(self.node) if deep else ET.Element(self.node.tag, dict(self.node.attrib))
        return SvgElement(node, None)

    def find_one(self, selector: str) -> Optional["SvgElement"]:
        matches = _select(self.node, selector, include_root=False)
        if not matches:
            return None
        if self.scene is not None:
            return self.scene.wrap(matches[0])
        return SvgElement(matches[0], None)


class SvgScene:
    """A parsed SVG document addressed by simple CSS selectors."""

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self._wrappers: Dict[int, SvgElement] = {}
        ns_end = root.tag.find("}")
        self._ns = root.tag[:ns_end + 1] if ns_end >= 0 else ""

    @classmethod
    def from_string(cls, svg_text: str) -> "SvgScene":
        _register_svg_namespace()
        return cls(ET.fromstring(svg_text.strip()))

    def wrap(self, node: ET.Element) -> SvgElement:
        key = id(node)
        wrapper = self._wrappers.get(key)
        if wrapper is None or wrapper.node is not node:
            wrapper = SvgElement(node, self)
            self._wrappers[key] = wrapper
        return wrapper

    def find(self, selector: str) -> List[SvgElement]:
        return [self.wrap(node) for node in _select(self.root, selector)]

    def find_one(self, selector: str) -> Optional[SvgElement]:
        found = self.find(selector)
        return found[0] if found else None

    def contains(self, element: SvgElement) -> bool:
        node = getattr(element, "node", None)
        return node is not None and any(n is node for n in self.root.iter())

    def _defs(self) -> ET.Element:
        for child in self.root:
            if _strip_ns(child.tag) == "defs":
                return child
        defs = ET.Element(f"{self._ns}defs")
        self.root.insert(0, defs)
        return defs

    def gradient(self, kind: str, gradient_id: str, stops: Sequence[GradientStop], angle: float) -> GradientHandle:
        """(Re)create a gradient definition; linear gradients are oriented by angle in degrees."""
        defs = self._defs()
        for existing in list(defs):
            if existing.get("id") == gradient_id:
                defs.remove(existing)
        tag = "radialGradient" if kind == "radial" else "linearGradient"
        grad = ET.SubElement(defs, f"{self._ns}{tag}", {"id": gradient_id})
        if tag == "linearGradient":
            # +90 maps CSS gradient angles onto SVG coordinates
            rad = math.radians(angle + 90)
            grad.set("x1", format_number(0.5 + 0.5 * math.cos(rad)))
            grad.set("y1", format_number(0.5 + 0.5 * math.sin(rad)))
            grad.set("x2", format_number(0.5 - 0.5 * math.cos(rad)))
            grad.set("y2", format_number(0.5 - 0.5 * math.sin(rad)))
        for stop in stops:
            ET.SubElement(
                grad,
                f"{self._ns}stop",
                {"offset": format_number(stop.offset / 100), "stop-color": stop.color},
            )
        return GradientHandle(gradient_id=gradient_id, kind="radial" if tag == "radialGradient" else "linear")

    def to_string(self) -> str:
        _register_svg_namespace()
        return ET.tostring(self.root, encoding="unicode")
