"""2-D affine matrices in SVG order (a b c d e f)."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from svgtween.path.outline import format_number

TRANSFORM_FN_RE = re.compile(r"([a-zA-Z]+)\s*\(([^)]*)\)")
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class TransformComponents:
    """Anchor-relative decomposition of a matrix.

    `shear` is the x-shear factor applied between scale and rotation; it is
    carried through so existing skews survive, but is not animatable.
    """
    translateX: float = 0.0
    translateY: float = 0.0
    scaleX: float = 1.0
    scaleY: float = 1.0
    rotate: float = 0.0
    shear: float = 0.0

    def get(self, prop: str) -> float:
        return getattr(self, prop)

    def with_value(self, prop: str, value: float) -> "TransformComponents":
        return replace(self, **{prop: float(value)})

    def to_dict(self) -> Dict[str, float]:
        return {
            "translateX": self.translateX,
            "translateY": self.translateY,
            "scaleX": self.scaleX,
            "scaleY": self.scaleY,
            "rotate": self.rotate,
            "shear": self.shear,
        }


@dataclass(frozen=True)
class Matrix:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Matrix":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float = 0.0) -> "Matrix":
        return cls(e=tx, f=ty)

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> "Matrix":
        return cls(a=sx, d=sx if sy is None else sy)

    @classmethod
    def rotation(cls, degrees: float, cx: float = 0.0, cy: float = 0.0) -> "Matrix":
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        rot = cls(a=cos, b=sin, c=-sin, d=cos)
        if cx or cy:
            return cls.translation(cx, cy).multiply(rot).multiply(cls.translation(-cx, -cy))
        return rot

    @classmethod
    def parse(cls, value: Optional[str]) -> "Matrix":
        """Parse an SVG transform attribute; unknown functions are ignored."""
        result = cls()
        if not value:
            return result
        for name, raw_args in TRANSFORM_FN_RE.findall(value):
            args = [float(n) for n in NUMBER_RE.findall(raw_args)]
            name = name.lower()
            if name == "matrix" and len(args) == 6:
                step = cls(*args)
            elif name == "translate" and args:
                step = cls.translation(args[0], args[1] if len(args) > 1 else 0.0)
            elif name == "scale" and args:
                step = cls.scaling(args[0], args[1] if len(args) > 1 else None)
            elif name == "rotate" and args:
                cx, cy = (args[1], args[2]) if len(args) >= 3 else (0.0, 0.0)
                step = cls.rotation(args[0], cx, cy)
            elif name == "skewx" and args:
                step = cls(c=math.tan(math.radians(args[0])))
            elif name == "skewy" and args:
                step = cls(b=math.tan(math.radians(args[0])))
            else:
                continue
            result = result.multiply(step)
        return result

    @classmethod
    def compose(cls, components: TransformComponents, origin: Tuple[float, float] = (0.0, 0.0)) -> "Matrix":
        """Build T(translate) . T(origin) . R . H(shear) . S . T(-origin)."""
        ox, oy = origin
        rad = math.radians(components.rotate)
        cos, sin = math.cos(rad), math.sin(rad)
        sx, sy, k = components.scaleX, components.scaleY, components.shear
        a = cos * sx
        b = sin * sx
        c = (cos * k - sin) * sy
        d = (sin * k + cos) * sy
        e = components.translateX + ox - (a * ox + c * oy)
        f = components.translateY + oy - (b * ox + d * oy)
        return cls(a, b, c, d, e, f)

    def decompose(self, origin: Tuple[float, float] = (0.0, 0.0)) -> TransformComponents:
        """Inverse of `compose`; degenerate matrices lose their shear."""
        ox, oy = origin
        scale_x = math.hypot(self.a, self.b)
        shear = 0.0
        if scale_x == 0:
            rotate = 0.0
            scale_y = math.hypot(self.c, self.d)
        else:
            rotate = math.degrees(math.atan2(self.b, self.a))
            scale_y = (self.a * self.d - self.b * self.c) / scale_x
            if scale_y:
                shear = (self.a * self.c + self.b * self.d) / (scale_x * scale_y)
        return TransformComponents(
            translateX=self.e - ox + (self.a * ox + self.c * oy),
            translateY=self.f - oy + (self.b * ox + self.d * oy),
            scaleX=scale_x,
            scaleY=scale_y,
            rotate=rotate,
            shear=shear,
        )

    def multiply(self, other: "Matrix") -> "Matrix":
        """Return self . other (other is applied first)."""
        return Matrix(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def is_identity(self, tolerance: float = 1e-12) -> bool:
        return all(abs(v - w) <= tolerance for v, w in zip(self.values(), Matrix().values()))

    def values(self) -> List[float]:
        return [self.a, self.b, self.c, self.d, self.e, self.f]

    def to_svg(self) -> str:
        return "matrix(" + ",".join(format_number(v) for v in self.values()) + ")"
