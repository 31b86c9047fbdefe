"""Compile declarative animation specs into tween records."""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from svgtween.animation.colors import is_color, is_gradient, normalize_gradient_pair, parse_color
from svgtween.animation.easing import resolve_easing
from svgtween.animation.properties import PropertyKind, attribute_name, canonical_order, classify
from svgtween.animation.records import (
    DEFAULT_ANCHOR,
    AnimationItem,
    CompileIssue,
    Ghost,
    Snapshot,
    TweenRecord,
)
from svgtween.animation.schema import AnimationSpec, AnimationStep, StaggerBound, TimelineConfig
from svgtween.errors import ManagedStateError, OutlineError, SvgTweenError, TargetNotFoundError
from svgtween.path.morph import PathMorpher
from svgtween.path.reshape import PathReshaper
from svgtween.scene.element import Scene, VectorElement, total_length

logger = logging.getLogger(__name__)

NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
EFFECT_PARAMS = ("effectSelector", "filterSelector", "filterProperty")


def _resolve_bound(value: StaggerBound, total: int) -> float:
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("%"):
            return total * float(text[:-1]) / 100
        return float(text)
    return float(value)


def stagger_delay(delay: Sequence[StaggerBound], total: int, index: int) -> float:
    """Delay of element `index` for a [start, range, gap] stagger over `total` elements."""
    start, span, gap = delay
    start = _resolve_bound(start, total)
    span = _resolve_bound(span, total)
    if index < start:
        return 0.0
    if span <= 0:
        raise ValueError(f"Stagger range must be positive, got {delay[1]!r}")
    return math.floor((index - start) / span) * float(gap)


def to_number(value: Any) -> Any:
    """Float for numbers and numeric-prefixed strings ("12px"); anything else unchanged."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = NUMBER_RE.match(value)
        if match:
            return float(match.group(1))
    return value


class TweenCompiler:
    """Turns one AnimationSpec into AnimationItems (one per matched target)."""

    def __init__(
        self,
        scene: Scene,
        config: TimelineConfig,
        morpher: Optional[PathMorpher] = None,
        reshaper: Optional[PathReshaper] = None,
    ) -> None:
        self.scene = scene
        self.config = config
        self.morpher = morpher or PathMorpher(segments=config.morph_segments)
        self.reshaper = reshaper or PathReshaper(steps=config.reshape_steps)
        self._builders: Dict[PropertyKind, Callable[..., Any]] = {
            PropertyKind.TRANSFORM: self._build_transform,
            PropertyKind.COLOR: self._build_color,
            PropertyKind.MORPH_TO: self._build_morph_to,
            PropertyKind.PATH_DATA: self._build_path_data,
            PropertyKind.FOLLOW_PATH: self._build_follow_path,
            PropertyKind.SIZE: self._build_numeric,
            PropertyKind.STROKE: self._build_stroke,
            PropertyKind.EFFECT: self._build_effect,
            PropertyKind.ATTRIBUTE: self._build_numeric,
        }

    # -- entry point --------------------------------------------------------

    def compile(self, spec: AnimationSpec) -> Tuple[List[AnimationItem], List[CompileIssue]]:
        if self.config.managed_state and self.config.get_managed_state is None:
            raise ManagedStateError("managed_state is enabled but get_managed_state is not set")

        elements = self.scene.find(spec.targets)
        if not elements:
            logger.warning(f"No elements match {spec.targets!r}; nothing to animate")
            return [], []

        props = canonical_order(spec.properties)
        items: List[AnimationItem] = []
        issues: List[CompileIssue] = []
        for index, el in enumerate(elements):
            ghost = self._make_ghost(el)
            item = AnimationItem(target=el, targets=spec.targets, ghost=ghost, snapshot=Snapshot.capture(el))
            for prop in props:
                steps = spec.properties[prop]
                if not steps:
                    continue
                try:
                    item.tweens[prop] = self._compile_property(el, spec.targets, prop, steps, index, len(elements), ghost)
                except (SvgTweenError, ValueError, LookupError) as exc:
                    logger.warning(f"Skipping {prop} on {spec.targets!r}[{index}]: {exc}")
                    issues.append(CompileIssue(targets=spec.targets, prop=prop, error=exc))
            items.append(item)
        return items, issues

    # -- per target / property ---------------------------------------------

    def _managed(self, el: VectorElement, prop: str, *args: Any) -> Any:
        return self.config.get_managed_state(el, prop, *args)

    def _make_ghost(self, el: VectorElement) -> Ghost:
        anchor = DEFAULT_ANCHOR
        if self.config.managed_state:
            managed = self._managed(el, "anchor")
            if managed is not None:
                anchor = (float(managed[0]), float(managed[1]))
        ghost = Ghost(bbox=el.bbox(), anchor=anchor)
        ghost.components = el.transform().decompose(ghost.origin())
        return ghost

    def _initial_state(self, el: VectorElement, prop: str, kind: PropertyKind, ghost: Ghost) -> Any:
        if self.config.managed_state:
            return self._managed(el, prop)
        if kind == PropertyKind.TRANSFORM:
            return ghost.anchor if prop == "anchor" else ghost.components.get(prop)
        if kind == PropertyKind.COLOR:
            return el.attr(prop) or "#000"
        if kind == PropertyKind.FOLLOW_PATH:
            return 0.0
        if kind in (PropertyKind.MORPH_TO, PropertyKind.PATH_DATA):
            return el.attr("d")
        if kind == PropertyKind.EFFECT:
            return None
        if kind == PropertyKind.SIZE:
            raw = el.attr(prop)
            if raw is not None:
                return raw
            box = el.bbox()
            return box.width if prop == "width" else box.height
        return el.attr(attribute_name(prop)) or 0

    def _compile_property(
        self,
        el: VectorElement,
        targets: str,
        prop: str,
        steps: List[AnimationStep],
        index: int,
        count: int,
        ghost: Ghost,
    ) -> List[TweenRecord]:
        kind = classify(prop)
        build = self._builders[kind]
        start = self._initial_state(el, prop, kind, ghost)
        records: List[TweenRecord] = []
        # Left fold: each step's final value is the next step's start value.
        for j, step in enumerate(steps):
            local_delay = stagger_delay(step.delay, count, index) if step.staggered else float(step.delay)
            record = TweenRecord(
                target=el,
                targets=targets,
                prop=prop,
                kind=kind,
                start=start,
                end=step.value,
                easing=resolve_easing(step.easing if step.easing is not None else self.config.easing),
                delay=local_delay + self.config.delay,
                duration=float(step.duration or 0),
                ghost=ghost,
                step_index=j,
                staggered=step.staggered,
                params=dict(step.params),
            )
            start = build(record, step, start)
            records.append(record)
        return records

    # -- builders: fill the record, return the next running start ----------

    def _build_transform(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        prop = record.prop
        if prop == "anchor":
            value = step.value
            if isinstance(value, (int, float)):
                value = (value, value)
            begin = tuple(float(v) for v in (start or DEFAULT_ANCHOR))
            delta = (float(value[0]) - begin[0], float(value[1]) - begin[1])
            end = (begin[0] + delta[0], begin[1] + delta[1])
        else:
            begin = float(to_number(start))
            value = float(to_number(step.value))
            if prop in ("scaleX", "scaleY"):
                factor = value / begin if begin else None
                end = begin * factor if factor is not None else value
            else:
                end = begin + (value - begin)
        record.start, record.end = begin, end
        return end

    def _solid(self, value: Any, fallback: Tuple[float, ...]) -> Tuple[float, ...]:
        if is_color(value):
            return parse_color(value)
        logger.debug(f"Non-color paint {value!r}; starting from transparent")
        return (fallback[0], fallback[1], fallback[2], 0.0)

    def _build_color(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        value = step.value
        if is_gradient(start) or is_gradient(value):
            if not (is_gradient(start) or is_color(start)):
                logger.debug(f"Non-color paint {start!r}; gradient starts at its final value")
                start = value
            record.start, record.end, record.gradient_kind = normalize_gradient_pair(str(start), str(value))
            return value
        end = parse_color(value)
        record.start = self._solid(start, end)
        record.end = end
        record.is_color = True
        return value

    def _build_morph_to(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        found = self.scene.find(str(step.value))
        if not found:
            raise TargetNotFoundError(f"morphTo destination {step.value!r} not found")
        if not start:
            raise OutlineError(f"<{record.target.type}> has no path data to morph from")
        destination = found[0].clone()
        if not destination.attr("d"):
            raise OutlineError(f"morphTo destination {step.value!r} has no path data")
        source_box = record.ghost.bbox
        destination.center(source_box.cx, source_box.cy)
        to_d = destination.attr("d")
        record.start, record.end = start, to_d
        record.interpolator = self.morpher.build_morph(start, to_d, segments=self.config.morph_segments)
        return to_d

    def _build_path_data(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        if not start or not step.value:
            raise OutlineError(f"Path data animation on {record.targets!r} needs both outlines")
        first, second = self.reshaper.reshape(str(start), str(step.value))
        record.start, record.end = start, step.value
        record.interpolator = self.morpher.build_morph(first, second, segments=self.config.morph_segments)
        return step.value

    def _build_follow_path(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        found = self.scene.find(str(step.value))
        if not found:
            raise TargetNotFoundError(f"followPath target {step.value!r} not found")
        path = found[0]
        length = total_length(path)
        record.start, record.end = 0.0, length
        record.followed_path = path
        record.centered = bool(step.params.get("centered", False))
        record.rotated = bool(step.params.get("rotated", False))
        return length

    def _build_numeric(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        if isinstance(start, str) and isinstance(step.value, str) and is_color(start) and is_color(step.value):
            record.start, record.end = parse_color(start), parse_color(step.value)
            record.is_color = True
            return step.value
        record.start, record.end = to_number(start), to_number(step.value)
        return record.end

    def _build_stroke(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        if record.prop == "strokeDashoffset":
            record.dash_length = total_length(record.target)
        return self._build_numeric(record, step, start)

    def _build_effect(self, record: TweenRecord, step: AnimationStep, start: Any) -> Any:
        missing = [key for key in EFFECT_PARAMS if not step.params.get(key)]
        if missing:
            raise ValueError(f"{record.prop} step needs params {', '.join(missing)}")
        effect_selector, filter_selector, filter_property = (step.params[key] for key in EFFECT_PARAMS)
        if self.config.managed_state:
            start = self._managed(record.target, record.prop, {
                "effectSelector": effect_selector,
                "filterSelector": filter_selector,
                "filterProperty": filter_property,
            })
        elif start is None:
            handler = self._effect_handler(effect_selector, filter_selector)
            if handler is not None:
                start = handler.attr(filter_property)
        return self._build_numeric(record, step, start)

    def _effect_handler(self, effect_selector: str, filter_selector: str) -> Optional[VectorElement]:
        effects = self.scene.find(effect_selector)
        if not effects:
            return None
        return effects[0].find_one(filter_selector)
