"""Apply compiled tween records to the scene for one elapsed time."""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Sequence, Set, Tuple

from svgtween.animation.colors import array_to_stops, format_color
from svgtween.animation.properties import (
    GEOMETRY_ALTERING_PROPERTIES,
    SCALE_PROPERTIES,
    SIZE_PROPERTIES,
    PropertyKind,
    attribute_name,
)
from svgtween.animation.records import TweenRecord
from svgtween.animation.schema import TimelineConfig
from svgtween.errors import SvgTweenError, TargetNotFoundError
from svgtween.geometry.matrix import Matrix
from svgtween.scene.element import Scene, VectorElement, total_length

logger = logging.getLogger(__name__)

DASHARRAY = "stroke-dasharray"
RESIZING_PROPERTIES = SIZE_PROPERTIES | SCALE_PROPERTIES


class FrameRenderer:
    """Writes interpolated values of every record into the scene.

    Attributes the renderer had to add (a dash array for dash offset
    animations) are tracked as dirty and cleared before each play or seek.
    """

    def __init__(self, scene: Scene, config: TimelineConfig) -> None:
        self.scene = scene
        self.config = config
        self.records: List[TweenRecord] = []
        self.dirty: List[Tuple[VectorElement, str]] = []
        self._resizing: Set[int] = set()
        self._writers: Dict[PropertyKind, Callable[[TweenRecord, Any], None]] = {
            PropertyKind.TRANSFORM: self._write_transform,
            PropertyKind.COLOR: self._write_color,
            PropertyKind.MORPH_TO: self._write_path_data,
            PropertyKind.PATH_DATA: self._write_path_data,
            PropertyKind.FOLLOW_PATH: self._write_follow_path,
            PropertyKind.SIZE: self._write_size,
            PropertyKind.STROKE: self._write_stroke,
            PropertyKind.EFFECT: self._write_effect,
            PropertyKind.ATTRIBUTE: self._write_attribute,
        }

    def load(self, records: Sequence[TweenRecord]) -> None:
        self.records = list(records)
        self._resizing = {id(r.target) for r in self.records if r.prop in RESIZING_PROPERTIES}

    def clean_dirty(self) -> None:
        for el, name in self.dirty:
            el.set_attr(name, None)
        self.dirty.clear()

    def render(self, elapsed: float, playing: bool, full_reset: bool = False) -> None:
        for record in self.records:
            progress = record.local_progress(elapsed, full_reset)
            pre_delay = elapsed < record.effective_delay(full_reset) and progress == 0
            if pre_delay and (playing or not (record.staggered or record.chain_head)):
                continue
            try:
                self._apply(record, progress)
            except (SvgTweenError, ValueError, LookupError, ZeroDivisionError) as exc:
                logger.warning(f"Render of {record.prop} on {record.targets!r} failed: {exc}")

    # -- dispatch -----------------------------------------------------------

    def _apply(self, record: TweenRecord, progress: float) -> None:
        value = record.value_at(progress)
        self._writers[record.kind](record, value)
        if record.prop in GEOMETRY_ALTERING_PROPERTIES and record.ghost.geometry_changed(id(record), value):
            record.ghost.bbox = record.target.bbox()

    def _write_transform(self, record: TweenRecord, value: Any) -> None:
        ghost = record.ghost
        if record.prop == "anchor":
            ghost.anchor = (float(value[0]), float(value[1]))
            if self.config.update_anchor_cb:
                self.config.update_anchor_cb(record.target, ghost.anchor)
        else:
            ghost.set_component(record.prop, float(value))
        record.target.set_transform(ghost.matrix())

    def _write_color(self, record: TweenRecord, value: Any) -> None:
        el = record.target
        if record.gradient_kind is not None:
            angle, stops = array_to_stops(value)
            gradient_id = f"{el.id}-{record.prop}-gradient"
            if self.config.gradient_id_cb:
                gradient_id = self.config.gradient_id_cb(el)
            handle = self.scene.gradient(record.gradient_kind, gradient_id, stops, angle)
            if self.config.gradient_setter_cb:
                self.config.gradient_setter_cb(el, handle, record.prop)
            else:
                el.set_paint(record.prop, handle)
            return
        el.set_paint(record.prop, format_color(value))

    def _write_path_data(self, record: TweenRecord, value: Any) -> None:
        record.target.set_attr("d", value)

    def _write_follow_path(self, record: TweenRecord, value: Any) -> None:
        path = record.followed_path
        if path is None or not self.scene.contains(path):
            raise TargetNotFoundError(f"Followed path of {record.targets!r} is no longer in the scene")
        length = float(value)
        limit = float(record.end or 0)
        x, y = path.point_at_length(max(0.0, min(limit, length)))
        matrix = path.transform().multiply(Matrix.translation(x, y))
        box = record.target.bbox()
        if record.centered:
            matrix = matrix.multiply(Matrix.translation(-box.cx, -box.cy))
        if record.rotated:
            x0, y0 = path.point_at_length(max(0.0, min(limit, length - 1)))
            x1, y1 = path.point_at_length(max(0.0, min(limit, length + 1)))
            angle = math.degrees(math.atan2(y1 - y0, x1 - x0))
            matrix = matrix.multiply(Matrix.rotation(angle, box.cx, box.cy))
        record.target.set_transform(matrix)

    def _write_size(self, record: TweenRecord, value: Any) -> None:
        el = record.target
        box = el.bbox()
        width = float(value) if record.prop == "width" else box.width
        height = float(value) if record.prop == "height" else box.height
        if el.type == "text":
            el.set_font_size(float(value))
        else:
            el.set_size(width, height)
        if self.config.update_image_pattern_cb:
            self.config.update_image_pattern_cb(el, width, height)

    def _write_stroke(self, record: TweenRecord, value: Any) -> None:
        el = record.target
        if record.prop != "strokeDashoffset":
            self._write_attribute(record, value)
            return
        resizing = id(el) in self._resizing
        length = total_length(el) if resizing or record.dash_length is None else record.dash_length
        if not el.attr(DASHARRAY) or resizing:
            if not el.attr(DASHARRAY):
                self.dirty.append((el, DASHARRAY))
            el.set_attr(DASHARRAY, length)
        el.set_attr(attribute_name(record.prop), length * float(value) / 100)

    def _write_effect(self, record: TweenRecord, value: Any) -> None:
        effects = self.scene.find(record.params["effectSelector"])
        handler = effects[0].find_one(record.params["filterSelector"]) if effects else None
        if handler is None:
            logger.debug(f"No filter handler for {record.prop} on {record.targets!r}")
            return
        handler.set_attr(record.params["filterProperty"], format_color(value) if record.is_color else value)

    def _write_attribute(self, record: TweenRecord, value: Any) -> None:
        if record.is_color:
            value = format_color(value)
        record.target.set_attr(attribute_name(record.prop), value)
