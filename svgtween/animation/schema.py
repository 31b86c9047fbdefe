"""Pydantic models for declarative animation specs and timeline configuration."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from svgtween.utils.config import settings

StaggerBound = Union[float, str]


class AnimationStep(BaseModel):
    """One step of a property: tween to `value` over `duration` ms after `delay`."""

    model_config = ConfigDict(extra="ignore")

    value: Any = None
    duration: float = 0.0
    delay: Union[float, List[StaggerBound]] = 0.0
    easing: Optional[Union[str, List[float]]] = None
    params: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("delay", mode="before")
    @classmethod
    def _check_delay(cls, value: Any) -> Any:
        if value is None:
            return 0.0
        if isinstance(value, (list, tuple)):
            if len(value) != 3:
                raise ValueError("stagger delay must be [start, range, gap]")
            return list(value)
        return value

    @field_validator("params", mode="before")
    @classmethod
    def _default_params(cls, value: Any) -> Any:
        return value or {}

    @field_validator("easing")
    @classmethod
    def _check_easing(cls, value: Any) -> Any:
        if isinstance(value, list) and len(value) != 4:
            raise ValueError("custom easing must be [x1, y1, x2, y2]")
        return value

    @property
    def staggered(self) -> bool:
        return isinstance(self.delay, list)


class AnimationSpec(BaseModel):
    """A selector plus an ordered mapping property -> steps.

    Accepts the flat form {"targets": "#a", "translateX": [{...}], ...}; a
    single step mapping is accepted in place of a list.
    """

    targets: str
    properties: Dict[str, List[AnimationStep]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_flat(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "properties" in data:
            return data
        properties: Dict[str, Any] = {}
        for key, steps in data.items():
            if key == "targets" or not steps:
                continue
            properties[key] = [steps] if isinstance(steps, dict) else list(steps)
        return {"targets": data.get("targets"), "properties": properties}


class TimelineConfig(BaseModel):
    """Timeline options, resolved once at construction."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True, extra="forbid")

    duration: Optional[float] = None  # Manual override for max_duration
    speed: float = Field(default_factory=lambda: settings.speed, gt=0)
    easing: Union[str, List[float]] = Field(default_factory=lambda: settings.default_easing)
    loop: bool = False
    autoplay: bool = False
    delay: float = 0.0  # Global timeline delay
    managed_state: bool = False
    get_managed_state: Optional[Callable[..., Any]] = None
    on_update: Optional[Callable[[], Any]] = Field(default=None, validation_alias=AliasChoices("on_update", "update"))
    on_complete: Optional[Callable[[], Any]] = Field(default=None, validation_alias=AliasChoices("on_complete", "complete"))
    gradient_id_cb: Optional[Callable[..., str]] = None
    gradient_setter_cb: Optional[Callable[..., Any]] = None
    update_image_pattern_cb: Optional[Callable[..., Any]] = None
    update_anchor_cb: Optional[Callable[..., Any]] = None
    startup_delay_ms: float = Field(default_factory=lambda: settings.startup_delay_ms, ge=0)
    morph_segments: int = Field(default_factory=lambda: settings.morph_segments, ge=1)
    reshape_steps: int = Field(default_factory=lambda: settings.reshape_steps, ge=1)
