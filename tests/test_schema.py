import pytest
from pydantic import ValidationError

from svgtween.animation.schema import AnimationSpec, AnimationStep, TimelineConfig
from svgtween.utils.config import Settings


def test_flat_spec_form():
    spec = AnimationSpec.model_validate({
        "targets": "#box",
        "translateX": [{"value": 100, "duration": 500}],
        "fill": {"value": "red", "duration": 200},
        "rotate": None,
    })
    assert spec.targets == "#box"
    assert list(spec.properties) == ["translateX", "fill"]
    assert spec.properties["fill"][0].value == "red"


def test_stagger_delay_shape():
    step = AnimationStep(value=1, delay=[0, 2, 50])
    assert step.staggered
    assert not AnimationStep(value=1, delay=10).staggered
    with pytest.raises(ValidationError):
        AnimationStep(value=1, delay=[0, 2])


def test_custom_easing_needs_four_numbers():
    assert AnimationStep(value=1, easing=[0.1, 0.2, 0.3, 0.4]).easing == [0.1, 0.2, 0.3, 0.4]
    with pytest.raises(ValidationError):
        AnimationStep(value=1, easing=[0.1, 0.2])


def test_timeline_config_defaults_and_aliases():
    calls = []
    config = TimelineConfig(update=lambda: calls.append("u"), complete=lambda: calls.append("c"))
    assert config.speed == 1.0
    assert config.easing == "linear"
    assert config.startup_delay_ms == 100.0
    config.on_update()
    config.on_complete()
    assert calls == ["u", "c"]


def test_timeline_config_rejects_unknown_and_bad_speed():
    with pytest.raises(ValidationError):
        TimelineConfig(bogus=True)
    with pytest.raises(ValidationError):
        TimelineConfig(speed=0)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SVGTWEEN_MORPH_SEGMENTS", "40")
    monkeypatch.setenv("SVGTWEEN_FRAME_MS", "20")
    fresh = Settings()
    assert fresh.morph_segments == 40
    assert fresh.frame_interval_ms == 20.0
