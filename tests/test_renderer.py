import logging

import pytest

from svgtween.animation.records import Ghost
from svgtween.geometry.matrix import Matrix
from svgtween.path.outline import parse_numbers
from svgtween.scene.element import Box

EFFECT_PARAMS = {"effectSelector": "#shadow", "filterSelector": "feDropShadow", "filterProperty": "dx"}


def test_dash_offset_adds_dirty_dasharray(make_timeline, scene):
    tl = make_timeline().add({"targets": "#track", "strokeDashoffset": [{"value": 100, "duration": 1000}]})
    track = scene.find_one("#track")
    tl.seek(50)
    assert track.attr("stroke-dasharray") == "100"
    assert track.attr("stroke-dashoffset") == "50"
    assert tl.renderer.dirty == [(track, "stroke-dasharray")]
    tl.renderer.clean_dirty()
    assert track.attr("stroke-dasharray") is None


def test_existing_dasharray_is_not_dirty(make_timeline, scene):
    track = scene.find_one("#track")
    track.set_attr("stroke-dasharray", "5 5")
    tl = make_timeline().add({"targets": "#track", "strokeDashoffset": [{"value": 100, "duration": 1000}]})
    tl.seek(50)
    assert track.attr("stroke-dasharray") == "5 5"
    assert tl.renderer.dirty == []


def test_stroke_width_attribute(make_timeline, scene):
    tl = make_timeline().add({"targets": "#track", "strokeWidth": [{"value": 4, "duration": 100}]})
    tl.seek(50)
    assert scene.find_one("#track").attr("stroke-width") == "2"


def test_follow_path_translates_along_outline(make_timeline, scene):
    tl = make_timeline().add({"targets": "#box", "followPath": [{"value": "#track", "duration": 1000}]})
    tl.seek(50)
    m = Matrix.parse(scene.find_one("#box").attr("transform"))
    assert m.e == pytest.approx(50, abs=1e-6)
    assert m.f == pytest.approx(0, abs=1e-6)


def test_follow_path_centered_and_rotated(make_timeline, scene):
    scene.find_one("#track").set_attr("d", "M0 0 L0 100")
    tl = make_timeline().add({
        "targets": "#box",
        "followPath": [{"value": "#track", "duration": 1000, "params": {"centered": True, "rotated": True}}],
    })
    tl.seek(50)
    m = Matrix.parse(scene.find_one("#box").attr("transform"))
    # Box centre lands on the path point and the box turns along the tangent
    cx, cy = m.apply(5, 5)
    assert cx == pytest.approx(0, abs=1e-6)
    assert cy == pytest.approx(50, abs=1e-6)
    assert m.b == pytest.approx(1, abs=1e-6)


def test_follow_path_rotates_about_box_centre(make_timeline, scene):
    scene.find_one("#track").set_attr("d", "M0 0 L0 100")
    tl = make_timeline().add({
        "targets": "#box",
        "followPath": [{"value": "#track", "duration": 1000, "params": {"rotated": True}}],
    })
    tl.seek(50)
    m = Matrix.parse(scene.find_one("#box").attr("transform"))
    cx, cy = m.apply(5, 5)
    assert cx == pytest.approx(5, abs=1e-6)
    assert cy == pytest.approx(55, abs=1e-6)
    assert m.b == pytest.approx(1, abs=1e-6)


def test_follow_path_removed_from_scene_is_skipped(make_timeline, scene, caplog):
    tl = make_timeline().add({"targets": "#box", "followPath": [{"value": "#track", "duration": 1000}]})
    scene.root.remove(scene.find_one("#track").node)
    with caplog.at_level(logging.WARNING):
        tl.seek(50)
    assert scene.find_one("#box").attr("transform") is None
    assert "followPath" in caplog.text


def test_solid_color_written_as_hex(make_timeline, scene):
    tl = make_timeline().add({"targets": "#box", "fill": [{"value": "#0000ff", "duration": 100}]})
    tl.seek(100)
    assert scene.find_one("#box").attr("fill") == "#0000ff"


def test_gradient_fill_creates_definition(make_timeline, scene):
    tl = make_timeline().add({
        "targets": "#box",
        "fill": [{"value": "linear-gradient(90deg, red 0%, blue 100%)", "duration": 100}],
    })
    tl.seek(100)
    assert scene.find_one("#box").attr("fill") == "url(#box-fill-gradient)"
    gradient = scene.find_one("#box-fill-gradient")
    assert gradient is not None
    assert gradient.type == "linearGradient"
    assert len(scene.find("#box-fill-gradient stop")) == 2


def test_gradient_callbacks(make_timeline, scene):
    calls = []
    tl = make_timeline(
        gradient_id_cb=lambda el: f"g-{el.id}",
        gradient_setter_cb=lambda el, handle, channel: calls.append((el.id, handle.paint, channel)),
    ).add({"targets": "#box", "fill": [{"value": "radial-gradient(circle, red 0%, blue 100%)", "duration": 100}]})
    tl.seek(50)
    assert calls == [("box", "url(#g-box)", "fill")]
    assert scene.find_one("#g-box").type == "radialGradient"
    assert scene.find_one("#box").attr("fill") == "#ff0000"


def test_size_and_image_pattern_callback(make_timeline, scene):
    calls = []
    tl = make_timeline(update_image_pattern_cb=lambda el, w, h: calls.append((w, h))).add(
        {"targets": "#box", "width": [{"value": 20, "duration": 100}]}
    )
    tl.seek(50)
    assert scene.find_one("#box").attr("width") == "15"
    assert calls == [(15.0, 10.0)]


def test_text_size_uses_font_size(make_timeline, scene):
    tl = make_timeline().add({"targets": "#label", "height": [{"value": 30, "duration": 100}]})
    tl.seek(100)
    assert scene.find_one("#label").attr("font-size") == "30"


def test_effect_writes_filter_attribute(make_timeline, scene):
    tl = make_timeline().add({
        "targets": "#box",
        "effectX": [{"value": 10, "duration": 100, "params": EFFECT_PARAMS}],
    })
    tl.seek(50)
    assert scene.find_one("#shadow").find_one("feDropShadow").attr("dx") == "5"


def test_anchor_callback_and_scale_pivot(make_timeline, scene):
    anchors = []
    tl = make_timeline(update_anchor_cb=lambda el, anchor: anchors.append(anchor)).add({
        "targets": "#box",
        "anchor": [{"value": [0, 0], "duration": 100}],
        "scaleX": [{"value": 2, "duration": 100}],
    })
    tl.seek(100)
    assert anchors[-1] == (0.0, 0.0)
    m = Matrix.parse(scene.find_one("#box").attr("transform"))
    # Top-left corner is the pivot once the anchor reaches (0, 0)
    assert m.apply(0, 0) == pytest.approx((0, 0))
    assert m.apply(10, 0) == pytest.approx((20, 0))


def test_morph_to_writes_path_data(make_timeline, scene):
    tl = make_timeline().add({"targets": "#shape", "morphTo": [{"value": "#target", "duration": 100}]})
    tl.seek(100)
    numbers = parse_numbers(scene.find_one("#shape").attr("d"))
    assert numbers == pytest.approx([5, -5, 5, -5, 5, 5, 5, 5])
    tl.seek(0)
    assert scene.find_one("#shape").attr("d") == "M0 0C0 0 10 0 10 0"


def test_path_data_tween(make_timeline, scene):
    tl = make_timeline().add({"targets": "#shape", "d": [{"value": "M0 10C0 10 10 10 10 10", "duration": 100}]})
    tl.seek(50)
    assert parse_numbers(scene.find_one("#shape").attr("d")) == [0, 5, 0, 5, 10, 5, 10, 5]


def test_ghost_refreshes_only_on_geometry_change():
    ghost = Ghost(bbox=Box(0, 0, 10, 10))
    assert ghost.geometry_changed(1, "M0 0")
    assert not ghost.geometry_changed(1, "M0 0")
    assert ghost.geometry_changed(1, "M1 1")
    assert ghost.geometry_changed(2, "M1 1")
