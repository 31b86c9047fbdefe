import pytest

from svgtween.animation.scheduler import ManualFrameScheduler
from svgtween.animation.timeline import Timeline

MOVE_BOX = {"targets": "#box", "translateX": [{"value": 100, "duration": 1000}]}
STAGGERED_DOTS = {
    "targets": ".dot",
    "translateX": [{"value": 100, "duration": 100, "delay": [0, 1, 100]}],
}


def test_max_duration_is_latest_end(make_timeline):
    tl = make_timeline()
    tl.add({
        "targets": "#box",
        "translateX": [{"value": 10, "duration": 400, "delay": 200}],
        "fill": [{"value": "#0000ff", "duration": 500}],
    })
    assert tl.max_duration == 600


def test_duration_override(make_timeline):
    tl = make_timeline(duration=2000).add(MOVE_BOX)
    assert tl.max_duration == 2000


def test_seek_writes_transform(make_timeline, scene):
    tl = make_timeline().add(MOVE_BOX)
    tl.seek(50)
    assert scene.find_one("#box").attr("transform") == "matrix(1,0,0,1,50,0)"
    assert tl.progress == 50
    assert tl.clock.elapsed == 500


def test_seek_is_idempotent(make_timeline, scene):
    tl = make_timeline().add(MOVE_BOX)
    tl.add({"targets": "#box", "fill": [{"value": "#0000ff", "duration": 1000}]})
    tl.seek(30)
    once = scene.to_string()
    tl.seek(30)
    assert scene.to_string() == once
    tl.seek(80)
    tl.seek(30)
    assert scene.to_string() == once


def test_seek_zero_restores_fresh_state(make_timeline, scene):
    fresh = scene.to_string()
    tl = make_timeline().add(MOVE_BOX)
    tl.seek(100)
    assert scene.to_string() != fresh
    tl.seek(0)
    assert scene.to_string() == fresh


def test_seek_zero_keeps_existing_skew(make_timeline, scene):
    box = scene.find_one("#box")
    box.set_attr("transform", "skewX(30)")
    before = box.transform()
    tl = make_timeline().add(MOVE_BOX)
    tl.seek(60)
    tl.seek(0)
    after = box.transform()
    for got, want in zip(after.values(), before.values()):
        assert got == pytest.approx(want, abs=1e-9)


def test_time_converts_to_percent(make_timeline):
    tl = make_timeline().add(MOVE_BOX)
    tl.time(250)
    assert tl.progress == 25


def test_time_on_empty_timeline(make_timeline):
    tl = make_timeline()
    tl.time(250)
    assert tl.progress == 0


def test_play_runs_to_completion(make_timeline, scheduler, scene):
    events = []
    tl = make_timeline(on_complete=lambda: events.append("done"), on_update=lambda: events.append("tick"))
    tl.add(MOVE_BOX)
    tl.play()
    scheduler.advance(500)
    assert tl.is_playing
    assert 0 < tl.progress < 100
    scheduler.advance(600)
    assert not tl.is_playing
    assert tl.is_completed
    assert tl.progress == 100
    assert events.count("done") == 1
    assert "tick" in events
    assert scene.find_one("#box").attr("transform") == "matrix(1,0,0,1,100,0)"


def test_loop_wraps_elapsed(make_timeline, scheduler):
    tl = make_timeline(loop=True).add(MOVE_BOX)
    tl.play()
    scheduler.advance(1060)
    assert tl.is_playing
    assert tl.clock.elapsed == pytest.approx(50)
    assert not tl.is_completed


def test_reverse_loop_wraps_to_the_end(make_timeline, scheduler):
    tl = make_timeline(loop=True).add(MOVE_BOX)
    tl.seek(100)
    tl.reverse()
    scheduler.advance(1060)
    assert tl.is_playing
    assert tl.clock.direction == -1
    assert tl.clock.elapsed == pytest.approx(940)
    assert not tl.is_completed


def test_speed_scales_elapsed(make_timeline, scheduler):
    tl = make_timeline(speed=2).add(MOVE_BOX)
    tl.play()
    scheduler.advance(210)
    assert tl.clock.elapsed == pytest.approx(400)


def test_startup_delay_defers_play(scene, scheduler):
    tl = Timeline(scene, scheduler=scheduler, startup_delay_ms=100).add(MOVE_BOX)
    tl.play()
    scheduler.advance(50)
    assert not tl.is_playing
    scheduler.advance(100)
    assert tl.is_playing


def test_pause_cancels_pending_start(scene, scheduler):
    tl = Timeline(scene, scheduler=scheduler, startup_delay_ms=100).add(MOVE_BOX)
    tl.play()
    tl.pause()
    scheduler.advance(500)
    assert not tl.is_playing
    assert tl.clock.elapsed == 0


def test_pause_freezes_clock(make_timeline, scheduler):
    tl = make_timeline().add(MOVE_BOX)
    tl.play()
    scheduler.advance(300)
    tl.pause()
    frozen = tl.clock.elapsed
    scheduler.advance(300)
    assert tl.clock.elapsed == frozen
    tl.pause()
    assert not tl.is_playing


def test_reverse_returns_to_baseline(make_timeline, scheduler, scene):
    tl = make_timeline().add(MOVE_BOX)
    tl.seek(100)
    tl.reverse()
    scheduler.advance(1100)
    assert not tl.is_playing
    assert tl.clock.elapsed == 0
    assert not tl.is_completed
    assert scene.find_one("#box").attr("transform") is None


def test_restart_resets_staggered_targets(make_timeline, scheduler, scene):
    tl = make_timeline().add({
        "targets": ".dot",
        "translateX": [{"value": 100, "duration": 100, "delay": [0, 1, 100]}],
    })
    assert tl.max_duration == 300
    tl.play()
    scheduler.advance(400)
    assert tl.is_completed
    assert all(dot.attr("transform") for dot in scene.find(".dot"))
    tl.restart()
    assert all(dot.attr("transform") is None for dot in scene.find(".dot"))


def test_playing_skips_targets_before_their_delay(make_timeline, scheduler, scene):
    tl = make_timeline().add({
        "targets": ".dot",
        "translateX": [{"value": 100, "duration": 100, "delay": [0, 1, 100]}],
    })
    tl.play()
    scheduler.advance(60)
    first, second, third = scene.find(".dot")
    assert first.attr("transform") is not None
    assert second.attr("transform") is None
    assert third.attr("transform") is None


def test_seek_renders_staggered_targets_before_their_delay(make_timeline, scene):
    tl = make_timeline().add(STAGGERED_DOTS)
    for dot in scene.find(".dot"):
        dot.set_attr("transform", "translate(7 0)")
    tl.seek(50)
    first, second, third = scene.find(".dot")
    assert first.attr("transform") == "matrix(1,0,0,1,100,0)"
    assert second.attr("transform") == "matrix(1,0,0,1,50,0)"
    assert third.attr("transform") is None


def test_play_leaves_targets_before_their_delay_untouched(make_timeline, scheduler, scene):
    tl = make_timeline().add(STAGGERED_DOTS)
    for dot in scene.find(".dot"):
        dot.set_attr("transform", "translate(7 0)")
    tl.play()
    scheduler.advance(60)
    first, second, third = scene.find(".dot")
    assert first.attr("transform") != "translate(7 0)"
    assert second.attr("transform") == "translate(7 0)"
    assert third.attr("transform") == "translate(7 0)"


def test_seek_skips_later_steps_before_their_delay(make_timeline, scene):
    tl = make_timeline().add({
        "targets": "#box",
        "translateX": [
            {"value": 50, "duration": 100},
            {"value": 100, "duration": 100, "delay": 200},
        ],
    })
    assert tl.max_duration == 300
    tl.time(75)
    assert scene.find_one("#box").attr("transform") == "matrix(1,0,0,1,37.5,0)"


def test_seek_zero_after_pause_resets_delayed_target(make_timeline, scheduler, scene):
    fresh = scene.to_string()
    tl = make_timeline().add({"targets": "#box", "translateX": [{"value": 100, "duration": 100, "delay": 200}]})
    tl.play()
    scheduler.advance(260)
    tl.pause()
    assert scene.find_one("#box").attr("transform") is not None
    tl.seek(0)
    assert scene.find_one("#box").attr("transform") is None
    assert scene.to_string() == fresh


def test_remove_restores_snapshot(make_timeline, scene):
    tl = make_timeline().add(MOVE_BOX)
    tl.add({"targets": ".dot", "translateY": [{"value": 10, "duration": 100}]})
    tl.seek(100)
    tl.remove("#box")
    assert scene.find_one("#box").attr("transform") is None
    assert [item.targets for item in tl.items] == [".dot", ".dot", ".dot"]
    assert tl.max_duration == 100


def test_compile_issues_are_exposed(make_timeline):
    tl = make_timeline().add({"targets": "#shape", "morphTo": [{"value": "#missing", "duration": 100}]})
    assert len(tl.compile_issues) == 1
    assert "morphTo" in str(tl.compile_issues[0])


def test_autoplay_starts_after_add(make_timeline, scheduler):
    tl = make_timeline(autoplay=True).add(MOVE_BOX)
    scheduler.advance(20)
    assert tl.is_playing


def test_config_and_options_merge(scene):
    from svgtween.animation.schema import TimelineConfig

    tl = Timeline(scene, TimelineConfig(speed=3), loop=True)
    assert tl.config.speed == 3
    assert tl.config.loop
    assert isinstance(tl.scheduler, ManualFrameScheduler)
