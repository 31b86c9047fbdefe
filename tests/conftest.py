import pytest

from svgtween.animation.scheduler import ManualFrameScheduler
from svgtween.animation.timeline import Timeline
from svgtween.scene.svg_scene import SvgScene


SCENE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200">
  <defs>
    <filter id="shadow"><feDropShadow dx="0" dy="0" stdDeviation="1"/></filter>
  </defs>
  <rect id="box" x="0" y="0" width="10" height="10" fill="#ff0000"/>
  <g id="dots">
    <circle class="dot" cx="5" cy="5" r="5"/>
    <circle class="dot" cx="25" cy="5" r="5"/>
    <circle class="dot" cx="45" cy="5" r="5"/>
  </g>
  <path id="track" d="M0 0 L100 0" fill="none" stroke="#000"/>
  <path id="shape" d="M0 0C0 0 10 0 10 0" stroke="#000"/>
  <path id="target" d="M0 0C0 0 0 10 0 10" stroke="#000"/>
  <text id="label" x="0" y="50" font-size="10">Hi</text>
</svg>"""


@pytest.fixture
def scene() -> SvgScene:
    return SvgScene.from_string(SCENE_SVG)


@pytest.fixture
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler(frame_interval_ms=10)


@pytest.fixture
def make_timeline(scene, scheduler):
    """Timeline factory on the shared scene with no startup delay."""

    def factory(**options) -> Timeline:
        options.setdefault("startup_delay_ms", 0)
        return Timeline(scene, scheduler=scheduler, **options)

    return factory


@pytest.fixture
def scene_svg() -> str:
    return SCENE_SVG
