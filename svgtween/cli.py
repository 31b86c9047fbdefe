"""CLI interface."""
from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer

from svgtween.animation.scheduler import ManualFrameScheduler
from svgtween.animation.timeline import Timeline
from svgtween.errors import SvgTweenError
from svgtween.scene.svg_scene import SvgScene
from svgtween.utils.config import settings
from svgtween.utils.file_utils import ensure_dir, read_json_file, read_text_file

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)

# Timeline options a JSON spec file may set; callbacks are code-only.
FILE_OPTIONS = ("duration", "speed", "easing", "loop", "delay", "startup_delay_ms", "morph_segments", "reshape_steps")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level.")):
    """Render frames of SVG tween timelines."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_specs(path: str) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Accept one spec, a list of specs, or {"options": {...}, "animations": [...]}."""
    data = read_json_file(path)
    options: Dict[str, Any] = {}
    if isinstance(data, dict) and "animations" in data:
        options = {k: v for k, v in (data.get("options") or {}).items() if k in FILE_OPTIONS}
        data = data["animations"]
    specs = data if isinstance(data, list) else [data]
    return options, specs


def _build_timeline(svg: str, spec: str) -> Tuple[SvgScene, Timeline]:
    try:
        scene = SvgScene.from_string(read_text_file(svg))
        options, specs = _load_specs(spec)
        timeline = Timeline(scene, scheduler=ManualFrameScheduler(), **options)
        for item in specs:
            timeline.add(item)
    except (SvgTweenError, ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    for issue in timeline.compile_issues:
        logger.warning(f"Not animated: {issue}")
    return scene, timeline


@app.command()
def render(
    svg: str = typer.Argument(..., help="Source SVG file."),
    spec: str = typer.Option(..., "--spec", "-s", help="Animation spec JSON file."),
    at: float = typer.Option(100.0, "--at", help="Timeline position in percent."),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output SVG path."),
):
    """Write a single frame of the timeline."""
    scene, timeline = _build_timeline(svg, spec)
    timeline.seek(at)
    if out is None:
        out = str(ensure_dir(settings.output_dir) / f"{Path(svg).stem}-{at:g}.svg")
    else:
        ensure_dir(str(Path(out).parent))
    Path(out).write_text(scene.to_string(), encoding="utf-8")
    typer.echo(out)


@app.command()
def frames(
    svg: str = typer.Argument(..., help="Source SVG file."),
    spec: str = typer.Option(..., "--spec", "-s", help="Animation spec JSON file."),
    fps: int = typer.Option(30, "--fps", min=1, help="Frames per second."),
    out_dir: Optional[str] = typer.Option(None, "--out-dir", help="Directory for frame files."),
):
    """Write one SVG per frame over the whole timeline."""
    scene, timeline = _build_timeline(svg, spec)
    target = ensure_dir(out_dir or str(Path(settings.output_dir) / Path(svg).stem))
    duration = timeline.max_duration
    count = int(math.floor(duration * fps / 1000)) + 1
    for index in range(count):
        timeline.time(min(duration, index * 1000 / fps))
        frame = target / f"frame_{index:04d}.svg"
        frame.write_text(scene.to_string(), encoding="utf-8")
    logger.info(f"Wrote {count} frame(s) to {target}")
    typer.echo(json.dumps({"frames": count, "duration": duration, "out_dir": str(target)}, indent=2))


@app.command()
def info(
    svg: str = typer.Argument(..., help="Source SVG file."),
    spec: str = typer.Option(..., "--spec", "-s", help="Animation spec JSON file."),
):
    """Print duration and compiled record counts as JSON."""
    _, timeline = _build_timeline(svg, spec)
    result = {
        "duration": timeline.max_duration,
        "items": len(timeline.items),
        "records": len(timeline.records),
        "issues": [str(issue) for issue in timeline.compile_issues],
    }
    typer.echo(json.dumps(result, indent=2))


if __name__ == "__main__":
    app()
