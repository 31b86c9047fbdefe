"""File utilities."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def ensure_dir(path: str) -> Path:
    """Ensure directory exists and return Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def read_text_file(path: str) -> str:
    """Read a text file as UTF-8, falling back to errors="ignore"."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return p.read_text(encoding="utf-8", errors="ignore")


def read_json_file(path: str) -> Any:
    """Load a JSON document (animation spec files)."""
    try:
        return json.loads(read_text_file(path))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {Path(path).name}: {exc}") from exc
