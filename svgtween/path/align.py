"""Cyclic alignment of closed point sequences."""
from __future__ import annotations

from typing import List, Sequence, Tuple

Point = Tuple[float, float]


def rotation_cost(a: Sequence[Point], b: Sequence[Point], shift: int) -> float:
    n = len(a)
    score = 0.0
    for i in range(n):
        j = (i + shift) % n
        dx = a[i][0] - b[j][0]
        dy = a[i][1] - b[j][1]
        score += dx * dx + dy * dy
    return score


def best_rotation(a: Sequence[Point], b: Sequence[Point]) -> int:
    """Shift of b minimizing the summed squared distance to a; first minimum wins."""
    n = len(a)
    if n == 0:
        return 0
    if len(b) != n:
        raise ValueError(f"Cannot align sequences of different length ({n} vs {len(b)})")
    best_shift = 0
    best_score = float("inf")
    for shift in range(n):
        score = rotation_cost(a, b, shift)
        if score < best_score:
            best_score = score
            best_shift = shift
    return best_shift


def rotate(points: Sequence[Point], shift: int) -> List[Point]:
    points = list(points)
    return points[shift:] + points[:shift]


def align_by_rotation(a: Sequence[Point], b: Sequence[Point]) -> List[Point]:
    """Return b cyclically rotated onto a."""
    return rotate(b, best_rotation(a, b))
