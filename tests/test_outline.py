import pytest

from svgtween.errors import OutlineError
from svgtween.path.outline import (
    ARC_PIECES,
    ControlPointArena,
    cubic_count,
    cubic_endpoints,
    format_number,
    is_cubic_outline,
    parse_numbers,
    render_numbers,
    render_points,
    subpath_count,
    to_cubic_outline,
)


def test_format_number():
    assert format_number(3.0) == "3"
    assert format_number(0.0) == "0"
    assert format_number(-0.0) == "0"
    assert format_number(1.5) == "1.5"


def test_parse_numbers_handles_commas_and_exponents():
    assert parse_numbers("M 1,2 C-3.5 4e1 .5 6 7 8") == [1.0, 2.0, -3.5, 40.0, 0.5, 6.0, 7.0, 8.0]


def test_render_numbers():
    assert render_numbers([0, 0, 1, 2, 3, 4, 5, 6]) == "M0 0C1 2 3 4 5 6"


def test_render_numbers_needs_move_point():
    with pytest.raises(OutlineError):
        render_numbers([1])


def test_cubic_count_counts_number_groups():
    assert cubic_count("M0 0C1 1 2 2 3 3C4 4 5 5 6 6") == 2
    assert cubic_count("M0 0C1 1 2 2 3 3 4 4 5 5 6 6") == 2
    assert cubic_count("M0 0") == 0


def test_cubic_outline_is_returned_as_given():
    d = "M0 0C1 1 2 2 3 3 4 4 5 5 6 6"
    assert is_cubic_outline(d)
    assert to_cubic_outline(d) == d


def test_to_cubic_outline_converts_lines_and_relative_commands():
    assert to_cubic_outline("M0 0 L9 0") == "M0 0C3 0 6 0 9 0"
    assert to_cubic_outline("M0 0c1 1 2 2 3 3") == "M0 0C1 1 2 2 3 3"


def test_to_cubic_outline_elevates_quadratics():
    assert to_cubic_outline("M0 0Q3 3 6 0") == "M0 0C2 2 4 2 6 0"


def test_to_cubic_outline_approximates_arcs():
    d = to_cubic_outline("M0 0 A5 5 0 0 1 10 0")
    assert is_cubic_outline(d)
    assert cubic_count(d) == ARC_PIECES
    numbers = parse_numbers(d)
    assert numbers[-2] == pytest.approx(10)
    assert numbers[-1] == pytest.approx(0, abs=1e-9)


def test_to_cubic_outline_starts_a_move_per_subpath():
    d = to_cubic_outline("M0 0 L3 0 M10 10 L13 10")
    assert d == "M0 0C1 0 2 0 3 0M10 10C11 10 12 10 13 10"
    assert subpath_count(d) == 2


def test_to_cubic_outline_rejects_partial_cubic():
    with pytest.raises(OutlineError):
        to_cubic_outline("M0 0C1 1 2 2")


def test_to_cubic_outline_keeps_bare_move_and_empty():
    assert to_cubic_outline("M5 5") == "M5 5"
    assert to_cubic_outline("") == ""


def test_cubic_endpoints():
    assert cubic_endpoints([0, 0, 1, 2, 3, 4, 5, 6]) == [(5, 6)]


def test_render_points_uses_third_controls():
    assert render_points([(0, 0), (3, 3)]) == "M0 0C1 1 2 2 3 3"
    assert render_points([]) == ""


def test_arena_round_trip():
    d = "M0 0C1 0 2 0 3 0C4 0 5 0 6 0"
    arena = ControlPointArena.parse(d)
    assert len(arena) == 3
    assert arena.render() == d


def test_arena_insert_reindexes_owners():
    arena = ControlPointArena.parse("M0 0C1 0 2 0 3 0C4 0 5 0 6 0")
    arena.insert(1, 1.5, 0, (1, 0), (2, 0))
    assert [p.cp0.owner for p in arena] == [0, 1, 2, 3]
    assert arena.owner_of(arena[3].cp1) is arena[3]
