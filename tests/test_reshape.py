import pytest

from svgtween.geometry.bezier import cubic_point
from svgtween.path.outline import cubic_count, parse_numbers
from svgtween.path.reshape import PathReshaper

SHORT = "M0 0C3 0 6 0 9 0"
LONG = "M0 0C1 0 2 0 3 0C4 0 5 0 9 0"


def test_equal_point_counts_are_unchanged():
    assert PathReshaper().reshape(LONG, LONG) == (LONG, LONG)


def test_shorter_outline_receives_the_added_point():
    result = PathReshaper().reshape_detailed(SHORT, LONG)
    assert result.changed
    assert result.reshaped == 0
    assert result.insert_index == 1
    assert result.second == LONG
    assert cubic_count(result.first) == cubic_count(LONG)
    assert result.t == pytest.approx(1 / 3, abs=1e-6)


def test_index_position_follows_sample_order():
    result = PathReshaper(by_length=False).reshape_detailed(SHORT, LONG)
    assert result.changed
    assert result.t == pytest.approx(150 / 301)


def test_synthesized_point_lies_on_original_cubic():
    result = PathReshaper().reshape_detailed(SHORT, LONG)
    numbers = parse_numbers(result.first)
    x, y = numbers[6], numbers[7]
    ox, oy = cubic_point((0, 0), (3, 0), (6, 0), (9, 0), result.t)
    assert x == pytest.approx(ox)
    assert y == pytest.approx(oy)
    assert x == pytest.approx(3, abs=1e-4)


def test_argument_order_is_preserved():
    first, second = PathReshaper().reshape(LONG, SHORT)
    assert first == LONG
    assert cubic_count(second) == 2


def test_added_first_point_leaves_outlines_unchanged():
    longer = "M-1 0C0 0 0 0 0 0C3 0 6 0 9 0"
    shorter = "M0 0C3 0 6 0 9 0"
    result = PathReshaper().reshape_detailed(shorter, longer)
    assert not result.changed
    assert result.as_tuple() == (shorter, longer)


def test_line_outlines_are_converted_before_reshaping():
    first, second = PathReshaper().reshape("M0 0 L9 0", LONG)
    assert first.startswith("M0 0C")
    assert cubic_count(first) == cubic_count(LONG)
    assert second == LONG
