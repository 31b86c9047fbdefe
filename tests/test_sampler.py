import pytest

from svgtween.path.sampler import SvgPathMeasurer, resample, sample


def test_sample_straight_line():
    points = sample("M0 0 L10 0", 10, SvgPathMeasurer())
    assert len(points) == 11
    for i, (x, y) in enumerate(points):
        assert x == pytest.approx(i, abs=1e-6)
        assert y == pytest.approx(0, abs=1e-9)


def test_measure_length_of_polyline_path():
    measure = SvgPathMeasurer().measure("M0 0 L30 0 L30 40")
    assert measure.length == pytest.approx(70)
    x, y = measure.point_at(50)
    assert x == pytest.approx(30)
    assert y == pytest.approx(20, abs=1e-6)


def test_point_at_clamps_distance():
    measure = SvgPathMeasurer().measure("M0 0 L10 0")
    assert measure.point_at(-5) == (0.0, 0.0)
    assert measure.point_at(50) == (10.0, 0.0)


def test_sample_rejects_zero_segments():
    with pytest.raises(ValueError):
        sample("M0 0 L10 0", 0, SvgPathMeasurer())


def test_resample_linear():
    assert resample([(0, 0), (10, 0)], 5) == [(0.0, 0.0), (2.5, 0.0), (5.0, 0.0), (7.5, 0.0), (10.0, 0.0)]


def test_resample_edge_counts():
    assert resample([], 3) == []
    assert resample([(1, 2), (3, 4)], 1) == [(1, 2)]
    assert resample([(1, 2)], 0) == []
