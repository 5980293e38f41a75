import numpy as np
import pytest

from rayfield.core.geometry import Point
from rayfield.motion.path import PolylinePath, StaticPath


def test_static_path_frames() -> None:
    path = StaticPath(Point(400.0, 300.0))
    frames = list(path.frames(3))
    assert [t for t, _ in frames] == [0.0, 0.0, 0.0]
    assert all(p == Point(400.0, 300.0) for _, p in frames)
    assert path.sample(99.0) == Point(400.0, 300.0)


def test_polyline_interpolates_at_constant_speed() -> None:
    path = PolylinePath([(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)], speed=2.0)
    assert path.duration_s() == 10.0
    assert path.sample(2.5) == Point(5.0, 0.0)
    assert path.sample(7.5) == Point(10.0, 5.0)
    assert path.sample(-1.0) == Point(0.0, 0.0)
    assert path.sample(50.0) == Point(10.0, 10.0)


def test_polyline_frames_span_whole_path() -> None:
    path = PolylinePath([(0.0, 0.0), (100.0, 0.0)], speed=50.0)
    frames = list(path.frames(5))
    np.testing.assert_allclose([t for t, _ in frames], [0.0, 0.5, 1.0, 1.5, 2.0])
    assert frames[0][1] == Point(0.0, 0.0)
    assert frames[-1][1] == Point(100.0, 0.0)
    assert path.waypoints == [Point(0.0, 0.0), Point(100.0, 0.0)]


@pytest.mark.parametrize(
    "waypoints, speed",
    [
        ([(0.0, 0.0)], 1.0),
        ([(0.0, 0.0), (1.0, 1.0)], 0.0),
        ([(0.0, 0.0), (0.0, 0.0)], 1.0),
        ([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)], 1.0),
    ],
)
def test_polyline_rejects_bad_input(waypoints, speed) -> None:
    with pytest.raises(ValueError):
        PolylinePath(waypoints, speed=speed)


def test_frames_rejects_non_positive_count() -> None:
    with pytest.raises(ValueError):
        list(StaticPath(Point(0.0, 0.0)).frames(0))
