import math

import numpy as np
import pytest

from rayfield.core.geometry import Point, Ray, Segment
from rayfield.core.scene import DEFAULT_WALLS, Scene


def test_ray_from_angle_is_unit_length() -> None:
    for angle in (0.0, 0.3, math.pi / 2, 2.5, 4.0):
        ray = Ray.from_angle(Point(3.0, -2.0), angle)
        assert math.isclose(math.hypot(ray.direction.x, ray.direction.y), 1.0)


def test_ray_point_at() -> None:
    ray = Ray(Point(1.0, 1.0), Point(1.0, 0.0))
    assert ray.point_at(4.0) == Point(5.0, 1.0)


def test_segment_is_immutable() -> None:
    wall = Segment(0.0, 0.0, 1.0, 1.0)
    with pytest.raises(AttributeError):
        wall.x1 = 5.0  # type: ignore[misc]


def test_segment_contains_exact_points() -> None:
    wall = Segment(300.0, 100.0, 300.0, 300.0)
    assert wall.contains(Point(300.0, 200.0))
    assert wall.contains(Point(300.0, 100.0))
    assert wall.contains(Point(300.0, 300.0))
    assert not wall.contains(Point(300.0, 301.0))
    assert not wall.contains(Point(301.0, 200.0))


def test_segment_contains_diagonal() -> None:
    wall = Segment(400.0, 400.0, 500.0, 500.0)
    assert wall.contains(Point(450.0, 450.0))
    assert not wall.contains(Point(550.0, 550.0))
    assert not wall.contains(Point(450.0, 451.0))


def test_scene_preserves_order_and_is_read_only() -> None:
    scene = Scene.default()
    assert len(scene) == len(DEFAULT_WALLS)
    assert [w.as_tuple() for w in scene] == [tuple(w) for w in DEFAULT_WALLS]
    arr = scene.segment_array()
    assert arr.shape == (7, 4)
    with pytest.raises(ValueError):
        arr[0, 0] = 1.0


def test_scene_rejects_malformed_rows() -> None:
    with pytest.raises(ValueError):
        Scene.from_coordinates([(0.0, 0.0, 1.0)])


def test_scene_bounds_and_wall_touching() -> None:
    scene = Scene.default()
    assert scene.bounds() == (100.0, 600.0, 100.0, 600.0)
    assert scene.wall_touching(Point(300.0, 200.0)) == scene.walls[1]
    assert scene.wall_touching(Point(420.0, 260.0)) is None


def test_empty_scene_array_shape() -> None:
    scene = Scene([])
    assert scene.segment_array().shape == (0, 4)
    np.testing.assert_array_equal(scene.segment_array(), np.zeros((0, 4)))


def test_segment_endpoints_and_length() -> None:
    wall = Segment(100.0, 300.0, 100.0, 100.0)
    assert wall.start == Point(100.0, 300.0)
    assert wall.end == Point(100.0, 100.0)
    assert wall.length == 200.0
