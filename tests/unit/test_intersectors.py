from __future__ import annotations

import math

import numpy as np
import pytest

from rayfield.core.geometry import Point, Ray, Segment
from rayfield.core.intersector import (
    AutoIntersector,
    NumpyIntersector,
    PythonIntersector,
    cast,
    make_intersector,
)
from rayfield.core.scene import Scene

BACKENDS = [PythonIntersector, NumpyIntersector]


def _ray_x() -> Ray:
    return Ray.from_angle(Point(0.0, 0.0), 0.0)


def test_cast_hits_perpendicular_wall() -> None:
    hit = cast(_ray_x(), Segment(10.0, -5.0, 10.0, 5.0))
    assert hit is not None
    assert hit.point == Point(10.0, 0.0)
    assert hit.distance == 10.0


def test_cast_parallel_wall_misses() -> None:
    assert cast(_ray_x(), Segment(0.0, 5.0, 10.0, 5.0)) is None


def test_cast_collinear_wall_misses() -> None:
    assert cast(_ray_x(), Segment(5.0, 0.0, 10.0, 0.0)) is None


def test_cast_wall_behind_origin_misses() -> None:
    assert cast(_ray_x(), Segment(-10.0, -5.0, -10.0, 5.0)) is None


def test_cast_outside_span_misses() -> None:
    assert cast(_ray_x(), Segment(10.0, 1.0, 10.0, 5.0)) is None


def test_cast_endpoint_counts_as_hit() -> None:
    hit = cast(_ray_x(), Segment(10.0, 0.0, 10.0, 5.0))
    assert hit is not None
    assert hit.point == Point(10.0, 0.0)


def test_cast_origin_on_wall_hits_at_zero() -> None:
    ray = Ray.from_angle(Point(10.0, 0.0), 0.0)
    hit = cast(ray, Segment(10.0, -5.0, 10.0, 5.0))
    assert hit is not None
    assert hit.distance == 0.0


def test_cast_diagonal_wall() -> None:
    ray = Ray.from_angle(Point(0.0, 0.0), math.pi / 4)
    hit = cast(ray, Segment(0.0, 10.0, 10.0, 0.0))
    assert hit is not None
    assert math.isclose(hit.point.x, 5.0)
    assert math.isclose(hit.point.y, 5.0)
    assert math.isclose(hit.distance, math.sqrt(50.0))


@pytest.mark.parametrize("backend", BACKENDS)
def test_nearest_picks_closest_wall(backend) -> None:
    # farther wall listed first so scene order cannot decide
    scene = Scene([Segment(8.0, -1.0, 8.0, 1.0), Segment(5.0, -1.0, 5.0, 1.0)])
    hits = backend().nearest(Point(0.0, 0.0), np.array([0.0]), scene)
    assert hits.hit_mask.tolist() == [True]
    assert hits.distances[0] == 5.0
    assert hits.wall_index[0] == 1
    np.testing.assert_allclose(hits.points[0], [5.0, 0.0])


@pytest.mark.parametrize("backend", BACKENDS)
def test_nearest_ties_keep_first_wall(backend) -> None:
    scene = Scene([Segment(5.0, -1.0, 5.0, 1.0), Segment(5.0, -2.0, 5.0, 2.0)])
    hits = backend().nearest(Point(0.0, 0.0), np.array([0.0]), scene)
    assert hits.wall_index[0] == 0


@pytest.mark.parametrize("backend", BACKENDS)
def test_nearest_reports_misses_without_infinity(backend) -> None:
    scene = Scene([Segment(5.0, -1.0, 5.0, 1.0)])
    hits = backend().nearest(Point(0.0, 0.0), np.array([0.0, math.pi]), scene)
    assert hits.hit_mask.tolist() == [True, False]
    assert math.isnan(hits.distances[1])
    assert hits.wall_index[1] == -1
    assert not np.isinf(hits.distances).any()


@pytest.mark.parametrize("backend", BACKENDS)
def test_nearest_empty_scene(backend) -> None:
    hits = backend().nearest(Point(0.0, 0.0), np.array([0.0, 1.0]), Scene([]))
    assert hits.hit_mask.tolist() == [False, False]


def test_numpy_matches_python_on_default_scene() -> None:
    scene = Scene.default()
    origin = Point(420.0, 260.0)
    angles = np.deg2rad(np.arange(360, dtype=np.float64))
    ref = PythonIntersector().nearest(origin, angles, scene)
    vec = NumpyIntersector().nearest(origin, angles, scene)
    np.testing.assert_array_equal(vec.hit_mask, ref.hit_mask)
    np.testing.assert_array_equal(vec.wall_index, ref.wall_index)
    np.testing.assert_allclose(vec.distances[ref.hit_mask], ref.distances[ref.hit_mask], rtol=1e-9)
    np.testing.assert_allclose(vec.points[ref.hit_mask], ref.points[ref.hit_mask], rtol=1e-9, atol=1e-9)


def test_nearest_equals_min_over_walls() -> None:
    scene = Scene.default()
    origin = Point(250.0, 200.0)
    angles = np.deg2rad(np.arange(0.0, 360.0, 7.0))
    hits = NumpyIntersector().nearest(origin, angles, scene)
    for i, angle in enumerate(angles):
        ray = Ray.from_angle(origin, float(angle))
        dists = [h.distance for h in (cast(ray, w) for w in scene) if h is not None]
        if not dists:
            assert not hits.hit_mask[i]
        else:
            assert hits.hit_mask[i]
            assert math.isclose(hits.distances[i], min(dists), rel_tol=1e-9)


def test_auto_intersector_uses_numpy() -> None:
    auto = AutoIntersector()
    scene = Scene([Segment(10.0, -5.0, 10.0, 5.0)])
    hits = auto.nearest(Point(0.0, 0.0), np.array([0.0]), scene)
    assert isinstance(auto._impl, NumpyIntersector)
    assert hits.distances[0] == 10.0


def test_make_intersector_rejects_unknown() -> None:
    assert isinstance(make_intersector("python"), PythonIntersector)
    with pytest.raises(ValueError):
        make_intersector("embree")
