from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol
import math
import numpy as np

from .geometry import Hit, Point, Ray, Segment
from .scene import Scene
from .utils import get_logger

_log = get_logger()


def cast(ray: Ray, wall: Segment) -> Optional[Hit]:
    """Intersect a ray with one wall.

    Solves the line-line system for the wall parameter ``t`` and the ray
    parameter ``u``. Bounds are closed: ``0 <= t <= 1`` and ``u >= 0``, so
    wall endpoints block and an origin on the wall hits at distance 0.
    Parallel and collinear pairs (``den == 0``) never hit.
    """
    x1, y1, x2, y2 = wall.x1, wall.y1, wall.x2, wall.y2
    x3, y3 = ray.origin.x, ray.origin.y
    x4, y4 = x3 + ray.direction.x, y3 + ray.direction.y

    den = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if den == 0:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / den
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / den
    if not (0.0 <= t <= 1.0 and u >= 0.0):
        return None

    px = x1 + t * (x2 - x1)
    py = y1 + t * (y2 - y1)
    return Hit(Point(px, py), math.hypot(px - x3, py - y3))


@dataclass
class NearestHits:
    """Nearest wall hit per direction. Misses are ``False`` in ``hit_mask``."""
    distances: np.ndarray    # (M,) NaN where no hit
    points: np.ndarray       # (M, 2) NaN where no hit
    wall_index: np.ndarray   # (M,) -1 where no hit
    hit_mask: np.ndarray     # (M,) bool

    @classmethod
    def empty(cls, n_rays: int) -> "NearestHits":
        return cls(
            distances=np.full((n_rays,), np.nan, dtype=np.float64),
            points=np.full((n_rays, 2), np.nan, dtype=np.float64),
            wall_index=np.full((n_rays,), -1, dtype=np.int64),
            hit_mask=np.zeros((n_rays,), dtype=bool),
        )


class Intersector(Protocol):
    def nearest(self, origin: Point, angles: np.ndarray, scene: Scene) -> NearestHits: ...


class PythonIntersector:
    """Scalar reference backend: one ``cast`` per ray per wall."""

    def nearest(self, origin: Point, angles: np.ndarray, scene: Scene) -> NearestHits:
        out = NearestHits.empty(len(angles))
        for i, angle in enumerate(angles):
            ray = Ray.from_angle(origin, float(angle))
            best: Optional[Hit] = None
            best_idx = -1
            for j, wall in enumerate(scene):
                hit = cast(ray, wall)
                # strict < keeps the first-seen wall on ties
                if hit is not None and (best is None or hit.distance < best.distance):
                    best = hit
                    best_idx = j
            if best is None:
                continue
            out.distances[i] = best.distance
            out.points[i] = (best.point.x, best.point.y)
            out.wall_index[i] = best_idx
            out.hit_mask[i] = True
        return out


class NumpyIntersector:
    """Brute-force NumPy backend evaluating every ray against every wall at once.

    Uses the same formulas and closed bounds as :func:`cast`.
    """

    def nearest(self, origin: Point, angles: np.ndarray, scene: Scene) -> NearestHits:
        angles = np.asarray(angles, dtype=np.float64)
        n_rays = angles.shape[0]
        segs = scene.segment_array()
        if n_rays == 0 or segs.shape[0] == 0:
            return NearestHits.empty(n_rays)

        x1, y1, x2, y2 = (segs[:, k][None, :] for k in range(4))   # (1, S)
        x3 = float(origin.x)
        y3 = float(origin.y)
        x4 = (x3 + np.cos(angles))[:, None]                         # (M, 1)
        y4 = (y3 + np.sin(angles))[:, None]

        with np.errstate(divide="ignore", invalid="ignore"):
            den = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)     # (M, S)
            t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / den
            u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / den

        valid = (den != 0) & (t >= 0.0) & (t <= 1.0) & (u >= 0.0)
        px = x1 + t * (x2 - x1)
        py = y1 + t * (y2 - y1)
        dist = np.where(valid, np.hypot(px - x3, py - y3), np.inf)

        # argmin returns the first minimum, i.e. first-seen wall on ties
        idx = np.argmin(dist, axis=1)
        rows = np.arange(n_rays)
        best = dist[rows, idx]
        mask = np.isfinite(best)

        out = NearestHits.empty(n_rays)
        out.hit_mask = mask
        out.distances[mask] = best[mask]
        out.points[mask, 0] = px[rows, idx][mask]
        out.points[mask, 1] = py[rows, idx][mask]
        out.wall_index[mask] = idx[mask]
        return out


class AutoIntersector:
    """Picks the fastest available backend."""
    def __init__(self) -> None:
        self._impl: Optional[Intersector] = None

    def nearest(self, origin: Point, angles: np.ndarray, scene: Scene) -> NearestHits:
        if self._impl is None:
            self._impl = self._choose()
        return self._impl.nearest(origin, angles, scene)

    def _choose(self) -> Intersector:
        _log.info("AutoIntersector: using NumPy brute-force intersector.")
        return NumpyIntersector()


def make_intersector(name: str) -> Intersector:
    if name == "python":
        return PythonIntersector()
    if name == "numpy":
        return NumpyIntersector()
    if name == "auto":
        return AutoIntersector()
    raise ValueError(f"Unknown intersector '{name}' (expected auto, numpy or python).")
