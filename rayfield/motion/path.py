from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

from ..core.geometry import Point


class OriginPath:
    """Base interface for scripted light-origin motion."""

    def sample(self, t: float) -> Point:
        raise NotImplementedError

    def duration_s(self) -> float:
        raise NotImplementedError

    def frames(self, count: int) -> Iterable[tuple[float, Point]]:
        """``count`` evenly spaced (time, origin) pairs covering the path."""
        if count <= 0:
            raise ValueError("frame count must be positive.")
        span = self.duration_s()
        if count == 1 or span == 0.0:
            times = np.zeros(count)
        else:
            times = np.linspace(0.0, span, count)
        for t in times:
            yield (float(t), self.sample(float(t)))


@dataclass
class StaticPath(OriginPath):
    """An origin that never moves."""

    origin: Point

    def sample(self, t: float) -> Point:
        return self.origin

    def duration_s(self) -> float:
        return 0.0


class PolylinePath(OriginPath):
    """Piecewise-linear motion through waypoints at constant speed."""

    def __init__(self, waypoints: Sequence[Sequence[float]], speed: float) -> None:
        if len(waypoints) < 2:
            raise ValueError("PolylinePath requires at least two waypoints.")
        if speed <= 0.0:
            raise ValueError("speed must be positive.")

        self._points = np.asarray(waypoints, dtype=np.float64)
        if self._points.ndim != 2 or self._points.shape[1] != 2:
            raise ValueError("Waypoints must be (x, y) pairs.")
        self._speed = float(speed)

        seg_lengths = np.linalg.norm(np.diff(self._points, axis=0), axis=1)
        if np.any(seg_lengths == 0):
            raise ValueError("Consecutive waypoints must be distinct.")
        self._times = np.concatenate([[0.0], np.cumsum(seg_lengths / self._speed)])

    @property
    def waypoints(self) -> List[Point]:
        return [Point(float(x), float(y)) for x, y in self._points]

    def duration_s(self) -> float:
        return float(self._times[-1])

    def sample(self, t: float) -> Point:
        if t <= self._times[0]:
            x, y = self._points[0]
            return Point(float(x), float(y))
        if t >= self._times[-1]:
            x, y = self._points[-1]
            return Point(float(x), float(y))

        idx = np.searchsorted(self._times, t, side="right") - 1
        t0, t1 = self._times[idx], self._times[idx + 1]
        alpha = (t - t0) / max(t1 - t0, 1e-9)
        pos = (1.0 - alpha) * self._points[idx] + alpha * self._points[idx + 1]
        return Point(float(pos[0]), float(pos[1]))
