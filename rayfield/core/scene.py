from __future__ import annotations
from typing import Iterable, Iterator, Optional, Sequence, Tuple
import numpy as np

from .geometry import Point, Segment
from .utils import get_logger

_log = get_logger()

# Walls of the reference demo scene, in surface (pixel) coordinates.
DEFAULT_WALLS: Tuple[Tuple[float, float, float, float], ...] = (
    (400.0, 400.0, 500.0, 500.0),
    (300.0, 100.0, 300.0, 300.0),
    (500.0, 600.0, 400.0, 500.0),
    (300.0, 300.0, 100.0, 300.0),
    (100.0, 300.0, 100.0, 100.0),
    (600.0, 150.0, 600.0, 450.0),
    (200.0, 450.0, 200.0, 150.0),
)


class Scene:
    """Ordered, read-only collection of wall segments.

    The order walls are given in is the order every intersector tests them,
    which fixes tie-breaking between walls at exactly equal distance.
    """
    def __init__(self, walls: Iterable[Segment]) -> None:
        self._walls: Tuple[Segment, ...] = tuple(walls)
        for w in self._walls:
            if not isinstance(w, Segment):
                raise TypeError(f"Scene walls must be Segment instances, got {type(w).__name__}.")
        arr = np.array([w.as_tuple() for w in self._walls], dtype=np.float64).reshape(-1, 4)
        arr.setflags(write=False)
        self._array = arr

    @classmethod
    def from_coordinates(cls, rows: Iterable[Sequence[float]]) -> "Scene":
        walls = []
        for row in rows:
            if len(row) != 4:
                raise ValueError(f"Wall must have 4 coordinates (x1, y1, x2, y2), got {len(row)}.")
            walls.append(Segment(*(float(v) for v in row)))
        return cls(walls)

    @classmethod
    def default(cls) -> "Scene":
        return cls.from_coordinates(DEFAULT_WALLS)

    @property
    def walls(self) -> Tuple[Segment, ...]:
        return self._walls

    def __len__(self) -> int:
        return len(self._walls)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._walls)

    def segment_array(self) -> np.ndarray:
        """Read-only (S, 4) float64 array of ``x1, y1, x2, y2`` rows."""
        return self._array

    def bounds(self) -> Tuple[float, float, float, float]:
        """(xmin, xmax, ymin, ymax) over all wall endpoints."""
        if not self._walls:
            raise ValueError("Empty scene has no bounds.")
        xs = self._array[:, [0, 2]]
        ys = self._array[:, [1, 3]]
        return (float(xs.min()), float(xs.max()), float(ys.min()), float(ys.max()))

    def wall_touching(self, p: Point) -> Optional[Segment]:
        """First wall (in scene order) that ``p`` lies exactly on, if any."""
        for w in self._walls:
            if w.contains(p):
                return w
        return None
