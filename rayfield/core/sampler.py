from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Literal, Optional, Tuple
import math
import numpy as np

from .geometry import Hit, Point
from .intersector import Intersector, NearestHits, make_intersector
from .scene import Scene
from .utils import get_logger, radians

_log = get_logger()

OnWallPolicy = Literal["independent", "abort"]


def direction_count(step_deg: float) -> int:
    """Number of directions ``floor(360 / step_deg)`` covering one full turn."""
    if not step_deg > 0.0:
        raise ValueError("angle step must be positive.")
    if step_deg > 360.0:
        raise ValueError("angle step must not exceed 360 degrees.")
    ratio = 360.0 / step_deg
    # guard against 360 / 0.1 style quotients landing just under an integer
    return int(math.floor(ratio + ratio * 1e-9))


def sample_angles(step_deg: float) -> np.ndarray:
    """Angles in radians, ``i * step_deg`` for ``i`` in ``[0, N)``."""
    n = direction_count(step_deg)
    return radians(np.arange(n, dtype=np.float64) * float(step_deg))


def divides_full_turn(step_deg: float) -> bool:
    n = direction_count(step_deg)
    return math.isclose(n * step_deg, 360.0, rel_tol=1e-9)


@dataclass
class SamplerConfig:
    angle_step_deg: float = 0.05
    intersector: str = "auto"
    on_wall: OnWallPolicy = "independent"


@dataclass
class RadialSample:
    """Nearest hit for every sampled direction around one origin."""
    origin: Point
    angles: np.ndarray
    hits: NearestHits
    aborted: bool = False
    touched_wall: Optional[int] = field(default=None)

    @property
    def distances(self) -> np.ndarray:
        return self.hits.distances

    @property
    def points(self) -> np.ndarray:
        return self.hits.points

    @property
    def hit_mask(self) -> np.ndarray:
        return self.hits.hit_mask

    def __len__(self) -> int:
        return int(self.angles.shape[0])

    def nearest(self, i: int) -> Optional[Hit]:
        if not self.hits.hit_mask[i]:
            return None
        px, py = self.hits.points[i]
        return Hit(Point(float(px), float(py)), float(self.hits.distances[i]))

    def __iter__(self) -> Iterator[Tuple[float, Optional[Hit]]]:
        for i in range(len(self)):
            yield float(self.angles[i]), self.nearest(i)


class RadialSampler:
    """Casts a full turn of rays from an origin against every wall of a scene.

    Directions are evaluated in increasing angle order starting at 0 and
    walls in scene order. Nothing is cached between calls.
    """
    def __init__(self, scene: Scene, intersector: Optional[Intersector] = None, cfg: Optional[SamplerConfig] = None) -> None:
        self.scene = scene
        self.cfg = cfg or SamplerConfig()
        if self.cfg.on_wall not in ("independent", "abort"):
            raise ValueError(f"on_wall must be 'independent' or 'abort', got '{self.cfg.on_wall}'.")
        self.angles = sample_angles(self.cfg.angle_step_deg)
        if not divides_full_turn(self.cfg.angle_step_deg):
            _log.warning(
                "Angle step %.6g° does not divide 360°; coverage leaves a %.6g° gap.",
                self.cfg.angle_step_deg,
                360.0 - len(self.angles) * self.cfg.angle_step_deg,
            )
        self.intersector = intersector if intersector is not None else make_intersector(self.cfg.intersector)

    @property
    def num_directions(self) -> int:
        return int(self.angles.shape[0])

    def sample(self, origin: Point) -> RadialSample:
        if self.cfg.on_wall == "abort":
            for idx, wall in enumerate(self.scene):
                if wall.contains(origin):
                    _log.debug("Origin (%g, %g) lies on wall %d %s; sampling pass abandoned.",
                               origin.x, origin.y, idx, wall.as_tuple())
                    empty = np.zeros((0,), dtype=np.float64)
                    return RadialSample(origin, empty, NearestHits.empty(0), aborted=True, touched_wall=idx)

        hits = self.intersector.nearest(origin, self.angles, self.scene)
        return RadialSample(origin, self.angles, hits)
