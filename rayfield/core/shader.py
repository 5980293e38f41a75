from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Tuple
import math
import numpy as np

from .geometry import Point
from .sampler import RadialSample
from .utils import get_logger, round_half_up
from ..render.surface import Surface

_log = get_logger()

ShadeMode = Literal["march", "line"]


@dataclass
class ShaderConfig:
    decay: float = 0.005
    step_size: float = 1.0
    ray_color: Tuple[int, int, int] = (255, 255, 102)
    mode: ShadeMode = "march"
    line_alpha: int = 64
    max_distance: Optional[float] = None
    batch_size_samples: int = 1_000_000


class AttenuationShader:
    """Paints rays with exponential distance fall-off.

    ``alpha(d) = int(clip(exp(-k d), 0, 1) * 255)``. The decay is strictly
    monotonic, so once alpha reaches 0 nothing further along the ray can be
    visible and marching stops.
    """

    def __init__(self, cfg: Optional[ShaderConfig] = None) -> None:
        self.cfg = cfg or ShaderConfig()
        if not self.cfg.decay > 0.0:
            raise ValueError("decay must be positive.")
        if not self.cfg.step_size > 0.0:
            raise ValueError("step_size must be positive.")
        if self.cfg.mode not in ("march", "line"):
            raise ValueError(f"mode must be 'march' or 'line', got '{self.cfg.mode}'.")
        if not 0 <= self.cfg.line_alpha <= 255:
            raise ValueError("line_alpha must be within [0, 255].")
        if self.cfg.max_distance is not None and self.cfg.max_distance < 0.0:
            raise ValueError("max_distance must be non-negative.")
        if self.cfg.batch_size_samples <= 0:
            raise ValueError("batch_size_samples must be positive.")
        self._color = tuple(int(c) for c in self.cfg.ray_color)

    @property
    def cutoff_distance(self) -> float:
        """Distance past which alpha is 0: ``ln(255) / k``."""
        return math.log(255.0) / self.cfg.decay

    def attenuation(self, d: float | np.ndarray) -> float | np.ndarray:
        return np.clip(np.exp(-self.cfg.decay * np.asarray(d, dtype=np.float64)), 0.0, 1.0)

    def alpha_at(self, d: float) -> int:
        a = min(1.0, max(0.0, math.exp(-self.cfg.decay * d)))
        return int(a * 255.0)

    def alphas(self, d: np.ndarray) -> np.ndarray:
        return (self.attenuation(d) * 255.0).astype(np.uint8)

    def _limit(self, distance: Optional[float]) -> float:
        limit = self.cutoff_distance if distance is None else min(distance, self.cutoff_distance)
        if self.cfg.max_distance is not None:
            limit = min(limit, self.cfg.max_distance)
        return limit

    def _exit_distances(self, origin: Point, dx: np.ndarray, dy: np.ndarray, surface: Surface) -> np.ndarray:
        """Distance along each ray past which every step rounds off the surface.

        Padded by one step so floating-point error never drops an in-bounds step.
        """
        with np.errstate(divide="ignore", invalid="ignore"):
            tx = np.where(dx > 0, (surface.width - 0.5 - origin.x) / dx,
                          np.where(dx < 0, (-0.5 - origin.x) / dx, np.inf))
            ty = np.where(dy > 0, (surface.height - 0.5 - origin.y) / dy,
                          np.where(dy < 0, (-0.5 - origin.y) / dy, np.inf))
        return np.maximum(np.minimum(tx, ty), 0.0) + self.cfg.step_size

    def _march(self, origin: Point, angles: np.ndarray, limits: np.ndarray, surface: Surface) -> int:
        """Marches every ray in increasing angle order; returns pixels written.

        Blocks hold at most ``batch_size_samples`` ray steps. A ray longer
        than one block is marched alone, block after block, so later rays
        still overwrite earlier ones on shared pixels.
        """
        step = self.cfg.step_size
        dx = np.cos(angles)
        dy = np.sin(angles)
        limits = np.minimum(limits, self._exit_distances(origin, dx, dy, surface))
        n_steps = np.floor(limits / step).astype(np.int64) + 1

        batch = self.cfg.batch_size_samples
        step_chunk = min(int(n_steps.max()), batch)
        ray_chunk = max(1, batch // step_chunk)

        written = 0
        for start, stop in _chunks(len(angles), ray_chunk):
            cx = dx[start:stop, None]
            cy = dy[start:stop, None]
            lim = limits[start:stop, None]
            alive = np.ones(stop - start, dtype=bool)
            for s0, s1 in _chunks(int(n_steps[start:stop].max()), step_chunk):
                d = np.arange(s0, s1, dtype=np.float64) * step
                alphas = self.alphas(d)
                xs = round_half_up(origin.x + cx * d[None, :])
                ys = round_half_up(origin.y + cy * d[None, :])
                ok = (
                    (d[None, :] <= lim)
                    & (alphas[None, :] > 0)
                    & (xs >= 0) & (xs < surface.width)
                    & (ys >= 0) & (ys < surface.height)
                )
                ok[:, 0] &= alive
                # marching ends at the first failing step of each ray
                ok = np.logical_and.accumulate(ok, axis=1)
                a = np.broadcast_to(alphas[None, :], ok.shape)
                surface.write(xs[ok], ys[ok], self._color, a[ok])
                written += int(ok.sum())
                alive = ok[:, -1]
                if not alive.any():
                    break
        return written

    def _line(self, origin: Point, angle: float, limit: float, surface: Surface) -> int:
        dx, dy = math.cos(angle), math.sin(angle)
        x0, y0 = round_half_up(origin.x), round_half_up(origin.y)
        x1 = round_half_up(origin.x + limit * dx)
        y1 = round_half_up(origin.y + limit * dy)
        return surface.draw_line(x0, y0, x1, y1, self._color, self.cfg.line_alpha)

    def render(self, origin: Point, angle: float, distance: Optional[float], surface: Surface) -> int:
        """Render one ray; ``distance=None`` means no wall was hit.

        Returns the number of pixels written.
        """
        limit = self._limit(distance)
        if self.cfg.mode == "line":
            return self._line(origin, angle, limit, surface)
        return self._march(origin, np.array([angle], dtype=np.float64), np.array([limit]), surface)

    def render_sample(self, sample: RadialSample, surface: Surface) -> int:
        """Render every direction of a sample, in increasing angle order."""
        if len(sample) == 0:
            return 0
        limits = np.array(
            [self._limit(None if not hit else float(dist))
             for hit, dist in zip(sample.hit_mask, sample.distances)],
            dtype=np.float64,
        )

        if self.cfg.mode == "line":
            written = sum(
                self._line(sample.origin, float(angle), float(limit), surface)
                for angle, limit in zip(sample.angles, limits)
            )
        else:
            written = self._march(sample.origin, sample.angles, limits, surface)
        _log.debug("Shaded %d rays → %d pixel writes", len(sample), written)
        return written


def _chunks(n: int, size: int) -> Iterable[Tuple[int, int]]:
    for start in range(0, n, size):
        yield start, min(start + size, n)
