from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import time

from ..core.geometry import Point
from ..core.sampler import RadialSampler
from ..core.scene import Scene
from ..core.shader import AttenuationShader
from ..core.utils import get_logger, round_half_up
from .surface import PixelBuffer, PixelView, SurfaceUnavailableError

_log = get_logger()


@dataclass(frozen=True)
class FrameStats:
    origin: Point
    rays: int
    hits: int
    pixels: int
    aborted: bool
    elapsed_s: float


class FrameRenderer:
    """Composes one frame: clear, ray field, then walls on top.

    The pixel buffer is held only for the duration of :meth:`render`. If it
    cannot be acquired the frame is abandoned and ``None`` is returned.
    """
    def __init__(
        self,
        scene: Scene,
        sampler: RadialSampler,
        shader: AttenuationShader,
        wall_color: Tuple[int, int, int] = (255, 255, 255),
    ) -> None:
        self.scene = scene
        self.sampler = sampler
        self.shader = shader
        self.wall_color = tuple(int(c) for c in wall_color)

    def draw_walls(self, view: PixelView) -> None:
        for w in self.scene:
            view.draw_line(
                round_half_up(w.x1), round_half_up(w.y1),
                round_half_up(w.x2), round_half_up(w.y2),
                self.wall_color, 255,
            )

    def render(self, origin: Point, buffer: PixelBuffer) -> Optional[FrameStats]:
        t0 = time.perf_counter()
        try:
            with buffer.acquire() as view:
                view.clear(buffer.background)
                sample = self.sampler.sample(origin)
                pixels = self.shader.render_sample(sample, view)
                self.draw_walls(view)
        except SurfaceUnavailableError as exc:
            _log.error("Frame abandoned: %s", exc)
            return None

        stats = FrameStats(
            origin=origin,
            rays=len(sample),
            hits=int(sample.hit_mask.sum()),
            pixels=pixels,
            aborted=sample.aborted,
            elapsed_s=time.perf_counter() - t0,
        )
        _log.debug("Frame at (%g, %g): %d rays, %d hits, %d pixels in %.1f ms",
                   origin.x, origin.y, stats.rays, stats.hits, stats.pixels, stats.elapsed_s * 1e3)
        return stats
