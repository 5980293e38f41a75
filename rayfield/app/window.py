from __future__ import annotations

import time
from typing import Optional

import pygame

from ..config import AppConfig
from ..core.geometry import Point
from ..core.utils import get_logger
from ..motion.path import OriginPath
from ..render.surface import PixelBuffer
from ..runtime.builders import build_path, build_renderer, build_surface

_log = get_logger()


class Window:
    """pygame display that presents composited pixel buffers."""

    def __init__(self, width: int, height: int, title: str = "2D Ray Casting", fps: int = 0) -> None:
        pygame.init()
        self.size = (int(width), int(height))
        self.screen = pygame.display.set_mode(self.size)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.fps = int(fps)

    def poll(self) -> bool:
        """Drain pending events; False once a quit was requested."""
        running = True
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
        return running

    def pointer(self) -> Point:
        x, y = pygame.mouse.get_pos()
        return Point(float(x), float(y))

    def present(self, buffer: PixelBuffer) -> None:
        rgb = buffer.to_rgb()
        frame = pygame.image.frombuffer(rgb.tobytes(), (buffer.width, buffer.height), "RGB")
        self.screen.blit(frame, (0, 0))
        pygame.display.flip()
        self.clock.tick(self.fps)

    def close(self) -> None:
        pygame.quit()


def run_interactive(cfg: AppConfig, max_frames: Optional[int] = None, follow_path: bool = False) -> int:
    """Render until the window is closed (or ``max_frames`` frames were shown).

    The origin follows the mouse pointer, or the configured origin path when
    ``follow_path`` is set. Returns the number of frames presented.
    """
    renderer = build_renderer(cfg)
    buffer = build_surface(cfg)
    path: Optional[OriginPath] = build_path(cfg) if follow_path else None
    window = Window(cfg.surface.width, cfg.surface.height, cfg.window.title, cfg.window.fps)

    presented = 0
    attempted = 0
    start = time.perf_counter()
    try:
        while window.poll():
            if max_frames is not None and attempted >= max_frames:
                break
            attempted += 1
            if path is not None:
                origin = path.sample(time.perf_counter() - start)
            else:
                origin = window.pointer()
            stats = renderer.render(origin, buffer)
            if stats is None:
                continue
            window.present(buffer)
            presented += 1
    finally:
        window.close()

    elapsed = time.perf_counter() - start
    _log.info("Presented %d frames in %.2f s", presented, elapsed)
    return presented
