from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple
import numpy as np

from ..core.utils import get_logger

_log = get_logger()

RGB = Tuple[int, int, int]


class SurfaceUnavailableError(RuntimeError):
    """The drawing target could not be acquired for writing."""


def bresenham(x0: int, y0: int, x1: int, y1: int) -> Iterator[Tuple[int, int]]:
    """Integer points of the line from (x0, y0) to (x1, y1), both ends included."""
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


class Surface(Protocol):
    """Write interface the shader and frame renderer draw into."""
    width: int
    height: int

    def in_bounds(self, x: int, y: int) -> bool: ...

    def write(self, xs: np.ndarray, ys: np.ndarray, color: RGB, alphas: np.ndarray) -> None: ...

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: RGB, alpha: int = 255) -> int: ...


class PixelView:
    """Mutable view over a :class:`PixelBuffer`, valid only while acquired."""

    def __init__(self, pixels: np.ndarray) -> None:
        self._pixels: Optional[np.ndarray] = pixels
        self.height, self.width = pixels.shape[:2]

    def _require(self) -> np.ndarray:
        if self._pixels is None:
            raise SurfaceUnavailableError("Pixel view used after its buffer was released.")
        return self._pixels

    def _release(self) -> None:
        self._pixels = None

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def clear(self, color: RGB, alpha: int = 0) -> None:
        px = self._require()
        px[..., :3] = color
        px[..., 3] = alpha

    def write(self, xs: np.ndarray, ys: np.ndarray, color: RGB, alphas: np.ndarray) -> None:
        """Overwrite pixels ``(xs[i], ys[i])`` with ``color`` at ``alphas[i]``.

        Coordinates must already be in bounds. On repeated coordinates the
        last write wins.
        """
        px = self._require()
        xs = np.asarray(xs, dtype=np.int64)
        ys = np.asarray(ys, dtype=np.int64)
        if xs.size == 0:
            return
        px[ys, xs, :3] = color
        px[ys, xs, 3] = np.asarray(alphas, dtype=np.uint8)

    def put_pixel(self, x: int, y: int, color: RGB, alpha: int = 255) -> None:
        px = self._require()
        if self.in_bounds(x, y):
            px[y, x, :3] = color
            px[y, x, 3] = alpha

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: RGB, alpha: int = 255) -> int:
        """Bresenham line, clipped per pixel to the surface.

        Returns the number of pixels written.
        """
        self._require()
        xs: List[int] = []
        ys: List[int] = []
        for x, y in bresenham(int(x0), int(y0), int(x1), int(y1)):
            if self.in_bounds(x, y):
                xs.append(x)
                ys.append(y)
        self.write(np.asarray(xs), np.asarray(ys), color, np.full(len(xs), alpha, dtype=np.uint8))
        return len(xs)


class PixelBuffer:
    """Owned RGBA frame buffer (rows = y, columns = x).

    Writing requires a scoped acquisition via :meth:`acquire`; the view is
    released on every exit path, and only one acquisition may be live.
    """

    def __init__(self, width: int, height: int, background: RGB = (0, 0, 0)) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Surface width and height must be positive.")
        self.width = int(width)
        self.height = int(height)
        self.background = tuple(int(c) for c in background)
        self._pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self._pixels[..., :3] = self.background
        self._view: Optional[PixelView] = None

    @property
    def acquired(self) -> bool:
        return self._view is not None

    @contextmanager
    def acquire(self) -> Iterator[PixelView]:
        if self._view is not None:
            raise SurfaceUnavailableError("Pixel buffer is already acquired.")
        view = PixelView(self._pixels)
        self._view = view
        try:
            yield view
        finally:
            view._release()
            self._view = None

    def rgba(self) -> np.ndarray:
        """Copy of the raw RGBA pixels, shape (height, width, 4)."""
        return self._pixels.copy()

    def to_rgb(self, background: Optional[Sequence[int]] = None) -> np.ndarray:
        """Composite the buffer over an opaque background, shape (height, width, 3)."""
        bg = np.asarray(background if background is not None else self.background, dtype=np.float32)
        px = self._pixels.astype(np.float32)
        a = px[..., 3:4] / 255.0
        out = px[..., :3] * a + bg * (1.0 - a)
        return np.clip(np.rint(out), 0, 255).astype(np.uint8)
