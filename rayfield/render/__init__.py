"""Frame surfaces and per-frame composition."""

from .surface import PixelBuffer, PixelView, Surface, SurfaceUnavailableError, bresenham

__all__ = ["PixelBuffer", "PixelView", "Surface", "SurfaceUnavailableError", "bresenham"]
