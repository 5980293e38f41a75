"""rayfield: real-time 2D ray casting with distance-attenuated light.

This package contains the core components:
- Point / Segment / Ray / Hit value types (core.geometry)
- Scene, an ordered read-only list of walls (core.scene)
- Ray × wall intersectors [pure Python & NumPy brute force] (core.intersector)
- RadialSampler, a full turn of nearest-hit queries per origin (core.sampler)
- AttenuationShader, exponential fall-off ray painting (core.shader)
- PixelBuffer with scoped acquisition and FrameRenderer (render)

The pygame window (app.window) and the typer CLI (cli.main) are thin
plumbing around the core.
"""

from .core.geometry import Point, Segment, Ray, Hit
from .core.scene import Scene, DEFAULT_WALLS
from .core.intersector import (cast, NearestHits, Intersector,
                               PythonIntersector, NumpyIntersector, AutoIntersector)
from .core.sampler import RadialSampler, RadialSample, SamplerConfig, sample_angles, direction_count
from .core.shader import AttenuationShader, ShaderConfig
from .core.exporter import NpzWriter, PngWriter
from .render.surface import PixelBuffer, SurfaceUnavailableError
from .render.frame import FrameRenderer, FrameStats
