from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ..config import AppConfig, load_config
from ..core.exporter import NpzWriter, PngWriter
from ..core.geometry import Point
from ..motion.path import StaticPath
from ..render.frame import FrameStats
from ..runtime.builders import (
    build_path,
    build_renderer,
    build_sampler,
    build_scene,
    build_surface,
)

ConfigLike = Union[str, Path, AppConfig, None]


@dataclass(frozen=True)
class FrameRunResult:
    """Summary of a headless rendering run."""

    stats: List[FrameStats]
    output_paths: List[Path]
    config: AppConfig


@dataclass(frozen=True)
class SampleRunResult:
    """Summary of a sampling run written to ``.npz``."""

    samples: int
    rays: int
    hits: int
    output_path: Path
    config: AppConfig


def _resolve_config(config: ConfigLike) -> AppConfig:
    if isinstance(config, AppConfig):
        return config.model_copy(deep=True)
    return load_config(config)


def _origins(cfg: AppConfig, origin: Optional[Tuple[float, float]], frames: int) -> Iterable[Point]:
    path = StaticPath(Point(*origin)) if origin is not None else build_path(cfg)
    for _, p in path.frames(frames):
        yield p


def render_from_config(
    config: ConfigLike,
    output: Union[str, Path],
    *,
    origin: Optional[Tuple[float, float]] = None,
    frames: int = 1,
) -> FrameRunResult:
    """Render frames headlessly and save them as PNG.

    Parameters
    ----------
    config:
        Path to a YAML file, a pre-loaded :class:`~rayfield.config.schema.AppConfig`,
        or ``None`` for the built-in defaults.
    output:
        Target ``.png`` path. With more than one frame, a zero-padded frame
        index is appended to the stem.
    origin:
        Fixed light origin. When omitted the configured origin path is used.
    frames:
        Number of frames, spread evenly over the origin path.
    """
    out = Path(output).resolve()
    if out.suffix.lower() != ".png":
        raise ValueError(f"Unsupported output extension '{out.suffix}' (expected .png)")
    cfg = _resolve_config(config)
    renderer = build_renderer(cfg)
    buffer = build_surface(cfg)
    writer = PngWriter(str(out))

    stats: List[FrameStats] = []
    for idx, p in enumerate(_origins(cfg, origin, frames)):
        frame = renderer.render(p, buffer)
        if frame is None:
            continue
        stats.append(frame)
        writer.write_frame(buffer.to_rgb(), index=idx, total=frames)

    return FrameRunResult(stats=stats, output_paths=list(writer.written), config=cfg)


def sample_from_config(
    config: ConfigLike,
    output: Union[str, Path],
    *,
    origin: Optional[Tuple[float, float]] = None,
    frames: int = 1,
) -> SampleRunResult:
    """Run the radial sampler only and dump the nearest hits to ``.npz``."""
    out = Path(output).resolve()
    if out.suffix.lower() != ".npz":
        raise ValueError(f"Unsupported output extension '{out.suffix}' (expected .npz)")
    cfg = _resolve_config(config)
    sampler = build_sampler(cfg, build_scene(cfg))
    writer = NpzWriter(str(out))

    count = rays = hits = 0
    try:
        for p in _origins(cfg, origin, frames):
            sample = sampler.sample(p)
            writer.write_sample(sample)
            count += 1
            rays += len(sample)
            hits += int(sample.hit_mask.sum())
    finally:
        writer.close()

    return SampleRunResult(samples=count, rays=rays, hits=hits, output_path=out, config=cfg)
