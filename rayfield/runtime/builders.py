from __future__ import annotations

from typing import Optional

from ..config import AppConfig
from ..core.exporter import NpzWriter, PngWriter
from ..core.geometry import Point
from ..core.sampler import RadialSampler, SamplerConfig
from ..core.scene import Scene
from ..core.shader import AttenuationShader, ShaderConfig
from ..motion.path import OriginPath, PolylinePath, StaticPath
from ..render.frame import FrameRenderer
from ..render.surface import PixelBuffer


def build_scene(cfg: AppConfig) -> Scene:
    return Scene.from_coordinates(cfg.scene)


def build_sampler(cfg: AppConfig, scene: Scene) -> RadialSampler:
    sampler_cfg = SamplerConfig(
        angle_step_deg=cfg.sampler.angle_step_deg,
        intersector=cfg.sampler.intersector,
        on_wall=cfg.sampler.on_wall,
    )
    return RadialSampler(scene, cfg=sampler_cfg)


def build_shader(cfg: AppConfig) -> AttenuationShader:
    sh = cfg.shader
    return AttenuationShader(
        ShaderConfig(
            decay=sh.decay,
            step_size=sh.step_size,
            ray_color=sh.ray_color,
            mode=sh.mode,
            line_alpha=sh.line_alpha,
            max_distance=sh.max_distance,
            batch_size_samples=sh.batch_size_samples,
        )
    )


def build_surface(cfg: AppConfig) -> PixelBuffer:
    s = cfg.surface
    return PixelBuffer(s.width, s.height, background=s.background)


def build_renderer(cfg: AppConfig, scene: Optional[Scene] = None) -> FrameRenderer:
    scene = scene if scene is not None else build_scene(cfg)
    return FrameRenderer(
        scene,
        build_sampler(cfg, scene),
        build_shader(cfg),
        wall_color=cfg.walls.color,
    )


def build_path(cfg: AppConfig) -> OriginPath:
    path_cfg = cfg.path
    if path_cfg.kind == "static":
        return StaticPath(Point(*path_cfg.xy))
    if path_cfg.kind == "polyline":
        return PolylinePath(path_cfg.waypoints, speed=path_cfg.speed)
    raise ValueError(f"Unsupported path kind: {path_cfg.kind}")


def build_writer(path: str):
    lower = path.lower()
    if lower.endswith(".npz"):
        return NpzWriter(path)
    if lower.endswith(".png"):
        return PngWriter(path)
    raise ValueError(f"Unsupported output extension for '{path}' (expected .npz or .png)")
