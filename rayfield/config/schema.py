from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Optional, Union, List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.scene import DEFAULT_WALLS

Color = tuple[int, int, int]


def _check_color(v: Color) -> Color:
    if any(c < 0 or c > 255 for c in v):
        raise ValueError("color components must be within [0, 255]")
    return v


class SurfaceConfig(BaseModel):
    width: int = Field(800, gt=0)
    height: int = Field(600, gt=0)
    background: Color = (0, 0, 0)

    @field_validator("background")
    @classmethod
    def _validate_background(cls, v: Color) -> Color:
        return _check_color(v)


class SamplerConfigModel(BaseModel):
    angle_step_deg: float = Field(0.05, gt=0.0, le=360.0)
    intersector: Literal["auto", "numpy", "python"] = "auto"
    on_wall: Literal["independent", "abort"] = "independent"


class ShaderConfigModel(BaseModel):
    decay: float = Field(0.005, gt=0.0)
    step_size: float = Field(1.0, gt=0.0)
    ray_color: Color = (255, 255, 102)
    mode: Literal["march", "line"] = "march"
    line_alpha: int = Field(64, ge=0, le=255)
    max_distance: Optional[float] = Field(None, ge=0.0)
    batch_size_samples: int = Field(1_000_000, gt=0)

    @field_validator("ray_color")
    @classmethod
    def _validate_ray_color(cls, v: Color) -> Color:
        return _check_color(v)


class WallsConfig(BaseModel):
    color: Color = (255, 255, 255)

    @field_validator("color")
    @classmethod
    def _validate_color(cls, v: Color) -> Color:
        return _check_color(v)


class StaticPathConfig(BaseModel):
    kind: Literal["static"]
    xy: tuple[float, float] = (400.0, 300.0)


class PolylinePathConfig(BaseModel):
    kind: Literal["polyline"]
    waypoints: List[tuple[float, float]]
    speed: float = Field(200.0, gt=0.0)

    @model_validator(mode="after")
    def _validate_waypoints(self) -> "PolylinePathConfig":
        if len(self.waypoints) < 2:
            raise ValueError("polyline path requires at least two waypoints")
        return self


PathConfig = Annotated[
    Union[StaticPathConfig, PolylinePathConfig],
    Field(discriminator="kind"),
]


class WindowConfig(BaseModel):
    title: str = "2D Ray Casting"
    fps: int = Field(0, ge=0)  # 0 = uncapped


class AppConfig(BaseModel):
    surface: SurfaceConfig = SurfaceConfig()
    sampler: SamplerConfigModel = SamplerConfigModel()
    shader: ShaderConfigModel = ShaderConfigModel()
    walls: WallsConfig = WallsConfig()
    scene: List[tuple[float, float, float, float]] = Field(
        default_factory=lambda: [tuple(w) for w in DEFAULT_WALLS]
    )
    path: PathConfig = StaticPathConfig(kind="static")
    window: WindowConfig = WindowConfig()

    @model_validator(mode="after")
    def _check_path(self) -> "AppConfig":
        if isinstance(self.path, PolylinePathConfig):
            pts = self.path.waypoints
            for a, b in zip(pts, pts[1:]):
                if a == b:
                    raise ValueError("consecutive polyline waypoints must be distinct")
        return self


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load an :class:`AppConfig` from YAML; ``None`` gives the built-in defaults."""
    if path is None:
        return AppConfig()
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Configuration root must be a mapping.")
    return AppConfig.model_validate(data)
