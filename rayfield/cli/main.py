from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import typer
import yaml

from ..config import AppConfig, load_config
from ..sdk.run import render_from_config, sample_from_config

app = typer.Typer(help="rayfield 2D ray-casting light field")


def _configure_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format="[%(levelname)s] %(message)s")
    logging.getLogger("rayfield").setLevel(numeric)


def _load(config: Optional[Path]) -> AppConfig:
    try:
        return load_config(config)
    except (ValueError, yaml.YAMLError) as exc:
        # pydantic.ValidationError is a ValueError subclass
        raise typer.BadParameter(str(exc), param_hint="CONFIG") from exc


def _parse_origin(origin: Optional[Tuple[Optional[float], Optional[float]]]) -> Optional[Tuple[float, float]]:
    if not origin or all(v is None for v in origin):
        return None
    if len(origin) != 2:
        raise typer.BadParameter("origin takes exactly two values: X Y.", param_hint="--origin")
    return (float(origin[0]), float(origin[1]))


@app.command("run")
def run(
    config: Optional[Path] = typer.Argument(None, exists=True, readable=True, help="Path to YAML configuration file."),
    max_frames: Optional[int] = typer.Option(None, "--max-frames", help="Stop after this many frames."),
    follow_path: bool = typer.Option(False, "--follow-path", help="Move the origin along the configured path instead of the pointer."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Open a window and cast rays from the mouse pointer until it is closed."""

    if max_frames is not None and max_frames <= 0:
        raise typer.BadParameter("max_frames must be positive.", param_hint="--max-frames")
    _configure_logging(log_level)
    cfg = _load(config)

    from ..app.window import run_interactive

    frames = run_interactive(cfg, max_frames=max_frames, follow_path=follow_path)
    typer.echo(f"Presented {frames} frames")


@app.command("render")
def render(
    config: Optional[Path] = typer.Argument(None, exists=True, readable=True, help="Path to YAML configuration file."),
    output: Path = typer.Option(Path("frame.png"), "--output", "-o", help="Output PNG path."),
    origin: Optional[Tuple[float, float]] = typer.Option(None, "--origin", help="Fixed light origin X Y."),
    frames: int = typer.Option(1, "--frames", help="Frames to render along the configured origin path."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Render frames headlessly to PNG."""

    if frames <= 0:
        raise typer.BadParameter("frames must be positive.", param_hint="--frames")
    if output.suffix.lower() != ".png":
        raise typer.BadParameter("Output must end with .png", param_hint="--output")
    _configure_logging(log_level)
    cfg = _load(config)
    result = render_from_config(cfg, output, origin=_parse_origin(origin), frames=frames)
    for path in result.output_paths:
        typer.echo(f"Wrote {path}")
    typer.echo(f"Rendered {len(result.stats)} of {frames} frames")


@app.command("sample")
def sample(
    config: Optional[Path] = typer.Argument(None, exists=True, readable=True, help="Path to YAML configuration file."),
    output: Path = typer.Option(Path("hits.npz"), "--output", "-o", help="Output .npz path."),
    origin: Optional[Tuple[float, float]] = typer.Option(None, "--origin", help="Fixed light origin X Y."),
    frames: int = typer.Option(1, "--frames", help="Samples to take along the configured origin path."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Cast rays without rendering and dump nearest hits to .npz."""

    if frames <= 0:
        raise typer.BadParameter("frames must be positive.", param_hint="--frames")
    if output.suffix.lower() != ".npz":
        raise typer.BadParameter("Output must end with .npz", param_hint="--output")
    _configure_logging(log_level)
    cfg = _load(config)
    result = sample_from_config(cfg, output, origin=_parse_origin(origin), frames=frames)
    typer.echo(f"Completed {result.hits} hits from {result.rays} rays → {result.output_path}")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
