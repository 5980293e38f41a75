from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib
import matplotlib.pyplot as plt
import numpy as np

from rayfield.config import load_config
from rayfield.sdk import render_from_config, sample_from_config

matplotlib.use("Agg")


@dataclass(frozen=True)
class ExampleSpec:
    name: str
    config_path: Path
    origin: Optional[Tuple[float, float]] = None
    frames: int = 1


EXAMPLES: List[ExampleSpec] = [
    ExampleSpec(name="default_center", config_path=Path("examples/configs/default.yaml"), origin=(400.0, 300.0)),
    ExampleSpec(name="default_corner", config_path=Path("examples/configs/default.yaml"), origin=(250.0, 200.0)),
    ExampleSpec(name="sweep_lines", config_path=Path("examples/configs/sweep_lines.yaml"), frames=4),
]

IMAGE_DIR = Path("examples/images")


def render_example(spec: ExampleSpec) -> List[Path]:
    out = IMAGE_DIR / f"{spec.name}.png"
    result = render_from_config(spec.config_path, out, origin=spec.origin, frames=spec.frames)
    return result.output_paths


def render_distance_profile(spec: ExampleSpec) -> Path:
    """Polar plot of nearest-hit distance against ray angle for the first frame."""
    npz_path = IMAGE_DIR / f"{spec.name}_hits.npz"
    sample_from_config(spec.config_path, npz_path, origin=spec.origin, frames=1)
    with np.load(npz_path) as data:
        angle = data["angle"]
        distance = data["distance"]
        hit = data["hit"]

    cfg = load_config(spec.config_path)
    reach = np.log(255.0) / cfg.shader.decay
    radius = np.where(hit, distance, reach)

    fig = plt.figure(figsize=(6, 6), dpi=120)
    ax = fig.add_subplot(1, 1, 1, projection="polar")
    ax.plot(angle, radius, lw=0.6)
    ax.set_title(f"{spec.name.replace('_', ' ').title()}: nearest hit distance")
    out_path = IMAGE_DIR / f"{spec.name}_profile.png"
    fig.tight_layout()
    fig.savefig(out_path)
    plt.close(fig)
    return out_path


def generate_examples(names: List[str], profiles: bool) -> None:
    IMAGE_DIR.mkdir(parents=True, exist_ok=True)
    selected = EXAMPLES if not names else [spec for spec in EXAMPLES if spec.name in names]
    if not selected:
        raise ValueError("No matching examples selected.")
    for spec in selected:
        logging.info("Rendering example '%s'", spec.name)
        for path in render_example(spec):
            logging.info("Saved %s", path)
        if profiles:
            logging.info("Saved %s", render_distance_profile(spec))


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render rayfield example frames and distance profiles.")
    parser.add_argument("--example", "-e", action="append", help="Example name to render (default: all).")
    parser.add_argument("--profiles", action="store_true", help="Also plot polar nearest-hit profiles.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="[%(levelname)s] %(message)s")
    generate_examples(args.example or [], profiles=args.profiles)


if __name__ == "__main__":
    main()
