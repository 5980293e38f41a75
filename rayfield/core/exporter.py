from __future__ import annotations
from typing import Dict, List
import numpy as np
import pathlib

import matplotlib.image as mpimg

from .sampler import RadialSample
from .utils import get_logger

_log = get_logger()


class NpzWriter:
    """Buffers radial samples and writes them to one compressed ``.npz`` on close.

    Arrays are concatenated over samples; ``frame`` maps each row back to the
    sample it came from and ``origin`` holds one row per sample.
    """
    def __init__(self, path: str) -> None:
        self.path = path
        self._samples: List[RadialSample] = []

    def write_sample(self, sample: RadialSample) -> None:
        self._samples.append(sample)

    def close(self) -> None:
        if not self._samples:
            return
        path = pathlib.Path(self.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        out: Dict[str, np.ndarray] = {
            "origin": np.array([[s.origin.x, s.origin.y] for s in self._samples], dtype=np.float64),
            "aborted": np.array([s.aborted for s in self._samples], dtype=bool),
            "frame": np.concatenate(
                [np.full(len(s), i, dtype=np.int64) for i, s in enumerate(self._samples)]
            ),
            "angle": np.concatenate([s.angles for s in self._samples]),
            "distance": np.concatenate([s.distances for s in self._samples]),
            "point": np.concatenate([s.points for s in self._samples]).reshape(-1, 2),
            "wall_index": np.concatenate([s.hits.wall_index for s in self._samples]),
            "hit": np.concatenate([s.hit_mask for s in self._samples]),
        }
        np.savez_compressed(path, **out)
        _log.info("Wrote %d samples to %s", len(self._samples), path.name)
        self._samples.clear()


class PngWriter:
    """Writes composited RGB frames as PNG images."""
    def __init__(self, path: str) -> None:
        self.path = pathlib.Path(path)
        self.written: List[pathlib.Path] = []

    def frame_path(self, index: int, total: int) -> pathlib.Path:
        if total <= 1:
            return self.path
        return self.path.with_name(f"{self.path.stem}_{index:04d}{self.path.suffix}")

    def write_frame(self, rgb: np.ndarray, index: int = 0, total: int = 1) -> pathlib.Path:
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise ValueError(f"Expected (H, W, 3) frame, got shape {rgb.shape}")
        out = self.frame_path(index, total)
        out.parent.mkdir(parents=True, exist_ok=True)
        mpimg.imsave(out, rgb, format="png")
        self.written.append(out)
        return out
