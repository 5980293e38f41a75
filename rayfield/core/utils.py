from __future__ import annotations
import numpy as np
import math
import logging

def get_logger(name: str = "rayfield") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

def round_half_up(v: float | np.ndarray) -> int | np.ndarray:
    """Nearest integer pixel coordinate, halves rounded towards +inf."""
    if isinstance(v, np.ndarray):
        return np.floor(v + 0.5).astype(np.int64)
    return int(math.floor(v + 0.5))

def radians(deg: float | np.ndarray) -> float | np.ndarray:
    return np.deg2rad(deg)
