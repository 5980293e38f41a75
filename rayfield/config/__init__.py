"""Configuration loading utilities for rayfield."""

from .schema import (
    AppConfig,
    load_config,
)

__all__ = ["AppConfig", "load_config"]
