"""Programmatic entry points mirroring the CLI commands."""

from .run import FrameRunResult, SampleRunResult, render_from_config, sample_from_config

__all__ = ["FrameRunResult", "SampleRunResult", "render_from_config", "sample_from_config"]
