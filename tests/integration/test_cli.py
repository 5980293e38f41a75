from __future__ import annotations

from pathlib import Path

import numpy as np
import yaml
from typer.testing import CliRunner

from rayfield.cli.main import app


def _write_config(path: Path) -> Path:
    config = {
        "surface": {"width": 160, "height": 120},
        "sampler": {"angle_step_deg": 1.0},
        "shader": {"decay": 0.02, "ray_color": [255, 200, 0]},
        "scene": [[40, 10, 40, 110], [10, 100, 150, 100]],
        "path": {"kind": "static", "xy": [80, 50]},
    }
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f)
    return path


def test_cli_render_png(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path / "config.yaml")
    out_path = tmp_path / "frame.png"

    runner = CliRunner()
    result = runner.invoke(app, ["render", str(cfg_path), "-o", str(out_path), "--origin", "80", "60"])

    assert result.exit_code == 0, result.stdout
    assert out_path.exists()
    assert "Rendered 1 of 1 frames" in result.stdout


def test_cli_render_frames_along_path(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path / "config.yaml")
    runner = CliRunner()
    result = runner.invoke(app, ["render", str(cfg_path), "-o", str(tmp_path / "f.png"), "--frames", "2"])
    assert result.exit_code == 0, result.stdout
    assert (tmp_path / "f_0000.png").exists()
    assert (tmp_path / "f_0001.png").exists()


def test_cli_sample_npz(tmp_path: Path) -> None:
    cfg_path = _write_config(tmp_path / "config.yaml")
    out_path = tmp_path / "hits.npz"

    runner = CliRunner()
    result = runner.invoke(app, ["sample", str(cfg_path), "--output", str(out_path), "--log-level", "DEBUG"])

    assert result.exit_code == 0, result.stdout
    assert "from 360 rays" in result.stdout
    with np.load(out_path) as data:
        assert data["angle"].shape == (360,)
        assert data["origin"].tolist() == [[80.0, 50.0]]


def test_cli_defaults_without_config(tmp_path: Path) -> None:
    out_path = tmp_path / "hits.npz"
    runner = CliRunner()
    result = runner.invoke(app, ["sample", "-o", str(out_path), "--origin", "420", "260"])
    assert result.exit_code == 0, result.stdout
    with np.load(out_path) as data:
        assert data["angle"].shape == (7200,)


def test_cli_rejects_invalid_config(tmp_path: Path) -> None:
    cfg_path = tmp_path / "bad.yaml"
    with open(cfg_path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"sampler": {"angle_step_deg": -1.0}}, f)

    runner = CliRunner()
    result = runner.invoke(app, ["sample", str(cfg_path), "-o", str(tmp_path / "hits.npz")])
    assert result.exit_code != 0
    assert not (tmp_path / "hits.npz").exists()


def test_cli_rejects_wrong_output_extension(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["render", "-o", str(tmp_path / "frame.bmp")])
    assert result.exit_code != 0


def test_cli_rejects_malformed_yaml(tmp_path: Path) -> None:
    cfg_path = tmp_path / "broken.yaml"
    cfg_path.write_text("sampler: [1, 2\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["render", str(cfg_path), "-o", str(tmp_path / "frame.png")])
    assert result.exit_code == 2
    assert not isinstance(result.exception, yaml.YAMLError)
    assert not (tmp_path / "frame.png").exists()
