"""
End-to-end checks of the command-line scripts.
"""

import json
import sys
import warnings
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dla_braille import utils
from scripts import plot_cluster, run_single


def _base_args(*extra):
    return [
        "--width", "20",
        "--height", "10",
        "--particles", "100",
        "--frames", "3",
        "--rng-seed", "1",
        "--no-color",
        *extra,
    ]


def test_run_single_writes_outputs(tmp_path, capsys):
    snapshot = tmp_path / "run.npz"
    config = tmp_path / "run.json"
    code = run_single.main(_base_args("--out", str(snapshot), "--export-config", str(config)))
    assert code == 0

    out = capsys.readouterr().out
    assert "Growing Point seed on 64x64 grid" in out
    assert "Frames: 3" in out

    result = utils.load_cluster(snapshot)
    assert result.occupied.shape == (64, 64)
    assert json.loads(config.read_text())["num_particles"] == 100


def test_run_single_seed_option(tmp_path, capsys):
    assert run_single.main(_base_args("--seed", "multipoint", "--frames", "0")) == 0
    assert "Multi-Point" in capsys.readouterr().out


def test_run_single_bad_config(tmp_path, capsys):
    code = run_single.main(_base_args("--config", str(tmp_path / "missing.json")))
    assert code == 1
    assert "Failed to read config file" in capsys.readouterr().err


def test_run_single_presets(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert run_single.main(_base_args("--preset", "no such preset")) == 1
    assert run_single.main(_base_args("--preset", "snowflake")) == 0
    assert "Cross seed" in capsys.readouterr().out


def test_plot_cluster(tmp_path):
    snapshot = tmp_path / "run.npz"
    assert run_single.main(_base_args("--frames", "1", "--out", str(snapshot))) == 0

    image = tmp_path / "run.png"
    plot_cluster.main([str(snapshot), "--mode", "distance", "--scheme", "fire", "--dpi", "40", "--out", str(image)])
    assert image.exists()
    assert image.stat().st_size > 0


def test_run_single_out_directory(tmp_path, capsys):
    assert run_single.main(_base_args("--frames", "0", "--out", str(tmp_path))) == 0
    saved = list(tmp_path.glob("dla_point_*.npz"))
    assert len(saved) == 1
    assert str(saved[0]) in capsys.readouterr().out


def test_plot_cluster_without_deprecated_colormap_calls(tmp_path):
    snapshot = tmp_path / "run.npz"
    assert run_single.main(_base_args("--frames", "1", "--out", str(snapshot))) == 0

    image = tmp_path / "run_age.png"
    with warnings.catch_warnings():
        warnings.simplefilter("error", PendingDeprecationWarning)
        plot_cluster.main([str(snapshot), "--dpi", "40", "--out", str(image)])
    assert image.exists()
