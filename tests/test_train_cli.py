import json
from pathlib import Path

import yaml

from src.gradfit import train as T
from src.gradfit.data import make_linear, save_split, shuffle_split


def test_cli_synthetic_linear(tmp_path: Path):
    metrics = T.main(["--model", "linear", "--synthetic", "linear", "--out_dir", str(tmp_path), "--iterations", "60"])
    assert metrics["epochs"] == 60
    assert metrics["r2"] > 0.9
    assert (tmp_path / "metrics.json").exists()
    assert (tmp_path / "loss.png").exists()
    curve = json.loads((tmp_path / "loss_history.json").read_text())["curve"]
    assert len(curve) == 60


def test_cli_synthetic_blobs_no_plot(tmp_path: Path):
    metrics = T.main([
        "--model", "logistic", "--synthetic", "blobs", "--out_dir", str(tmp_path),
        "--iterations", "30", "--no_plot",
    ])
    assert metrics["accuracy"] >= 0.9
    assert not (tmp_path / "loss.png").exists()


def test_cli_from_yaml_config(tmp_path: Path):
    X, y, _, _ = make_linear(n=120, d=2, noise_std=0.1, seed=3)
    npz = save_split(tmp_path / "split.npz", shuffle_split(X, y, test_size=20, seed=3))
    cfg = {
        "model": "linear",
        "out_dir": str(tmp_path / "out"),
        "plot": False,
        "log_file": "train.log",
        "options": {"learning_rate": 0.1, "iterations": 40, "batch_size": 20, "log_every": 10},
        "data": {"npz": str(npz)},
    }
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text(yaml.safe_dump(cfg))

    metrics = T.main(["--config", str(cfg_path)])
    saved = json.loads((tmp_path / "out" / "metrics.json").read_text())
    assert saved["model"] == "linear" and saved["epochs"] == 40
    assert saved["r2"] == metrics["r2"] > 0.9
    assert "epoch 0040" in (tmp_path / "out" / "train.log").read_text()


def test_cli_requires_known_model(tmp_path: Path):
    try:
        T.main(["--synthetic", "linear", "--out_dir", str(tmp_path)])
    except ValueError as exc:
        assert "model must be one of" in str(exc)
    else:
        raise AssertionError("Expected ValueError for missing model")
