#!/usr/bin/env python3
"""Train a linear or logistic regression model from a YAML config.

Config YAML keys:
  model: linear | logistic
  out_dir: outputs/<task>
  plot: true            # write loss.png next to the metrics
  log_file: train.log   # optional, relative to out_dir

  options:
    learning_rate: 0.1
    iterations: 1000
    batch_size: 10
    decision_boundary: 0.5   # binary (single label column) models only
    min_learning_rate: null
    max_learning_rate: null
    log_every: 50

  data:
    npz: path/to/split.npz   # arrays X, y, X_test, y_test

Outputs:
  - metrics.json with the test scores, final and best epoch loss, final
    learning rate and epoch count (merged into an existing file)
  - loss_history.json (chronological) and optionally loss.png
"""
from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .data import DataSplit, load_split, make_blobs, make_linear, shuffle_split
from .linear_regression import LinearRegressionTrainer
from .logistic_regression import LogisticRegressionTrainer
from .logutil import get_logger
from .reporting import plot_loss_curve, save_loss_history, write_run_summary
from .trainer import TrainingOptions

MODELS = {
    "linear": LinearRegressionTrainer,
    "logistic": LogisticRegressionTrainer,
}


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text()) or {}


def _synthetic_split(kind: str, seed: int) -> DataSplit:
    if kind == "linear":
        X, y, _, _ = make_linear(n=300, d=3, noise_std=0.1, seed=seed)
    elif kind == "blobs":
        X, y = make_blobs(n_per_class=150, seed=seed)
    else:
        raise ValueError(f"unknown synthetic dataset: {kind}")
    return shuffle_split(X, y, test_size=len(X) // 5, seed=seed)


def _resolve_split(cfg: dict, synthetic: Optional[str], seed: int) -> DataSplit:
    if synthetic:
        return _synthetic_split(synthetic, seed)
    data_cfg = cfg.get("data") or {}
    if "npz" not in data_cfg:
        raise ValueError("Missing data.npz specification (provide in config or use --synthetic)")
    return load_split(data_cfg["npz"])


def main(argv: Optional[List[str]] = None) -> Dict:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("--config", default=None, help="YAML config; CLI flags override its keys")
    ap.add_argument("--model", choices=sorted(MODELS), default=None)
    ap.add_argument("--out_dir", default=None)
    ap.add_argument("--synthetic", choices=["linear", "blobs"], default=None, help="Train on generated data instead of data.npz")
    ap.add_argument("--seed", type=int, default=123)
    ap.add_argument("--iterations", type=int, default=None)
    ap.add_argument("--no_plot", action="store_true")
    args = ap.parse_args(argv)

    cfg = load_yaml(args.config) if args.config else {}
    model_kind = args.model or cfg.get("model")
    if model_kind not in MODELS:
        raise ValueError(f"model must be one of {sorted(MODELS)}, got {model_kind!r}")
    out_dir = Path(args.out_dir or cfg.get("out_dir") or f"outputs/{model_kind}")
    out_dir.mkdir(parents=True, exist_ok=True)

    log_file = cfg.get("log_file")
    logger = get_logger(__package__ or "gradfit", log_file=str(out_dir / log_file) if log_file else None)

    options = TrainingOptions.from_dict(cfg.get("options"))
    if args.iterations is not None:
        options = replace(options, iterations=args.iterations)
    split = _resolve_split(cfg, args.synthetic, args.seed)
    logger.info(
        "model=%s train=%s test=%s options=%s",
        model_kind, split.features.shape, split.test_features.shape, options.to_dict(),
    )

    trainer = MODELS[model_kind](options)
    trainer.fit(split.features, split.labels)
    trainer.train()

    report = trainer.report(split.test_features, split.test_labels)
    metrics = write_run_summary(out_dir, trainer, report, extra={"model": model_kind})
    save_loss_history(out_dir / "loss_history.json", trainer)
    if bool(cfg.get("plot", True)) and not args.no_plot and trainer.loss_history:
        ylabel = "MSE" if model_kind == "linear" else "cost"
        plot_loss_curve(trainer.loss_curve(), out_dir / "loss.png", ylabel=ylabel)
    logger.info("metrics: %s", {k: v for k, v in report.items()})
    return metrics


if __name__ == "__main__":
    main()
