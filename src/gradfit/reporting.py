"""Run artifacts for a trained model: metrics summary, loss curve, plot.

``metrics.json`` is merged rather than overwritten, so keys written by other
tools (notes, sweep ids) survive a re-run into the same directory.
"""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


def loss_summary(trainer) -> Dict[str, object]:
    curve = trainer.loss_curve()
    summary: Dict[str, object] = {
        "objective": trainer.objective.name,
        "epochs": trainer.epochs_run,
        "final_learning_rate": trainer.learning_rate,
        "final_loss": None,
        "best_loss": None,
        "best_epoch": None,
    }
    finite = [(i, v) for i, v in enumerate(curve, start=1) if math.isfinite(v)]
    if curve:
        summary["final_loss"] = float(curve[-1])
    if finite:
        best_epoch, best = min(finite, key=lambda iv: iv[1])
        summary["best_loss"] = float(best)
        summary["best_epoch"] = best_epoch
    return summary


def write_run_summary(out_dir: str | Path, trainer, scores: Mapping[str, float], extra: Optional[Mapping] = None) -> Dict:
    """Merge test scores and the loss summary into ``out_dir/metrics.json``."""
    path = Path(out_dir) / "metrics.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    merged = json.loads(path.read_text()) if path.exists() else {}
    if not isinstance(merged, dict):
        raise ValueError(f"{path} does not hold a JSON object")
    merged.update(dict(scores))
    merged.update(loss_summary(trainer))
    merged.update(dict(extra or {}))
    path.write_text(json.dumps(merged, indent=2, sort_keys=True) + "\n")
    return merged


def save_loss_history(path: str | Path, trainer) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "loss": trainer.objective.name,
        "epochs": trainer.epochs_run,
        "curve": [float(v) for v in trainer.loss_curve()],
    }
    p.write_text(json.dumps(payload, indent=2) + "\n")
    return p


def plot_loss_curve(curve: Sequence[float], out_path: str | Path, ylabel: str = "loss") -> Path:
    """Plot a chronological loss curve (oldest epoch first)."""
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(range(1, len(curve) + 1), list(curve), marker="o" if len(curve) < 30 else None)
    ax.set_xlabel("Iterations"); ax.set_ylabel(ylabel)
    ax.set_title(f"{ylabel} per epoch")
    plt.tight_layout(); plt.savefig(out); plt.close(fig)
    return out


__all__ = ["loss_summary", "write_run_summary", "save_loss_history", "plot_loss_curve"]
