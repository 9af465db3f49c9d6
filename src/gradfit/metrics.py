from __future__ import annotations

from typing import Dict

import numpy as np
import sklearn.metrics as skm

from .errors import ShapeMismatchError


def r2_score(actual: np.ndarray, predicted: np.ndarray) -> float:
    """1 - SS_res / SS_tot; NaN when the labels have zero variance."""
    y = np.asarray(actual, dtype=np.float64).reshape(-1)
    p = np.asarray(predicted, dtype=np.float64).reshape(-1)
    if y.shape != p.shape:
        raise ShapeMismatchError(f"actual/predicted length mismatch: {y.shape[0]} != {p.shape[0]}")
    if y.size == 0:
        return float("nan")
    ss_res = float(((y - p) ** 2).sum())
    ss_tot = float(((y - y.mean()) ** 2).sum())
    if ss_tot == 0.0:
        return float("nan")
    return 1.0 - ss_res / ss_tot


def accuracy(actual: np.ndarray, predicted: np.ndarray) -> float:
    y = np.asarray(actual).reshape(-1)
    p = np.asarray(predicted).reshape(-1)
    if y.shape != p.shape:
        raise ShapeMismatchError(f"actual/predicted length mismatch: {y.shape[0]} != {p.shape[0]}")
    if y.size == 0:
        return float("nan")
    return float(np.mean(y == p))


def regression_report(actual: np.ndarray, predicted: np.ndarray) -> Dict[str, float]:
    y = np.asarray(actual, dtype=np.float64).reshape(-1)
    p = np.asarray(predicted, dtype=np.float64).reshape(-1)
    metrics: Dict[str, float] = {"r2": r2_score(y, p)}
    if y.size:
        metrics["mae"] = float(skm.mean_absolute_error(y, p))
        metrics["rmse"] = float(np.sqrt(skm.mean_squared_error(y, p)))
    return metrics


def classification_report(actual: np.ndarray, predicted: np.ndarray) -> Dict[str, float]:
    y = np.asarray(actual).reshape(-1)
    p = np.asarray(predicted).reshape(-1)
    metrics: Dict[str, float] = {"accuracy": accuracy(y, p)}
    if y.size:
        metrics["macro_f1"] = float(skm.f1_score(y, p, average="macro", zero_division=0))
    return metrics


__all__ = ["r2_score", "accuracy", "regression_report", "classification_report"]
