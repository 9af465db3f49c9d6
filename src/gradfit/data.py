"""Data-provider seam: the four matrices a trainer consumes, plus helpers.

CSV parsing and column selection happen upstream; this module only moves
already-numeric arrays around (npz bundles, one-hot encoding, a seeded
shuffle/split) and builds small deterministic synthetic datasets.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .errors import check_rows
from .preprocess import as_matrix


@dataclass
class DataSplit:
    features: np.ndarray
    labels: np.ndarray
    test_features: np.ndarray
    test_labels: np.ndarray

    def __post_init__(self):
        self.features = as_matrix(self.features)
        self.labels = as_matrix(self.labels, name="labels")
        self.test_features = as_matrix(self.test_features)
        self.test_labels = as_matrix(self.test_labels, name="labels")
        check_rows(self.features, self.labels)
        check_rows(self.test_features, self.test_labels, "test features/labels")


def load_split(path: str | Path) -> DataSplit:
    with np.load(path, allow_pickle=False) as blob:
        missing = [k for k in ("X", "y", "X_test", "y_test") if k not in blob.files]
        if missing:
            raise KeyError(f"{path} is missing arrays: {missing}")
        return DataSplit(blob["X"], blob["y"], blob["X_test"], blob["y_test"])


def save_split(path: str | Path, split: DataSplit) -> Path:
    p = Path(path); p.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(p, X=split.features, y=split.labels, X_test=split.test_features, y_test=split.test_labels)
    return p


def one_hot(class_ids, n_classes: Optional[int] = None) -> np.ndarray:
    ids = np.asarray(class_ids, dtype=np.int64).reshape(-1)
    if n_classes is None:
        n_classes = int(ids.max()) + 1 if ids.size else 0
    if ids.size and (ids.min() < 0 or ids.max() >= n_classes):
        raise ValueError(f"class ids must lie in [0, {n_classes})")
    out = np.zeros((ids.shape[0], n_classes), dtype=np.float64)
    out[np.arange(ids.shape[0]), ids] = 1.0
    return out


def shuffle_split(features, labels, test_size: int, seed: Optional[int] = None) -> DataSplit:
    """Shuffle rows together and hold out the first ``test_size`` as the test set."""
    X = as_matrix(features)
    Y = as_matrix(labels, name="labels")
    check_rows(X, Y)
    if not 0 <= test_size < X.shape[0]:
        raise ValueError(f"test_size must be in [0, {X.shape[0]}), got {test_size}")
    idx = np.random.default_rng(seed).permutation(X.shape[0])
    X, Y = X[idx], Y[idx]
    return DataSplit(X[test_size:], Y[test_size:], X[:test_size], Y[:test_size])


def make_linear(n: int = 200, d: int = 1, noise_std: float = 0.0, seed: int = 123) -> Tuple[np.ndarray, np.ndarray, np.ndarray, float]:
    # y = x @ w + b + noise
    rng = np.random.default_rng(seed)
    X = rng.normal(loc=5.0, scale=2.0, size=(n, d))
    # slopes bounded away from zero so every feature carries signal
    w = rng.uniform(0.5, 3.0, size=(d, 1)) * rng.choice([-1.0, 1.0], size=(d, 1))
    b = 0.5
    y = X @ w + b
    if noise_std > 0:
        y += rng.normal(scale=noise_std, size=y.shape)
    return X, y, w, b


def make_blobs(n_per_class: int = 100, centers=((-2.0, -2.0), (2.0, 2.0)), scale: float = 0.5, seed: int = 7) -> Tuple[np.ndarray, np.ndarray]:
    """Gaussian clusters, one per center; returns features and one-hot labels."""
    rng = np.random.default_rng(seed)
    centers = np.asarray(centers, dtype=np.float64)
    X = np.concatenate([rng.normal(loc=c, scale=scale, size=(n_per_class, centers.shape[1])) for c in centers])
    ids = np.repeat(np.arange(centers.shape[0]), n_per_class)
    idx = rng.permutation(X.shape[0])
    return X[idx], one_hot(ids[idx], centers.shape[0])


__all__ = ["DataSplit", "load_split", "save_split", "one_hot", "shuffle_split", "make_linear", "make_blobs"]
