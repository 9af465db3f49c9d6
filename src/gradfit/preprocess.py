"""Feature standardization against cached training statistics.

The first matrix passed through a :class:`FeaturePreprocessor` fixes the
column mean and variance; every later matrix (test features, prediction
inputs) is centred and scaled with those same numbers so that train and
test live on one scale and no test information leaks into the statistics.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import ShapeMismatchError


@dataclass(frozen=True)
class Moments:
    mean: np.ndarray      # (1, c)
    variance: np.ndarray  # (1, c)
    flat: Optional[np.ndarray] = None  # (1, c) bool, constant training columns

    def __post_init__(self):
        if self.flat is None:
            object.__setattr__(self, "flat", np.asarray(self.variance) <= 0.0)

    @property
    def n_features(self) -> int:
        return int(self.mean.shape[1])


def as_matrix(raw, name: str = "features") -> np.ndarray:
    X = np.asarray(raw, dtype=np.float64)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise ShapeMismatchError(f"{name} must be 2-D, got shape {X.shape}")
    return X


def compute_moments(raw) -> Moments:
    X = as_matrix(raw)
    if X.shape[0] == 0:
        raise ShapeMismatchError("cannot compute moments of an empty feature matrix")
    # population variance, matching tf.moments / StandardScaler
    mean = X.mean(axis=0, keepdims=True)
    # flat columns come from the data range: a constant 0.1 column has a
    # rounded mean and a tiny nonzero variance
    flat = np.ptp(X, axis=0, keepdims=True) == 0
    variance = np.where(flat, 0.0, X.var(axis=0, keepdims=True))
    return Moments(mean=mean, variance=variance, flat=flat)


class FeaturePreprocessor:
    def __init__(self, moments: Optional[Moments] = None):
        self.moments: Optional[Moments] = moments

    @property
    def frozen(self) -> bool:
        return self.moments is not None

    def freeze(self, moments: Moments) -> Moments:
        self.moments = moments
        return moments

    def reset(self) -> None:
        self.moments = None

    def standardize(self, raw) -> np.ndarray:
        X = as_matrix(raw)
        if self.moments is None:
            self.freeze(compute_moments(X))
        m = self.moments
        if X.shape[1] != m.n_features:
            raise ShapeMismatchError(
                f"expected {m.n_features} feature columns (from training moments), got {X.shape[1]}"
            )
        # zero-variance columns output exactly 0 after centering
        flat = m.flat
        std = np.sqrt(np.where(flat, 1.0, m.variance))
        out = (X - m.mean) / std
        return np.where(flat, 0.0, out)

    def standardize_and_augment(self, raw) -> np.ndarray:
        Z = self.standardize(raw)
        return np.concatenate([np.ones((Z.shape[0], 1)), Z], axis=1)


__all__ = ["Moments", "FeaturePreprocessor", "compute_moments", "as_matrix"]
