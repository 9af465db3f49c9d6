"""Link/loss strategies plugged into :class:`~src.gradfit.trainer.LinearModelTrainer`.

Each objective pairs a link function with the loss whose gradient with
respect to the weights reduces to ``Xᵗ(link(XW) - Y) / n``: identity + MSE,
softmax + categorical cross-entropy, sigmoid + binary cross-entropy.
"""
from __future__ import annotations

import numpy as np

EPS = 1e-12


def softmax(scores: np.ndarray) -> np.ndarray:
    shifted = scores - scores.max(axis=1, keepdims=True)
    e = np.exp(shifted)
    return e / e.sum(axis=1, keepdims=True)


def sigmoid(scores: np.ndarray) -> np.ndarray:
    # split by sign so exp never overflows
    out = np.empty_like(scores, dtype=np.float64)
    pos = scores >= 0
    out[pos] = 1.0 / (1.0 + np.exp(-scores[pos]))
    e = np.exp(scores[~pos])
    out[~pos] = e / (1.0 + e)
    return out


def cross_entropy(guesses: np.ndarray, labels: np.ndarray) -> float:
    """-1/n Σ [y log ŷ + (1-y) log(1-ŷ)], summed over every class column."""
    p = np.clip(guesses, EPS, 1.0 - EPS)
    n = labels.shape[0]
    return float(-(labels * np.log(p) + (1.0 - labels) * np.log(1.0 - p)).sum() / n)


class Objective:
    name = "objective"

    def link(self, scores: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def loss(self, guesses: np.ndarray, labels: np.ndarray) -> float:
        raise NotImplementedError

    def check_labels(self, labels: np.ndarray) -> None:
        pass

    def gradient(self, features: np.ndarray, guesses: np.ndarray, labels: np.ndarray) -> np.ndarray:
        return features.T @ (guesses - labels) / features.shape[0]


class MeanSquaredError(Objective):
    name = "mse"

    def link(self, scores):
        return scores

    def loss(self, guesses, labels):
        return float(np.mean((guesses - labels) ** 2))


class SoftmaxCrossEntropy(Objective):
    name = "softmax_ce"

    def link(self, scores):
        return softmax(scores)

    def loss(self, guesses, labels):
        return cross_entropy(guesses, labels)

    def check_labels(self, labels):
        if labels.shape[1] < 2:
            raise ValueError("softmax objective needs one-hot labels with at least 2 columns")
        if np.any(labels < 0) or not np.allclose(labels.sum(axis=1), 1.0):
            raise ValueError("one-hot label rows must be non-negative and sum to 1")


class SigmoidCrossEntropy(Objective):
    name = "sigmoid_ce"

    def link(self, scores):
        return sigmoid(scores)

    def loss(self, guesses, labels):
        return cross_entropy(guesses, labels)

    def check_labels(self, labels):
        if labels.shape[1] != 1:
            raise ValueError(f"binary objective needs a single label column, got {labels.shape[1]}")
        if not np.isin(labels, (0.0, 1.0)).all():
            raise ValueError("binary labels must be 0 or 1")


__all__ = [
    "Objective",
    "MeanSquaredError",
    "SoftmaxCrossEntropy",
    "SigmoidCrossEntropy",
    "softmax",
    "sigmoid",
    "cross_entropy",
]
