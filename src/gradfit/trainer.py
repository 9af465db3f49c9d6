"""Generic mini-batch gradient-descent trainer for linear models.

``LinearModelTrainer`` owns the weights, the cached feature moments and the
loss history. The problem-specific pieces (link function, loss, label
checks) come from an :class:`~src.gradfit.objectives.Objective`.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from typing import Iterator, List, Mapping, Optional, Tuple

import numpy as np

from .errors import NotFittedError, ShapeMismatchError, check_rows
from .objectives import Objective
from .preprocess import FeaturePreprocessor, as_matrix
from .schedule import AdaptiveLearningRateController

log = logging.getLogger(__name__)

CONSTRUCTED = "constructed"
TRAINING = "training"
TRAINED = "trained"


def _coerce(name: str, value, kind):
    try:
        return kind(float(value)) if kind is int and isinstance(value, str) else kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}") from None


@dataclass
class TrainingOptions:
    learning_rate: float = 0.1
    iterations: int = 1000
    batch_size: Optional[int] = None
    decision_boundary: float = 0.5
    min_learning_rate: Optional[float] = None
    max_learning_rate: Optional[float] = None
    log_every: int = 0

    def __post_init__(self):
        # YAML 1.1 reads "1e-3" as a string
        self.learning_rate = _coerce("learning_rate", self.learning_rate, float)
        self.iterations = _coerce("iterations", self.iterations, int)
        self.decision_boundary = _coerce("decision_boundary", self.decision_boundary, float)
        self.log_every = _coerce("log_every", self.log_every, int)
        for name in ("batch_size", "min_learning_rate", "max_learning_rate"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, _coerce(name, value, int if name == "batch_size" else float))

        if not self.learning_rate > 0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if self.batch_size is not None and self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if not 0.0 <= self.decision_boundary <= 1.0:
            raise ValueError(f"decision_boundary must be in [0, 1], got {self.decision_boundary}")
        if self.log_every < 0:
            raise ValueError(f"log_every must be >= 0, got {self.log_every}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, object]]) -> "TrainingOptions":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown training options: {unknown}")
        return cls(**data)

    def to_dict(self) -> dict:
        return asdict(self)


def iter_batches(features: np.ndarray, labels: np.ndarray, batch_size: int) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
    """Yield the floor(n / batch_size) contiguous row slices; remainder rows are dropped."""
    check_rows(features, labels)
    n = features.shape[0]
    if batch_size > n:
        raise ShapeMismatchError(f"batch_size {batch_size} exceeds sample count {n}")
    for j in range(n // batch_size):
        start = j * batch_size
        yield features[start:start + batch_size], labels[start:start + batch_size]


class LinearModelTrainer:
    def __init__(self, objective: Objective, options: Optional[TrainingOptions] = None):
        self.objective = objective
        self.options = replace(options) if options is not None else TrainingOptions()
        self.preprocessor = FeaturePreprocessor()
        self.weights: Optional[np.ndarray] = None
        self.features: Optional[np.ndarray] = None
        self.labels: Optional[np.ndarray] = None
        self.loss_history: List[float] = []
        self.epochs_run = 0
        self.state = CONSTRUCTED
        self._controller = self._make_controller()

    def _make_controller(self) -> AdaptiveLearningRateController:
        return AdaptiveLearningRateController(
            min_lr=self.options.min_learning_rate, max_lr=self.options.max_learning_rate
        )

    # ---- setup -------------------------------------------------------------
    def _prepare_labels(self, labels) -> np.ndarray:
        return as_matrix(labels, name="labels")

    def fit(self, features, labels, options: Optional[TrainingOptions] = None):
        if options is not None:
            self.options = replace(options)
            self._controller = self._make_controller()
        self.reset()
        X = self.preprocessor.standardize_and_augment(features)
        Y = self._prepare_labels(labels)
        check_rows(X, Y)
        self.objective.check_labels(Y)
        batch_size = self.options.batch_size or X.shape[0]
        if batch_size > X.shape[0]:
            raise ShapeMismatchError(f"batch_size {batch_size} exceeds sample count {X.shape[0]}")
        self.features, self.labels = X, Y
        self.weights = np.zeros((X.shape[1], Y.shape[1]))
        return self

    def reset(self) -> None:
        self.preprocessor.reset()
        self.weights = None
        self.features = self.labels = None
        self.loss_history = []
        self.epochs_run = 0
        self.state = CONSTRUCTED

    def _require_fit(self) -> None:
        if self.weights is None:
            raise NotFittedError(f"{type(self).__name__} has not been fit")

    @property
    def input_dim(self) -> int:
        self._require_fit()
        return self.weights.shape[0] - 1

    @property
    def output_dim(self) -> int:
        self._require_fit()
        return self.weights.shape[1]

    @property
    def learning_rate(self) -> float:
        return self.options.learning_rate

    # ---- optimisation ------------------------------------------------------
    def scores(self, augmented: np.ndarray) -> np.ndarray:
        if augmented.shape[1] != self.weights.shape[0]:
            raise ShapeMismatchError(
                f"feature columns {augmented.shape[1]} != weight rows {self.weights.shape[0]}"
            )
        return augmented @ self.weights

    def gradient(self, batch_features: np.ndarray, batch_labels: np.ndarray) -> np.ndarray:
        self._require_fit()
        check_rows(batch_features, batch_labels)
        guesses = self.objective.link(self.scores(batch_features))
        return self.objective.gradient(batch_features, guesses, batch_labels)

    def step(self, batch_features: np.ndarray, batch_labels: np.ndarray) -> np.ndarray:
        grad = self.gradient(batch_features, batch_labels)
        self.weights = self.weights - self.options.learning_rate * grad
        return self.weights

    def current_loss(self) -> float:
        self._require_fit()
        guesses = self.objective.link(self.scores(self.features))
        return self.objective.loss(guesses, self.labels)

    def train_epoch(self) -> float:
        self._require_fit()
        self.state = TRAINING
        batch_size = self.options.batch_size or self.features.shape[0]
        for xb, yb in iter_batches(self.features, self.labels, batch_size):
            self.step(xb, yb)
        loss = self.current_loss()
        self.loss_history.insert(0, loss)
        self.options.learning_rate = self._controller.update(self.options.learning_rate, self.loss_history)
        self.epochs_run += 1
        every = self.options.log_every
        if every and self.epochs_run % every == 0:
            log.info(
                "epoch %04d | %s %.6f | lr %.6g",
                self.epochs_run, self.objective.name, loss, self.options.learning_rate,
            )
        self.state = TRAINED
        return loss

    def train(self, iterations: Optional[int] = None) -> List[float]:
        self._require_fit()
        epochs = self.options.iterations if iterations is None else int(iterations)
        for _ in range(epochs):
            self.train_epoch()
        self.state = TRAINED
        return self.loss_history

    def loss_curve(self) -> List[float]:
        return list(reversed(self.loss_history))

    # ---- inference ---------------------------------------------------------
    def transform(self, raw_features) -> np.ndarray:
        self._require_fit()
        return self.preprocessor.standardize_and_augment(raw_features)

    def decision_values(self, raw_features) -> np.ndarray:
        return self.objective.link(self.scores(self.transform(raw_features)))


__all__ = [
    "TrainingOptions",
    "LinearModelTrainer",
    "iter_batches",
    "CONSTRUCTED",
    "TRAINING",
    "TRAINED",
]
