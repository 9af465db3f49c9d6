from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from .errors import ShapeMismatchError, check_rows
from .metrics import accuracy, classification_report
from .objectives import SigmoidCrossEntropy, SoftmaxCrossEntropy
from .preprocess import as_matrix
from .trainer import LinearModelTrainer, TrainingOptions


class LogisticRegressionTrainer(LinearModelTrainer):
    """Logistic regression fit by mini-batch gradient descent on cross-entropy.

    One-hot labels of shape (n, m) train a multinomial model with a softmax
    link. A single 0/1 label column trains a binary model with a sigmoid
    link, and predictions are thresholded at ``decision_boundary``.
    """

    def __init__(self, options: Optional[TrainingOptions] = None):
        super().__init__(SoftmaxCrossEntropy(), options)

    @property
    def cost_history(self):
        return self.loss_history

    @property
    def binary(self) -> bool:
        return isinstance(self.objective, SigmoidCrossEntropy)

    def _prepare_labels(self, labels) -> np.ndarray:
        Y = as_matrix(labels, name="labels")
        self.objective = SigmoidCrossEntropy() if Y.shape[1] == 1 else SoftmaxCrossEntropy()
        return Y

    def predict_proba(self, raw_features) -> np.ndarray:
        return self.decision_values(raw_features)

    def predict(self, raw_features) -> np.ndarray:
        proba = self.predict_proba(raw_features)
        if self.binary:
            return (proba[:, 0] >= self.options.decision_boundary).astype(np.int64)
        # np.argmax picks the lowest index on ties
        return np.argmax(proba, axis=1)

    def _label_indices(self, raw_labels) -> np.ndarray:
        Y = as_matrix(raw_labels, name="labels")
        if Y.shape[1] != self.output_dim:
            raise ShapeMismatchError(
                f"label columns {Y.shape[1]} != model outputs {self.output_dim}"
            )
        if self.binary:
            return Y[:, 0].astype(np.int64)
        return np.argmax(Y, axis=1)

    def evaluate(self, raw_test_features, raw_test_labels) -> float:
        y = self._label_indices(raw_test_labels)
        if y.size == 0:
            return float("nan")
        preds = self.predict(raw_test_features)
        check_rows(preds, y, "predictions/labels")
        return accuracy(y, preds)

    def report(self, raw_test_features, raw_test_labels) -> Dict[str, float]:
        y = self._label_indices(raw_test_labels)
        if y.size == 0:
            return {"accuracy": float("nan")}
        return classification_report(y, self.predict(raw_test_features))


__all__ = ["LogisticRegressionTrainer"]
