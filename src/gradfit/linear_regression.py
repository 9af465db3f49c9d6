from __future__ import annotations

from typing import Dict, Optional, Tuple

import numpy as np

from .errors import check_rows
from .metrics import r2_score, regression_report
from .objectives import MeanSquaredError
from .preprocess import as_matrix
from .trainer import LinearModelTrainer, TrainingOptions


class LinearRegressionTrainer(LinearModelTrainer):
    """Least-squares regression fit by mini-batch gradient descent on MSE."""

    def __init__(self, options: Optional[TrainingOptions] = None):
        super().__init__(MeanSquaredError(), options)

    @property
    def mse_history(self):
        return self.loss_history

    def predict(self, raw_features) -> np.ndarray:
        return self.decision_values(raw_features)

    def evaluate(self, raw_test_features, raw_test_labels) -> float:
        y = as_matrix(raw_test_labels, name="labels")
        preds = self.predict(raw_test_features)
        check_rows(preds, y, "predictions/labels")
        return r2_score(y, preds)

    def report(self, raw_test_features, raw_test_labels) -> Dict[str, float]:
        y = as_matrix(raw_test_labels, name="labels")
        return regression_report(y, self.predict(raw_test_features))

    def coefficients(self) -> Tuple[np.ndarray, np.ndarray]:
        """Weights mapped back to raw feature units as (intercept, slopes).

        slopes has shape (c, outputs), intercept shape (outputs,). Columns
        with zero training variance get a slope of 0.
        """
        self._require_fit()
        m = self.preprocessor.moments
        std = np.sqrt(m.variance).reshape(-1, 1)
        flat = m.flat.reshape(-1, 1)
        slopes = np.where(flat, 0.0, self.weights[1:] / np.where(flat, 1.0, std))
        intercept = self.weights[0] - (m.mean @ slopes).reshape(-1)
        return intercept, slopes


__all__ = ["LinearRegressionTrainer"]
