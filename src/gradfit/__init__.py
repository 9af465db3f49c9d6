"""Batched gradient-descent engine for linear and logistic regression.

Modules:
- preprocess: feature standardization with cached training moments
- objectives: link/loss strategies (MSE, softmax and sigmoid cross-entropy)
- trainer: generic linear-model trainer, options and batch slicing
- schedule: adaptive learning-rate controller
- linear_regression / logistic_regression: the two concrete trainers
- metrics: R², accuracy and extended reports
- data, reporting, logutil, train: data seam, telemetry, logging, CLI
"""

__all__ = [
    "preprocess",
    "objectives",
    "trainer",
    "schedule",
    "linear_regression",
    "logistic_regression",
    "metrics",
    "data",
    "reporting",
    "logutil",
    "train",
]
