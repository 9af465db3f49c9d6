from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

log = logging.getLogger(__name__)

DECAY = 0.5
GROWTH = 1.05


@dataclass
class AdaptiveLearningRateController:
    """Greedy per-epoch learning-rate rule driven by the loss trend.

    ``loss_history`` is most-recent-first. A worse latest loss halves the
    rate; an equal or better one grows it by 5%. Optional clamps apply after
    the multiplicative step.
    """

    min_lr: Optional[float] = None
    max_lr: Optional[float] = None

    def __post_init__(self):
        if self.min_lr is not None and self.max_lr is not None and self.min_lr > self.max_lr:
            raise ValueError(f"min_lr ({self.min_lr}) must not exceed max_lr ({self.max_lr})")

    def update(self, learning_rate: float, loss_history: Sequence[float]) -> float:
        if len(loss_history) < 2:
            return learning_rate
        current, previous = loss_history[0], loss_history[1]
        if current > previous:
            new_lr = learning_rate * DECAY
            log.debug("loss rose %.6g -> %.6g; lr %.6g -> %.6g", previous, current, learning_rate, new_lr)
        else:
            new_lr = learning_rate * GROWTH
        return self.clamp(new_lr)

    def clamp(self, learning_rate: float) -> float:
        if self.min_lr is not None:
            learning_rate = max(learning_rate, self.min_lr)
        if self.max_lr is not None:
            learning_rate = min(learning_rate, self.max_lr)
        return learning_rate


__all__ = ["AdaptiveLearningRateController", "DECAY", "GROWTH"]
