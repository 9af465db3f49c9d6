import numpy as np
import pytest
import sklearn.metrics as skm

from src.gradfit.errors import ShapeMismatchError
from src.gradfit.metrics import accuracy, classification_report, r2_score, regression_report


def test_r2_perfect_and_mean_predictor():
    y = np.array([1.0, 2.0, 4.0, 8.0])
    assert r2_score(y, y) == 1.0
    assert r2_score(y, np.full(4, y.mean())) == pytest.approx(0.0)


def test_r2_matches_sklearn():
    rng = np.random.default_rng(0)
    y = rng.normal(size=50)
    p = y + rng.normal(scale=0.3, size=50)
    assert r2_score(y.reshape(-1, 1), p.reshape(-1, 1)) == pytest.approx(skm.r2_score(y, p))


@pytest.mark.parametrize("pred", [[3.0, 3.0, 3.0], [1.0, 2.0, 3.0]])
def test_r2_nan_on_zero_label_variance(pred):
    assert np.isnan(r2_score([3.0, 3.0, 3.0], pred))


def test_accuracy_basic_and_empty():
    assert accuracy([0, 1, 2, 1], [0, 1, 1, 1]) == 0.75
    assert np.isnan(accuracy([], []))
    with pytest.raises(ShapeMismatchError):
        accuracy([0, 1], [0])


def test_reports():
    reg = regression_report([1.0, 2.0, 3.0], [1.0, 2.0, 4.0])
    assert reg["mae"] == pytest.approx(1 / 3)
    assert reg["rmse"] == pytest.approx(np.sqrt(1 / 3))
    cls = classification_report([0, 1, 1, 0], [0, 1, 0, 0])
    assert cls["accuracy"] == 0.75
    assert cls["macro_f1"] == pytest.approx(skm.f1_score([0, 1, 1, 0], [0, 1, 0, 0], average="macro"))
