import numpy as np
import pytest
from sklearn.preprocessing import StandardScaler

from src.gradfit.errors import ShapeMismatchError
from src.gradfit.preprocess import FeaturePreprocessor, Moments, compute_moments


def _raw(seed=0, n=50):
    rng = np.random.default_rng(seed)
    return rng.normal(loc=[10.0, -3.0, 0.5], scale=[4.0, 0.1, 2.0], size=(n, 3))


def test_standardized_columns_have_zero_mean_unit_variance():
    out = FeaturePreprocessor().standardize_and_augment(_raw())
    assert out.shape == (50, 4)
    assert np.all(out[:, 0] == 1.0)
    np.testing.assert_allclose(out[:, 1:].mean(axis=0), 0.0, atol=1e-12)
    np.testing.assert_allclose(out[:, 1:].var(axis=0), 1.0, rtol=1e-12)


def test_matches_sklearn_standard_scaler():
    X = _raw(seed=3)
    ours = FeaturePreprocessor().standardize(X)
    np.testing.assert_allclose(ours, StandardScaler().fit_transform(X), atol=1e-12)


def test_zero_variance_column_is_exactly_zero():
    X = np.column_stack([np.arange(6.0), np.full(6, 4.0)])
    pp = FeaturePreprocessor()
    out = pp.standardize_and_augment(X)
    assert np.all(out[:, 2] == 0.0)
    # later inputs with a different value in the flat column stay finite and zero
    later = pp.standardize_and_augment(np.array([[1.0, 9.0], [2.0, -1.0]]))
    assert np.isfinite(later).all()
    assert np.all(later[:, 2] == 0.0)


def test_second_call_reuses_training_moments():
    train = _raw(seed=1)
    other = _raw(seed=2, n=10) * 3.0 + 7.0
    pp = FeaturePreprocessor()
    pp.standardize_and_augment(train)
    frozen = pp.moments
    out = pp.standardize_and_augment(other)

    assert pp.moments is frozen
    expected = (other - frozen.mean) / np.sqrt(frozen.variance)
    np.testing.assert_allclose(out[:, 1:], expected)
    ref = compute_moments(train)
    np.testing.assert_allclose(frozen.mean, ref.mean)
    np.testing.assert_allclose(frozen.variance, ref.variance)
    # same input, same output; statistics never drift
    np.testing.assert_array_equal(pp.standardize_and_augment(other), out)


def test_freeze_and_reset():
    pp = FeaturePreprocessor()
    assert pp.moments is None and not pp.frozen
    m = Moments(mean=np.array([[1.0]]), variance=np.array([[4.0]]))
    pp.freeze(m)
    np.testing.assert_allclose(pp.standardize([[3.0], [-1.0]]), [[1.0], [-1.0]])
    pp.reset()
    assert pp.moments is None


def test_input_is_not_mutated():
    X = _raw()
    before = X.copy()
    FeaturePreprocessor().standardize_and_augment(X)
    np.testing.assert_array_equal(X, before)


def test_column_mismatch_raises():
    pp = FeaturePreprocessor()
    pp.standardize(_raw())
    with pytest.raises(ShapeMismatchError):
        pp.standardize(np.ones((4, 2)))


def test_one_dimensional_input_is_a_single_column():
    out = FeaturePreprocessor().standardize_and_augment([1.0, 2.0, 3.0, 4.0])
    assert out.shape == (4, 2)


@pytest.mark.parametrize("value", [0.1, 0.3, -7.7])
def test_inexact_constant_column_is_flat(value):
    X = np.column_stack([np.arange(10.0), np.full(10, value)])
    pp = FeaturePreprocessor()
    out = pp.standardize_and_augment(X)
    assert pp.moments.flat.tolist() == [[False, True]]
    assert pp.moments.variance[0, 1] == 0.0
    assert np.all(out[:, 2] == 0.0)
    later = pp.standardize_and_augment(np.array([[0.0, value + 0.1]]))
    assert later[0, 2] == 0.0


def test_frozen_moments_without_mask_derive_it_from_variance():
    m = Moments(mean=np.array([[1.0, 2.0]]), variance=np.array([[4.0, 0.0]]))
    assert m.flat.tolist() == [[False, True]]
