import pytest

from src.gradfit.schedule import AdaptiveLearningRateController


def test_fewer_than_two_epochs_is_noop():
    ctl = AdaptiveLearningRateController()
    assert ctl.update(0.3, []) == 0.3
    assert ctl.update(0.3, [1.0]) == 0.3


def test_improved_loss_grows_rate():
    # history is most-recent-first: 5.0 then 3.0 chronologically
    assert AdaptiveLearningRateController().update(0.2, [3.0, 5.0]) == pytest.approx(0.2 * 1.05)


def test_worse_loss_halves_rate():
    # 5.0 then 7.0 chronologically
    assert AdaptiveLearningRateController().update(0.2, [7.0, 5.0]) == pytest.approx(0.1)


def test_equal_loss_counts_as_improvement():
    assert AdaptiveLearningRateController().update(1.0, [2.0, 2.0]) == pytest.approx(1.05)


def test_only_latest_two_entries_matter():
    ctl = AdaptiveLearningRateController()
    assert ctl.update(1.0, [1.0, 2.0, 0.1]) == pytest.approx(1.05)


@pytest.mark.parametrize(
    "lr, history, expected",
    [
        (0.1, [9.0, 1.0], 0.08),   # halving floored
        (0.95, [1.0, 2.0], 0.97),  # growth capped
        (0.5, [1.0, 2.0], 0.525),  # inside the band
    ],
)
def test_clamps(lr, history, expected):
    ctl = AdaptiveLearningRateController(min_lr=0.08, max_lr=0.97)
    assert ctl.update(lr, history) == pytest.approx(expected)


def test_inverted_clamps_rejected():
    with pytest.raises(ValueError):
        AdaptiveLearningRateController(min_lr=1.0, max_lr=0.5)
