"""Tests for the z-score, isolation and robust strategies."""

import pytest

from stream_anomaly.baseline import BaselineStatistics, compute
from stream_anomaly.strategies import (
    DetectionStrategy,
    IsolationStrategy,
    RobustStrategy,
    STRATEGY_NAMES,
    ZScoreStrategy,
    get_strategy,
)
from stream_anomaly.strategies.isolation import (
    MAX_PATH_LENGTH,
    average_path_normalizer,
    path_length,
    point_isolation_score,
    window_isolation_score,
)
from stream_anomaly.strategies.robust import robust_deviation


def _judge(strategy, values, value, threshold):
    return strategy.detect(values, compute(values), value, threshold)


def test_registry_names():
    """All three strategies are registered and satisfy the protocol."""
    assert set(STRATEGY_NAMES) == {"zscore", "isolation", "robust"}
    for name in STRATEGY_NAMES:
        strategy = get_strategy(name)
        assert strategy.name == name
        assert isinstance(strategy, DetectionStrategy)


def test_registry_normalises_names():
    """Lookup ignores case and surrounding whitespace."""
    assert isinstance(get_strategy("  Robust "), RobustStrategy)


def test_registry_rejects_unknown_names():
    """Unknown strategy names raise ValueError."""
    with pytest.raises(ValueError, match="Unknown strategy"):
        get_strategy("forest")


class TestZScore:
    def test_zero_spread_never_flags(self):
        """A flat window has no defined deviation."""
        values = [4.0, 4.0, 4.0]
        strategy = ZScoreStrategy()
        assert _judge(strategy, values, 4.0, 0.0) is False
        assert strategy.score(values, compute(values), 4.0) == 0.0

    def test_flags_values_beyond_threshold(self):
        """Values more than ``threshold`` deviations away are flagged."""
        values = [1.0, 1.1, 0.9, 1.0, 1.05, 0.95, 1.0, 10.0]
        assert _judge(ZScoreStrategy(), values, 10.0, 2.0) is True
        assert _judge(ZScoreStrategy(), values, 1.0, 2.0) is False

    def test_score_is_absolute_deviation(self):
        """Scores are symmetric around the mean."""
        values = [1.0, 3.0]
        baseline = compute(values)
        strategy = ZScoreStrategy()
        assert strategy.score(values, baseline, 4.0) == pytest.approx(2.0)
        assert strategy.score(values, baseline, 0.0) == pytest.approx(2.0)

    def test_distance_near_float_limit(self):
        """Differences that overflow a float still give a finite score."""
        baseline = BaselineStatistics(
            count=2,
            mean=-1.5e308,
            std_dev=1e308,
            min_value=-1.7e308,
            max_value=1.5e308,
        )
        strategy = ZScoreStrategy()
        assert strategy.score([], baseline, 1.5e308) == pytest.approx(3.0)
        assert strategy.detect([], baseline, 1.5e308, 2.9) is True

    def test_evaluate_matches_detect_and_score(self):
        """``evaluate`` agrees with ``detect`` and ``score``."""
        values = [1.0, 2.0, 3.0, 100.0, 4.0, 5.0]
        baseline = compute(values)
        strategy = ZScoreStrategy()
        verdict, score = strategy.evaluate(values, baseline, 100.0, 2.0)
        assert verdict is strategy.detect(values, baseline, 100.0, 2.0)
        assert score == strategy.score(values, baseline, 100.0)
        assert verdict is True


class TestRobust:
    def test_zero_mad_never_flags(self):
        """No spread around the median means no verdict."""
        values = [2.0, 2.0, 2.0, 9.0]
        assert _judge(RobustStrategy(), values, 9.0, 1.0) is False
        assert robust_deviation(9.0, values) == 0.0

    def test_empty_window(self):
        """An empty window is never anomalous."""
        assert RobustStrategy().evaluate([], compute([]), 1.0, 0.0) == (False, 0.0)

    def test_flags_outlier_hidden_from_zscore(self):
        """A far outlier is caught even though it inflates the variance."""
        values = [10.0, 10.1, 9.9, 10.05, 9.95, 10.0, 50.0]
        assert _judge(RobustStrategy(), values, 50.0, 3.0) is True
        assert _judge(ZScoreStrategy(), values, 50.0, 3.0) is False

    def test_score_uses_median_and_mad(self):
        """The score is the deviation from the median in MAD units."""
        values = [1.0, 2.0, 3.0, 4.0, 5.0]
        # median 3, MAD 1
        assert robust_deviation(7.0, values) == pytest.approx(4.0)

    def test_large_values_stay_finite(self):
        """Median and MAD of values near the float limit do not overflow."""
        values = [-1.7e308, -1.6e308, -1.5e308]
        assert robust_deviation(1.7e308, values) == pytest.approx(33.0)
        assert RobustStrategy().evaluate(values, compute(values), 1.7e308, 3.0)[0]


class TestIsolation:
    def test_normalizer(self):
        """The normaliser is zero for trivial samples and grows with n."""
        assert average_path_normalizer(0) == 0.0
        assert average_path_normalizer(1) == 0.0
        assert average_path_normalizer(2) == pytest.approx(2 * 0.5772156649 - 1.0)
        assert average_path_normalizer(3) < average_path_normalizer(10)

    def test_path_length_descending_into_lower_half(self):
        """A point below the candidates is isolated in a few splits."""
        assert path_length(1.0, [5.0]) == 1
        assert path_length(1.0, [2.0, 3.0, 10.0]) == 3
        assert path_length(1.0, []) == 0

    def test_path_length_is_capped(self):
        """A point at the top of the sample runs to the step cap."""
        assert path_length(5.0, [1.0]) == MAX_PATH_LENGTH
        assert path_length(2.0, [2.0, 2.0]) == MAX_PATH_LENGTH

    def test_split_of_large_candidates(self):
        """The midpoint of two huge candidates is finite."""
        assert path_length(1e308, [1.5e308, 1.6e308]) == 2

    def test_window_score_bounds(self):
        """Scores of non-trivial windows lie in (0, 1]."""
        score = window_isolation_score([1.0, 2.0, 3.0, 100.0, 4.0, 5.0])
        assert 0.0 < score <= 1.0

    def test_window_score_for_identical_values_stays_positive(self):
        """Capped paths still produce a strictly positive score."""
        score = window_isolation_score([1.0, 1.0])
        assert 0.0 < score < 1e-150

    def test_trivial_windows_score_zero(self):
        """Windows of fewer than two values cannot be anomalous."""
        assert window_isolation_score([]) == 0.0
        assert window_isolation_score([3.0]) == 0.0
        assert point_isolation_score(3.0, []) == 0.0
        assert IsolationStrategy().evaluate([3.0], compute([3.0]), 3.0, 0.0) == (
            False,
            0.0,
        )

    def test_score_is_deterministic(self):
        """Midpoint splitting makes repeated scoring reproducible."""
        values = [3.0, 7.5, 1.25, 9.0, 4.0]
        assert window_isolation_score(values) == window_isolation_score(list(values))

    def test_detect_compares_window_score_with_threshold(self):
        """The verdict is the window score against the threshold."""
        values = [1.0, 2.0, 3.0, 4.0]
        score = window_isolation_score(values)
        strategy = IsolationStrategy()
        assert _judge(strategy, values, 4.0, score / 2) is True
        assert _judge(strategy, values, 4.0, score) is False

    def test_window_level_flags(self):
        """Only the isolation score describes the window as a whole."""
        assert IsolationStrategy().window_level is True
        assert ZScoreStrategy().window_level is False
        assert RobustStrategy().window_level is False
