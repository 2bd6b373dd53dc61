"""Z-score detection against the window mean and standard deviation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stream_anomaly.baseline import BaselineStatistics, standard_units
from stream_anomaly.types import StrategyName

__all__ = ["ZScoreStrategy", "zscore"]


def zscore(value: float, baseline: BaselineStatistics) -> float:
    """Return ``|value - mean| / std_dev``, or ``0.0`` for a flat baseline."""

    if baseline.std_dev == 0.0:
        return 0.0
    return abs(standard_units(value, baseline.mean, baseline.std_dev))


@dataclass(slots=True, frozen=True)
class ZScoreStrategy:
    """Flag values lying more than ``threshold`` deviations from the mean."""

    name: StrategyName = "zscore"
    window_level: bool = False

    def score(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
    ) -> float:
        return zscore(value, baseline)

    def detect(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> bool:
        if baseline.std_dev == 0.0:
            return False
        return zscore(value, baseline) > threshold

    def evaluate(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> tuple[bool, float]:
        if baseline.std_dev == 0.0:
            return False, 0.0
        magnitude = zscore(value, baseline)
        return magnitude > threshold, magnitude
