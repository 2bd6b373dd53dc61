"""Median/MAD detection, resistant to the outliers it is looking for."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from stream_anomaly.baseline import (
    BaselineStatistics,
    median,
    median_absolute_deviation,
    scale_exponent,
)
from stream_anomaly.types import StrategyName

__all__ = ["RobustStrategy", "robust_deviation"]


def _scaled_deviation(value: float, values: Sequence[float]) -> float | None:
    # The ratio is scale invariant; scaling into [-1, 1] keeps every
    # difference finite.
    exponent = scale_exponent([value, *values])
    scaled = [math.ldexp(item, -exponent) for item in values]
    center = median(scaled)
    mad = median_absolute_deviation(scaled, center=center)
    if mad == 0.0:
        return None
    return abs(math.ldexp(value, -exponent) - center) / mad


def robust_deviation(value: float, values: Sequence[float]) -> float:
    """Return ``|value - median| / MAD`` over ``values``.

    Returns ``0.0`` when the values have no spread around their median.
    """

    deviation = _scaled_deviation(value, values)
    return 0.0 if deviation is None else deviation


@dataclass(slots=True, frozen=True)
class RobustStrategy:
    """Flag values far from the median in units of MAD.

    Unlike mean and standard deviation, the median and MAD barely move when
    the window holds a cluster of anomalies.
    """

    name: StrategyName = "robust"
    window_level: bool = False

    def score(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
    ) -> float:
        return robust_deviation(value, values)

    def detect(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> bool:
        return self.evaluate(values, baseline, value, threshold)[0]

    def evaluate(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> tuple[bool, float]:
        deviation = _scaled_deviation(value, values)
        if deviation is None:
            return False, 0.0
        return deviation > threshold, deviation
