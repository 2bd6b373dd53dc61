"""Rescaling helpers applied to observation batches before analysis."""

from __future__ import annotations

import math
from collections.abc import Sequence

from stream_anomaly.baseline import compute, standard_units

__all__ = ["min_max_normalize", "standardize"]


def min_max_normalize(values: Sequence[float]) -> list[float]:
    """Rescale ``values`` linearly onto ``[0, 1]``.

    Args:
        values: Observations to rescale.

    Returns:
        ``(x - min) / (max - min)`` for each value. Empty input returns an
        empty list; a constant input maps every value to ``0.0``.
    """

    if not values:
        return []
    baseline = compute(values)
    low = baseline.min_value
    high = baseline.max_value
    if low == high:
        return [0.0] * len(values)
    span = high - low
    if math.isinf(span):
        # Halves of two finite extremes have a finite difference.
        half_span = high / 2.0 - low / 2.0
        return [(float(value) / 2.0 - low / 2.0) / half_span for value in values]
    return [(float(value) - low) / span for value in values]


def standardize(values: Sequence[float]) -> list[float]:
    """Shift and scale ``values`` to zero mean and unit population variance.

    A constant input maps every value to ``0.0``.
    """

    if not values:
        return []
    baseline = compute(values)
    if baseline.std_dev == 0.0:
        return [0.0] * len(values)
    return [
        standard_units(float(value), baseline.mean, baseline.std_dev)
        for value in values
    ]
