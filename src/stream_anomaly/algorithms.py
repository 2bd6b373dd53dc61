"""Batch counterparts of the streaming strategies.

These helpers score a complete series at once, every value against the whole
series, which suits offline analysis and back-testing of thresholds.
"""

from __future__ import annotations

from collections.abc import Sequence

from stream_anomaly.baseline import compute
from stream_anomaly.strategies.isolation import point_isolation_score
from stream_anomaly.strategies.zscore import zscore

__all__ = ["isolation_scores", "zscore_flags"]


def zscore_flags(values: Sequence[float], threshold: float) -> list[bool]:
    """Flag values whose z-score against the whole series exceeds ``threshold``.

    Args:
        values: Complete series.
        threshold: Number of population standard deviations.

    Returns:
        One flag per value. Every flag is ``False`` when the series has no
        spread.
    """

    baseline = compute(values)
    if baseline.std_dev == 0.0:
        return [False] * len(values)
    return [zscore(float(value), baseline) > threshold for value in values]


def isolation_scores(values: Sequence[float]) -> list[float]:
    """Return the deterministic isolation score of every value.

    Each value is isolated from the rest of the series by midpoint splits;
    scores near ``1`` mark values that separate quickly.

    Returns:
        One score per value, all ``0.0`` when fewer than two values are given.
    """

    data = [float(value) for value in values]
    return [
        point_isolation_score(point, [*data[:index], *data[index + 1 :]])
        for index, point in enumerate(data)
    ]
