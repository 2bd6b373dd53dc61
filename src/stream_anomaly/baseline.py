"""Baseline statistics derived from the contents of a sliding window.

Every helper in this module is a pure function of the values it receives. The
detector recomputes the baseline in full after each push rather than keeping
running moments, so a baseline always describes exactly the window it was
built from.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from stream_anomaly.types import BaselineSnapshot

__all__ = [
    "BaselineStatistics",
    "EMPTY_BASELINE",
    "compute",
    "median",
    "median_absolute_deviation",
    "scale_exponent",
    "standard_units",
]


@dataclass(slots=True, frozen=True)
class BaselineStatistics:
    """Population statistics describing the current window.

    Attributes:
        count: Number of observations the snapshot was computed from.
        mean: Arithmetic mean of the window.
        std_dev: Population standard deviation (divisor ``n``).
        min_value: Smallest observation, ``+inf`` for an empty window.
        max_value: Largest observation, ``-inf`` for an empty window.
    """

    count: int
    mean: float
    std_dev: float
    min_value: float
    max_value: float

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> BaselineSnapshot:
        """Return the snapshot as a plain dictionary."""

        return {
            "count": self.count,
            "mean": self.mean,
            "std_dev": self.std_dev,
            "min_value": self.min_value,
            "max_value": self.max_value,
        }


EMPTY_BASELINE = BaselineStatistics(
    count=0,
    mean=0.0,
    std_dev=0.0,
    min_value=math.inf,
    max_value=-math.inf,
)


def scale_exponent(values: Iterable[float]) -> int:
    """Return the exponent ``e`` with every ``|value| < 2 ** e``."""

    largest = max((abs(value) for value in values), default=0.0)
    return math.frexp(largest)[1]


def standard_units(value: float, center: float, spread: float) -> float:
    """Return ``(value - center) / spread`` for a positive, finite ``spread``.

    The difference of two finite floats can overflow; their halves cannot.
    """

    difference = value - center
    if math.isinf(difference):
        return (value / 2.0 - center / 2.0) / (spread / 2.0)
    return difference / spread


def compute(values: Iterable[float]) -> BaselineStatistics:
    """Compute mean, population standard deviation, min and max.

    Args:
        values: Window contents. Any iterable of floats is accepted; it is
            consumed once.

    Returns:
        A :class:`BaselineStatistics` snapshot. An empty input yields
        :data:`EMPTY_BASELINE`. When every value is identical the mean equals
        that value and ``std_dev`` is exactly ``0.0``.
    """

    data = [float(value) for value in values]
    n = len(data)
    if n == 0:
        return EMPTY_BASELINE

    lowest = data[0]
    highest = data[0]
    for value in data:
        if value < lowest:
            lowest = value
        if value > highest:
            highest = value

    if lowest == highest:
        # Summation rounding must not invent spread for a flat window.
        return BaselineStatistics(
            count=n, mean=lowest, std_dev=0.0, min_value=lowest, max_value=highest
        )

    # Moments are taken on values scaled into [-1, 1] by a power of two, which
    # is exact and keeps sums of large finite observations from overflowing.
    exponent = scale_exponent((lowest, highest))
    scaled = [math.ldexp(value, -exponent) for value in data]
    mean = sum(scaled) / n
    variance = sum((value - mean) ** 2 for value in scaled) / n
    return BaselineStatistics(
        count=n,
        mean=math.ldexp(mean, exponent),
        std_dev=math.ldexp(math.sqrt(variance), exponent),
        min_value=lowest,
        max_value=highest,
    )


def _sorted_median(ordered: Sequence[float]) -> float:
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return ordered[mid - 1] / 2.0 + ordered[mid] / 2.0
    return ordered[mid]


def median(values: Iterable[float]) -> float:
    """Return the median of ``values`` (``0.0`` when empty).

    Even-length inputs average the two middle elements.
    """

    ordered = sorted(float(value) for value in values)
    if not ordered:
        return 0.0
    return _sorted_median(ordered)


def median_absolute_deviation(
    values: Iterable[float], *, center: float | None = None
) -> float:
    """Return the median absolute deviation from the median.

    Args:
        values: Observations to describe.
        center: Precomputed median of ``values``. Computed when omitted.

    Returns:
        ``median(|x - median(values)|)``, or ``0.0`` for an empty input.
    """

    data = [float(value) for value in values]
    if not data:
        return 0.0
    mid = median(data) if center is None else center
    return _sorted_median(sorted(abs(value - mid) for value in data))
