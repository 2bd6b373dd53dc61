"""Deterministic isolation scoring for a one-dimensional window.

Each point is isolated from the other window members by repeatedly splitting
the remaining candidates at the midpoint of their range and following the
half the point falls into. Short average paths mean the window contains points
that separate easily, which is read as anomalous.

Notes:
    This is a single-tree, midpoint-split approximation rather than a
    randomized forest, so results are reproducible for a given window. The
    score orientation (values near ``1`` are anomalous) and the normaliser
    ``c(n) = 2 * (ln(n - 1) + gamma) - 2 * (n - 1) / n`` are kept as the
    engine has always computed them.

    A point at or above every remaining candidate keeps selecting the upper
    half, which stops shrinking once the candidates collapse to a single
    value; such paths run to :data:`MAX_PATH_LENGTH`.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from stream_anomaly.baseline import BaselineStatistics
from stream_anomaly.types import StrategyName

__all__ = [
    "EULER_MASCHERONI",
    "IsolationStrategy",
    "MAX_PATH_LENGTH",
    "average_path_normalizer",
    "path_length",
    "point_isolation_score",
    "window_isolation_score",
]

EULER_MASCHERONI: Final[float] = 0.5772156649
MAX_PATH_LENGTH: Final[int] = 100


def average_path_normalizer(n: int) -> float:
    """Return ``c(n)``, the expected path length used for normalisation.

    Args:
        n: Number of points in the sample.

    Returns:
        ``2 * (ln(n - 1) + gamma) - 2 * (n - 1) / n`` for ``n > 1``, otherwise
        ``0.0``.
    """

    if n <= 1:
        return 0.0
    return 2.0 * (math.log(n - 1) + EULER_MASCHERONI) - 2.0 * (n - 1) / n


def path_length(point: float, candidates: Sequence[float]) -> int:
    """Count the midpoint splits needed to isolate ``point`` from ``candidates``.

    Args:
        point: Value being isolated.
        candidates: The other members of the sample. ``point`` itself must not
            be included.

    Returns:
        Number of partition steps taken, at most :data:`MAX_PATH_LENGTH`.
    """

    remaining = list(candidates)
    steps = 0
    while remaining and steps < MAX_PATH_LENGTH:
        split = min(remaining) / 2.0 + max(remaining) / 2.0
        if point < split:
            remaining = [value for value in remaining if value < split]
        else:
            remaining = [value for value in remaining if value >= split]
        steps += 1
    return steps


def point_isolation_score(point: float, others: Sequence[float]) -> float:
    """Return ``2 ** (-path_length / c(n))`` for a single point.

    ``n`` counts ``point`` together with ``others``. Samples of fewer than two
    points score ``0.0``.
    """

    n = len(others) + 1
    if n <= 1:
        return 0.0
    return 2.0 ** (-path_length(point, others) / average_path_normalizer(n))


def window_isolation_score(values: Sequence[float]) -> float:
    """Return the isolation score of a whole window.

    The path length of every member is estimated against all other members
    and averaged before normalisation.

    Args:
        values: Window contents, including the most recent observation.

    Returns:
        A score in ``(0, 1]`` for windows of two or more values, ``0.0``
        otherwise.
    """

    n = len(values)
    if n <= 1:
        return 0.0
    total = 0
    for index, point in enumerate(values):
        others = [*values[:index], *values[index + 1 :]]
        total += path_length(point, others)
    average = total / n
    return 2.0 ** (-average / average_path_normalizer(n))


@dataclass(slots=True, frozen=True)
class IsolationStrategy:
    """Flag windows whose isolation score exceeds the threshold.

    The score lives in ``(0, 1]``, so thresholds tuned for the z-score
    strategy do not carry over.
    """

    name: StrategyName = "isolation"
    window_level: bool = True

    def score(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
    ) -> float:
        return window_isolation_score(values)

    def detect(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> bool:
        if len(values) <= 1:
            return False
        return window_isolation_score(values) > threshold

    def evaluate(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> tuple[bool, float]:
        if len(values) <= 1:
            return False, 0.0
        isolation = window_isolation_score(values)
        return isolation > threshold, isolation
