"""Type definitions shared across the detection engine."""

from __future__ import annotations

from typing import Literal, TypedDict

StrategyName = Literal["zscore", "isolation", "robust"]


class BaselineSnapshot(TypedDict):
    """Dictionary view of a baseline for monitoring exporters."""

    count: int
    mean: float
    std_dev: float
    min_value: float
    max_value: float


class StrategyCounters(TypedDict):
    """Per-strategy counters kept by the in-memory metrics sink."""

    observations: int
    anomalies: int
    last_score: float
