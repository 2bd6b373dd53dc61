"""Interface shared by the detection strategies."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from stream_anomaly.baseline import BaselineStatistics
from stream_anomaly.types import StrategyName


@runtime_checkable
class DetectionStrategy(Protocol):
    """Decision procedure evaluating one value against a window.

    Implementations are stateless: ``values`` are the window contents the
    value is judged against (oldest first) and ``baseline`` is the snapshot
    computed from exactly those values.
    """

    @property
    def name(self) -> StrategyName:
        """Registry key of the strategy."""
        ...

    @property
    def window_level(self) -> bool:
        """Whether the score describes the window as a whole.

        Window-level strategies judge a candidate value only once it has been
        joined to the window contents.
        """
        ...

    def score(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
    ) -> float:
        """Return a non-negative, unbounded-above anomaly magnitude."""
        ...

    def detect(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> bool:
        """Return ``True`` when ``value`` is anomalous at ``threshold``."""
        ...

    def evaluate(
        self,
        values: Sequence[float],
        baseline: BaselineStatistics,
        value: float,
        threshold: float,
    ) -> tuple[bool, float]:
        """Return the verdict and the score, computing shared terms once."""
        ...
