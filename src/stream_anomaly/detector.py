"""Streaming detector facade owning the window and dispatching to a strategy.

Each call to :meth:`AnomalyDetector.observe` is one atomic step: push the value
(evicting the oldest observation when the window is full), recompute the
baseline from the window, which now includes the new value, and let the
configured strategy judge the value against that baseline.

The new value is part of the baseline that judges it. On small windows this
caps the reachable z-score: a single point among ``n`` cannot exceed
``sqrt(n - 1)``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from threading import Lock
from typing import TYPE_CHECKING

from stream_anomaly.baseline import EMPTY_BASELINE, BaselineStatistics, compute
from stream_anomaly.metrics import MetricsSink, NullMetricsSink
from stream_anomaly.schemas import DetectionRecord
from stream_anomaly.strategies import DetectionStrategy, get_strategy
from stream_anomaly.types import StrategyName
from stream_anomaly.window import SlidingWindow

if TYPE_CHECKING:
    from stream_anomaly.config_loader import DetectorConfig

__all__ = [
    "AnomalyDetector",
    "Detection",
    "NonFiniteObservationError",
    "SynchronizedDetector",
]

LOGGER = logging.getLogger("stream_anomaly.detector")


class NonFiniteObservationError(ValueError):
    """Raised when an observation is NaN or infinite."""


@dataclass(slots=True, frozen=True)
class Detection:
    """Outcome of a single detection step.

    Attributes:
        value: Observation that was evaluated.
        anomalous: Strategy verdict.
        score: Continuous anomaly magnitude on the strategy's scale.
        strategy: Name of the strategy that produced the verdict.
        threshold: Threshold the score was compared against.
        window_size: Number of observations in the window after the push.
        baseline: Baseline the value was judged against.
    """

    value: float
    anomalous: bool
    score: float
    strategy: StrategyName
    threshold: float
    window_size: int
    baseline: BaselineStatistics

    def to_record(
        self, *, stream_id: str | None = None, sequence: int | None = None
    ) -> DetectionRecord:
        """Return the pydantic record consumed by alerting layers."""

        empty = self.baseline.is_empty
        return DetectionRecord(
            stream_id=stream_id,
            sequence=sequence,
            value=self.value,
            anomalous=self.anomalous,
            score=self.score,
            threshold=self.threshold,
            strategy=self.strategy,
            window_size=self.window_size,
            baseline_mean=self.baseline.mean,
            baseline_std_dev=self.baseline.std_dev,
            baseline_min=None if empty else self.baseline.min_value,
            baseline_max=None if empty else self.baseline.max_value,
        )


class AnomalyDetector:
    """Judge each incoming observation against a sliding window of history.

    A detector serves exactly one stream and is not safe to share between
    threads; wrap it in :class:`SynchronizedDetector` when that is required.

    Args:
        capacity: Window capacity, must be positive.
        threshold: Non-negative, finite decision threshold. Its scale depends
            on the strategy: standard deviations for ``"zscore"``, MAD units
            for ``"robust"`` and a ``(0, 1]`` score for ``"isolation"``.
        strategy: Strategy name, ``"zscore"`` by default.
        metrics: Sink receiving one event per observation.
        logger: Logger used for verdicts and rejected observations.

    Raises:
        ValueError: If ``capacity``, ``threshold`` or ``strategy`` is invalid.
    """

    def __init__(
        self,
        capacity: int,
        threshold: float,
        strategy: str = "zscore",
        *,
        metrics: MetricsSink | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        threshold = float(threshold)
        if not math.isfinite(threshold) or threshold < 0.0:
            raise ValueError("threshold must be a finite, non-negative number")
        self._window = SlidingWindow(capacity)
        self._threshold = threshold
        self._strategy: DetectionStrategy = get_strategy(strategy)
        self._baseline = EMPTY_BASELINE
        self._metrics: MetricsSink = metrics if metrics is not None else NullMetricsSink()
        self._logger = logger or LOGGER

    @classmethod
    def from_config(
        cls,
        config: DetectorConfig,
        *,
        metrics: MetricsSink | None = None,
        logger: logging.Logger | None = None,
    ) -> AnomalyDetector:
        """Build a detector from a validated :class:`DetectorConfig`."""

        config.validate()
        return cls(
            config.capacity,
            config.threshold,
            config.strategy,
            metrics=metrics,
            logger=logger,
        )

    @property
    def capacity(self) -> int:
        return self._window.capacity

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def strategy(self) -> StrategyName:
        return self._strategy.name

    @property
    def baseline(self) -> BaselineStatistics:
        """Baseline computed by the most recent observation."""

        return self._baseline

    @property
    def window(self) -> tuple[float, ...]:
        """Snapshot of the window, oldest first."""

        return self._window.values()

    def __len__(self) -> int:
        return len(self._window)

    def __repr__(self) -> str:
        return (
            f"AnomalyDetector(capacity={self.capacity}, threshold={self._threshold}, "
            f"strategy={self.strategy!r}, size={len(self._window)})"
        )

    def observe(self, value: float) -> Detection:
        """Push ``value`` and judge it against the refreshed baseline.

        Args:
            value: New observation.

        Returns:
            The :class:`Detection` describing verdict and score.

        Raises:
            NonFiniteObservationError: If ``value`` is NaN or infinite. The
                window is left untouched.
        """

        value = self._require_finite(value)
        self._window.push(value)
        values = self._window.values()
        baseline = compute(values)
        self._baseline = baseline

        anomalous, score = self._strategy.evaluate(
            values, baseline, value, self._threshold
        )
        detection = Detection(
            value=value,
            anomalous=anomalous,
            score=score,
            strategy=self._strategy.name,
            threshold=self._threshold,
            window_size=len(values),
            baseline=baseline,
        )
        self._metrics.record_detection(detection.strategy, anomalous, score)
        self._log(detection)
        return detection

    def detect(self, value: float) -> bool:
        """Push ``value`` and return whether it is anomalous."""

        return self.observe(value).anomalous

    def score(self, value: float) -> float:
        """Score ``value`` against the current window without recording it.

        Point strategies compare ``value`` with the current baseline. The
        isolation strategy scores the current window joined with ``value``.
        """

        return self._evaluate_candidate(value)[1]

    def is_anomalous(self, value: float) -> bool:
        """Return the verdict for ``value`` without recording it."""

        return self._evaluate_candidate(value)[0]

    def _evaluate_candidate(self, value: float) -> tuple[bool, float]:
        value = self._require_finite(value)
        values = self._window.values()
        if self._strategy.window_level:
            values = (*values, value)
            baseline = compute(values)
        else:
            baseline = self._baseline
        return self._strategy.evaluate(values, baseline, value, self._threshold)

    def _require_finite(self, value: float) -> float:
        number = float(value)
        if not math.isfinite(number):
            self._logger.warning(
                "Rejected non-finite observation",
                extra={"observation": repr(number), "strategy": self.strategy},
            )
            raise NonFiniteObservationError(
                f"Observations must be finite numbers, got {number!r}."
            )
        return number

    def _log(self, detection: Detection) -> None:
        if detection.anomalous:
            self._logger.info(
                "Anomalous observation",
                extra={
                    "observation": detection.value,
                    "score": detection.score,
                    "strategy": detection.strategy,
                    "window_size": detection.window_size,
                },
            )
        elif self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(
                "Observation within baseline",
                extra={
                    "observation": detection.value,
                    "score": detection.score,
                    "strategy": detection.strategy,
                    "window_size": detection.window_size,
                },
            )


@dataclass(slots=True)
class SynchronizedDetector:
    """Serialise access to a detector shared between threads.

    The whole push, recompute and detect step runs under one lock, so no
    caller can observe a window that another caller is half-way through
    updating.
    """

    detector: AnomalyDetector
    _lock: Lock = field(init=False, default_factory=Lock, repr=False)

    def observe(self, value: float) -> Detection:
        with self._lock:
            return self.detector.observe(value)

    def detect(self, value: float) -> bool:
        with self._lock:
            return self.detector.detect(value)

    def score(self, value: float) -> float:
        with self._lock:
            return self.detector.score(value)

    def is_anomalous(self, value: float) -> bool:
        with self._lock:
            return self.detector.is_anomalous(value)

    @property
    def baseline(self) -> BaselineStatistics:
        with self._lock:
            return self.detector.baseline

    @property
    def window(self) -> tuple[float, ...]:
        with self._lock:
            return self.detector.window

    def __len__(self) -> int:
        with self._lock:
            return len(self.detector)
