"""Metrics sinks receiving one event per detection.

Sinks are ordinary objects handed to the detector at construction. Nothing in
the engine registers collectors on a process-wide registry; the Prometheus
sink owns (or is given) its own :class:`prometheus_client.CollectorRegistry`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Protocol, runtime_checkable

from stream_anomaly.types import StrategyCounters

__all__ = [
    "InMemoryMetricsSink",
    "MetricsSink",
    "NullMetricsSink",
    "PrometheusMetricsSink",
]

_SCORE_BUCKETS: tuple[float, ...] = (
    0.1,
    0.25,
    0.5,
    0.75,
    1.0,
    2.0,
    3.0,
    5.0,
    10.0,
    float("inf"),
)


@runtime_checkable
class MetricsSink(Protocol):
    """Receiver for per-observation detection outcomes."""

    def record_detection(self, strategy: str, anomalous: bool, score: float) -> None:
        """Record the outcome of a single detection step."""
        ...


class NullMetricsSink:
    """Sink that discards every event."""

    def record_detection(self, strategy: str, anomalous: bool, score: float) -> None:
        return None


@dataclass(slots=True)
class InMemoryMetricsSink:
    """Thread-safe counters kept per strategy, useful for tests and debugging."""

    _counters: dict[str, StrategyCounters] = field(
        init=False, default_factory=dict, repr=False
    )
    _lock: Lock = field(init=False, default_factory=Lock, repr=False)

    def record_detection(self, strategy: str, anomalous: bool, score: float) -> None:
        with self._lock:
            counters = self._counters.setdefault(
                strategy, {"observations": 0, "anomalies": 0, "last_score": 0.0}
            )
            counters["observations"] += 1
            if anomalous:
                counters["anomalies"] += 1
            counters["last_score"] = float(score)

    def snapshot(self) -> dict[str, StrategyCounters]:
        """Return a copy of the counters keyed by strategy name."""

        with self._lock:
            return {
                name: StrategyCounters(
                    observations=counters["observations"],
                    anomalies=counters["anomalies"],
                    last_score=counters["last_score"],
                )
                for name, counters in self._counters.items()
            }


class PrometheusMetricsSink:
    """Export detection counters and score histograms via ``prometheus_client``.

    Args:
        registry: Registry to attach collectors to. A private
            ``CollectorRegistry`` is created when omitted, so several sinks can
            coexist in one process.
        namespace: Metric name prefix.

    Raises:
        ImportError: If ``prometheus-client`` is not installed.
    """

    def __init__(
        self, registry: Any | None = None, *, namespace: str = "stream_anomaly"
    ) -> None:
        try:
            from prometheus_client import CollectorRegistry, Counter, Histogram
        except ModuleNotFoundError as exc:
            raise ImportError(
                "PrometheusMetricsSink requires the 'prometheus-client' package. "
                "Install it with: pip install 'stream-anomaly[metrics]'."
            ) from exc

        self.registry = registry if registry is not None else CollectorRegistry()
        self._observations = Counter(
            "observations",
            "Observations evaluated by the detector.",
            ["strategy", "verdict"],
            namespace=namespace,
            registry=self.registry,
        )
        self._scores = Histogram(
            "score",
            "Anomaly score reported for each observation.",
            ["strategy"],
            namespace=namespace,
            registry=self.registry,
            buckets=_SCORE_BUCKETS,
        )

    def record_detection(self, strategy: str, anomalous: bool, score: float) -> None:
        verdict = "anomaly" if anomalous else "normal"
        self._observations.labels(strategy=strategy, verdict=verdict).inc()
        self._scores.labels(strategy=strategy).observe(score)

    def export(self) -> str:
        """Return the registry contents in the Prometheus text format."""

        from prometheus_client import generate_latest

        return generate_latest(self.registry).decode("utf-8")
