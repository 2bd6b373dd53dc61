"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from stream_anomaly.detector import AnomalyDetector  # noqa: E402

_ENV_VARS = (
    "STREAM_ANOMALY_CAPACITY",
    "STREAM_ANOMALY_THRESHOLD",
    "STREAM_ANOMALY_STRATEGY",
    "STREAM_ANOMALY_CONFIG_PATH",
    "STREAM_ANOMALY_LOG_LEVEL",
    "STREAM_ANOMALY_STREAM_ID",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of configuration tests."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def zscore_detector() -> AnomalyDetector:
    return AnomalyDetector(capacity=6, threshold=2.0, strategy="zscore")


@pytest.fixture
def spike_series() -> list[float]:
    """Quiet series ending in a single large spike."""

    return [1.0, 1.1, 0.9, 1.0, 1.05, 0.95, 1.0, 10.0]
