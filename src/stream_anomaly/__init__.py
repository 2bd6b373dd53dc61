"""Stream Anomaly - sliding-window anomaly detection for scalar streams."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "AnomalyDetector",
    "BaselineStatistics",
    "Detection",
    "DetectionRecord",
    "DetectorConfig",
    "NonFiniteObservationError",
    "SlidingWindow",
    "SynchronizedDetector",
    "load_config",
]

if TYPE_CHECKING:
    from .baseline import BaselineStatistics
    from .config_loader import DetectorConfig, load_config
    from .detector import (
        AnomalyDetector,
        Detection,
        NonFiniteObservationError,
        SynchronizedDetector,
    )
    from .schemas import DetectionRecord
    from .window import SlidingWindow


def __getattr__(name: str) -> Any:
    """Lazily import submodules so ``import stream_anomaly`` stays cheap."""

    module_map = {
        "AnomalyDetector": "detector",
        "Detection": "detector",
        "NonFiniteObservationError": "detector",
        "SynchronizedDetector": "detector",
        "BaselineStatistics": "baseline",
        "DetectionRecord": "schemas",
        "DetectorConfig": "config_loader",
        "load_config": "config_loader",
        "SlidingWindow": "window",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
