"""Detection strategies and the registry used to select them by name."""

from __future__ import annotations

from typing import Final, get_args

from stream_anomaly.strategies.base import DetectionStrategy
from stream_anomaly.strategies.isolation import IsolationStrategy
from stream_anomaly.strategies.robust import RobustStrategy
from stream_anomaly.strategies.zscore import ZScoreStrategy
from stream_anomaly.types import StrategyName

__all__ = [
    "DetectionStrategy",
    "IsolationStrategy",
    "RobustStrategy",
    "STRATEGY_NAMES",
    "ZScoreStrategy",
    "get_strategy",
]

STRATEGY_NAMES: Final[tuple[str, ...]] = get_args(StrategyName)

_REGISTRY: Final[dict[str, DetectionStrategy]] = {
    "zscore": ZScoreStrategy(),
    "isolation": IsolationStrategy(),
    "robust": RobustStrategy(),
}


def get_strategy(name: str) -> DetectionStrategy:
    """Return the strategy registered under ``name``.

    Args:
        name: One of ``"zscore"``, ``"isolation"`` or ``"robust"``. Matching
            ignores case and surrounding whitespace.

    Raises:
        ValueError: If ``name`` is not a known strategy.
    """

    key = name.strip().lower()
    try:
        return _REGISTRY[key]
    except KeyError:
        raise ValueError(
            f"Unknown strategy {name!r}; expected one of {', '.join(STRATEGY_NAMES)}."
        ) from None
