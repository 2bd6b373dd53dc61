"""Typed configuration dataclasses for :mod:`stream_anomaly.config_loader`."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from stream_anomaly.strategies import STRATEGY_NAMES


@dataclass(slots=True)
class LoggingSettings:
    """Structured logging options used by the command line entry point.

    Attributes:
        level: Logging level name such as ``"INFO"`` or ``"DEBUG"``.
        stream_id: Identifier attached to every log line; generated when
            ``None``.
    """

    level: str = "INFO"
    stream_id: str | None = None

    @property
    def level_number(self) -> int:
        """Return the numeric logging level, ``logging.INFO`` if unknown."""

        value = logging.getLevelName(self.level.upper())
        return value if isinstance(value, int) else logging.INFO


@dataclass(slots=True)
class DetectorConfig:
    """Strongly typed configuration container for a detector.

    Attributes:
        capacity: Number of observations retained in the sliding window.
        threshold: Value the strategy score must exceed to flag an anomaly.
        strategy: Strategy name.
        log: Logging options.
    """

    capacity: int = 50
    threshold: float = 3.0
    strategy: str = "zscore"
    log: LoggingSettings = field(default_factory=LoggingSettings)

    def validate(self) -> DetectorConfig:
        """Check preconditions and return ``self`` for chaining.

        Raises:
            ValueError: If the capacity is not positive, the threshold is
                negative or non-finite, or the strategy is unknown.
        """

        if self.capacity <= 0:
            raise ValueError("capacity must be a positive integer")
        if not math.isfinite(self.threshold) or self.threshold < 0.0:
            raise ValueError("threshold must be a finite, non-negative number")
        if self.strategy not in STRATEGY_NAMES:
            raise ValueError(
                f"Unknown strategy {self.strategy!r}; expected one of "
                f"{', '.join(STRATEGY_NAMES)}."
            )
        return self
