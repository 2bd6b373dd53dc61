"""Environment-backed settings primitives for :mod:`stream_anomaly`."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["StreamAnomalySettings", "get_settings"]


class StreamAnomalySettings(BaseSettings):
    """Expose environment-derived configuration knobs for the detector.

    All environment lookups go through this class. Every attribute maps to a
    documented environment variable and defaults to ``None`` when the variable
    is absent, leaving the decision to the configuration loader.

    Attributes:
        capacity: Sliding window capacity override.
        threshold: Detection threshold override.
        strategy: Strategy name override (``zscore``, ``isolation`` or
            ``robust``).
        config_path: Explicit path to a JSON or YAML configuration file.
        log_level: Logging level name applied by the command line entry point.
        stream_id: Identifier attached to structured log lines and records.
    """

    capacity: int | None = Field(default=None, alias="STREAM_ANOMALY_CAPACITY")
    threshold: float | None = Field(default=None, alias="STREAM_ANOMALY_THRESHOLD")
    strategy: str | None = Field(default=None, alias="STREAM_ANOMALY_STRATEGY")
    config_path: str | None = Field(default=None, alias="STREAM_ANOMALY_CONFIG_PATH")
    log_level: str | None = Field(default=None, alias="STREAM_ANOMALY_LOG_LEVEL")
    stream_id: str | None = Field(default=None, alias="STREAM_ANOMALY_STREAM_ID")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator("threshold", mode="before")
    @classmethod
    def _parse_optional_float(cls, value: object) -> float | None:
        """Parse optional float fields while tolerating malformed input.

        Args:
            value: Raw environment value.

        Returns:
            Parsed float when conversion succeeds, otherwise ``None``.
        """

        if value is None:
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return None
        return None

    @field_validator("capacity", mode="before")
    @classmethod
    def _parse_optional_int(cls, value: object) -> int | None:
        """Parse optional integer fields while tolerating malformed input."""

        if value is None:
            return None
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return None
        return None

    @field_validator("strategy", "log_level", "stream_id", "config_path", mode="before")
    @classmethod
    def _blank_as_none(cls, value: object) -> str | None:
        """Treat empty or whitespace-only strings as unset."""

        if value is None:
            return None
        text = str(value).strip()
        return text or None


def get_settings() -> StreamAnomalySettings:
    """Return a :class:`StreamAnomalySettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return StreamAnomalySettings()
