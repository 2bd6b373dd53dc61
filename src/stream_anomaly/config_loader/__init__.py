"""Public entry points for the :mod:`stream_anomaly` configuration loader."""

from __future__ import annotations

from stream_anomaly.config_loader.models import DetectorConfig, LoggingSettings
from stream_anomaly.config_loader.parsing import (
    apply_environment_overrides,
    apply_structured_overrides,
)
from stream_anomaly.config_loader.sources import load_structured_config
from stream_anomaly.settings import StreamAnomalySettings, get_settings

__all__ = [
    "DetectorConfig",
    "LoggingSettings",
    "load_config",
]


def load_config(
    path: str | None = None, *, settings: StreamAnomalySettings | None = None
) -> DetectorConfig:
    """Load detector configuration from defaults, environment and file.

    Later layers win: built-in defaults, then environment variables, then the
    structured configuration file.

    Args:
        path: Optional explicit path to a JSON or YAML file. When omitted the
            loader consults ``STREAM_ANOMALY_CONFIG_PATH`` and then the default
            search locations.
        settings: Optional pre-instantiated environment settings. When omitted
            :func:`stream_anomaly.settings.get_settings` is used.

    Returns:
        A validated :class:`DetectorConfig`.

    Raises:
        ValueError: If the merged configuration violates a precondition.
    """

    env_settings = settings or get_settings()
    config = apply_environment_overrides(DetectorConfig(), env_settings)
    structured = load_structured_config(path, env_settings)
    if structured is not None:
        config = apply_structured_overrides(config, structured)
    return config.validate()
