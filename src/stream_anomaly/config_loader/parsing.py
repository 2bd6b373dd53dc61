"""Helpers layering environment and file values onto a :class:`DetectorConfig`."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import cast

from stream_anomaly.config_loader.models import DetectorConfig
from stream_anomaly.settings import StreamAnomalySettings


def apply_environment_overrides(
    config: DetectorConfig, settings: StreamAnomalySettings
) -> DetectorConfig:
    """Apply environment-derived overrides to the configuration.

    Args:
        config: Base configuration instance.
        settings: Environment-derived settings.

    Returns:
        Configuration with every set environment value applied.
    """

    updated = config
    if settings.capacity is not None:
        updated = replace(updated, capacity=settings.capacity)
    if settings.threshold is not None:
        updated = replace(updated, threshold=settings.threshold)
    if settings.strategy is not None:
        updated = replace(updated, strategy=settings.strategy.lower())
    if settings.log_level is not None:
        updated = replace(updated, log=replace(updated.log, level=settings.log_level))
    if settings.stream_id is not None:
        updated = replace(
            updated, log=replace(updated.log, stream_id=settings.stream_id)
        )
    return updated


def apply_structured_overrides(
    config: DetectorConfig, data: Mapping[str, object]
) -> DetectorConfig:
    """Apply the ``detector`` and ``logging`` sections of a configuration file.

    Unknown keys and values of the wrong type are ignored.

    Args:
        config: Base configuration instance.
        data: Mapping decoded from the configuration file.

    Returns:
        Configuration updated according to the mapping.
    """

    updated = config

    detector_section = _expect_mapping(data.get("detector"))
    if detector_section is not None:
        capacity = _coerce_int(detector_section.get("capacity"))
        if capacity is not None:
            updated = replace(updated, capacity=capacity)
        threshold = _coerce_float(detector_section.get("threshold"))
        if threshold is not None:
            updated = replace(updated, threshold=threshold)
        strategy = _coerce_str(detector_section.get("strategy"))
        if strategy is not None:
            updated = replace(updated, strategy=strategy.lower())

    logging_section = _expect_mapping(data.get("logging"))
    if logging_section is not None:
        level = _coerce_str(logging_section.get("level"))
        if level is not None:
            updated = replace(updated, log=replace(updated.log, level=level))
        stream_id = _coerce_str(logging_section.get("stream_id"))
        if stream_id is not None:
            updated = replace(updated, log=replace(updated.log, stream_id=stream_id))

    return updated


def _expect_mapping(value: object) -> Mapping[str, object] | None:
    if isinstance(value, Mapping):
        return cast(Mapping[str, object], value)
    return None


def _coerce_int(value: object) -> int | None:
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


def _coerce_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _coerce_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None
