"""Configuration file discovery and decoding."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, TextIO, cast

from stream_anomaly.settings import StreamAnomalySettings

LOGGER = logging.getLogger(__name__)

DEFAULT_CANDIDATES: tuple[Path, ...] = (
    Path("config/stream_anomaly.yml"),
    Path("config/stream_anomaly.yaml"),
    Path("config/stream_anomaly.json"),
)


class YamlModule(Protocol):
    """Subset of PyYAML used by the loader."""

    YAMLError: type[Exception]

    def safe_load(self, stream: TextIO | str) -> object:
        """Parse YAML content from a text stream or string."""


def load_structured_config(
    path: str | None, settings: StreamAnomalySettings
) -> dict[str, object] | None:
    """Return the first readable configuration mapping.

    Args:
        path: Explicit configuration path from the caller. Takes precedence
            over ``STREAM_ANOMALY_CONFIG_PATH`` and the default locations.
        settings: Environment settings consulted for the configured path.

    Returns:
        The decoded mapping, or ``None`` when no candidate could be read. A
        requested path that does not exist is logged and yields ``None``.
    """

    candidates: Iterable[Path]
    explicit = path if path is not None else settings.config_path
    if explicit:
        requested = Path(explicit)
        if not requested.is_file():
            LOGGER.warning(
                "Configuration file not found; using defaults",
                extra={"config_path": str(requested)},
            )
            return None
        candidates = (requested,)
    else:
        candidates = DEFAULT_CANDIDATES

    for candidate in candidates:
        data = _read_candidate(candidate)
        if data is not None:
            LOGGER.debug("Loaded configuration", extra={"config_path": str(candidate)})
            return data
    return None


def _read_candidate(path: Path) -> dict[str, object] | None:
    if not path.is_file():
        return None
    suffix = path.suffix.lower()
    if suffix == ".json":
        return _read_json(path)
    if suffix in {".yml", ".yaml"}:
        return _read_yaml(path)
    LOGGER.warning(
        "Ignoring configuration file with unsupported suffix",
        extra={"config_path": str(path)},
    )
    return None


def _read_json(path: Path) -> dict[str, object] | None:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.warning(
            "Unreadable JSON configuration",
            extra={"config_path": str(path), "error": str(exc)},
        )
        return None
    return _string_keyed(payload)


def _read_yaml(path: Path) -> dict[str, object] | None:
    """Decode a YAML file when PyYAML is installed.

    PyYAML is an optional dependency; without it YAML candidates are skipped.
    """

    module = _import_yaml()
    if module is None:
        LOGGER.warning(
            "PyYAML is not installed; skipping YAML configuration",
            extra={"config_path": str(path)},
        )
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = module.safe_load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning(
            "Unreadable YAML configuration",
            extra={"config_path": str(path), "error": str(exc)},
        )
        return None
    except module.YAMLError as exc:
        LOGGER.warning(
            "Malformed YAML configuration",
            extra={"config_path": str(path), "error": str(exc)},
        )
        return None
    return _string_keyed(payload)


def _import_yaml() -> YamlModule | None:
    try:
        import yaml
    except ModuleNotFoundError:
        return None
    return cast(YamlModule, yaml)


def _string_keyed(value: object) -> dict[str, object] | None:
    if not isinstance(value, dict):
        return None
    mapping = cast(dict[object, object], value)
    return {key: item for key, item in mapping.items() if isinstance(key, str)}
