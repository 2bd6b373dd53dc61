"""Command-line entry point running a detector over a batch of observations."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config_loader import DetectorConfig, load_config
from .detector import AnomalyDetector
from .logging_pipeline import (
    configure_structured_logging,
    detach_queue_handlers,
    shutdown_listeners,
)
from .settings import get_settings
from .strategies import STRATEGY_NAMES

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_ANOMALY = 2


def _read_stdin() -> str | None:
    """Read observations from stdin when it is not a terminal."""
    try:
        if sys.stdin and not sys.stdin.isatty():
            return sys.stdin.read()
    except OSError as e:
        print(f"Error reading stdin: {e}", file=sys.stderr)
    return None


def _load_text(path: str | None) -> str:
    if path:
        return Path(path).read_text(encoding="utf-8")
    stdin_payload = _read_stdin()
    if stdin_payload:
        return stdin_payload
    raise ValueError("No input provided. Use --input or pipe observations via stdin.")


def parse_observations(text: str) -> list[float]:
    """Parse a JSON array or newline-separated numbers.

    Blank lines and lines starting with ``#`` are skipped.

    Raises:
        ValueError: If an entry is not a number.
    """

    stripped = text.strip()
    if stripped.startswith("["):
        values: list[float] = []
        for index, item in enumerate(json.loads(stripped)):
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                raise ValueError(f"Entry {index} is not a number: {item!r}")
            values.append(float(item))
        return values

    values = []
    for lineno, line in enumerate(stripped.splitlines(), start=1):
        token = line.strip()
        if not token or token.startswith("#"):
            continue
        try:
            values.append(float(token))
        except ValueError:
            raise ValueError(f"Line {lineno} is not a number: {token!r}") from None
    return values


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stream-anomaly",
        description="Detect anomalies in a stream of numeric observations.",
    )
    parser.add_argument(
        "--input",
        "-i",
        help="File of observations (JSON array or one number per line). "
        "Reads stdin when omitted.",
    )
    parser.add_argument("--config", "-c", help="JSON or YAML configuration file.")
    parser.add_argument("--capacity", type=int, help="Sliding window capacity.")
    parser.add_argument("--threshold", type=float, help="Detection threshold.")
    parser.add_argument(
        "--strategy", choices=STRATEGY_NAMES, help="Detection strategy."
    )
    parser.add_argument("--stream-id", help="Identifier attached to records and logs.")
    parser.add_argument(
        "--anomalies-only",
        action="store_true",
        help="Only print records for anomalous observations.",
    )
    parser.add_argument(
        "--fail-on-anomaly",
        action="store_true",
        help=f"Exit with status {EXIT_ANOMALY} when any anomaly is found.",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Quiet mode: suppress output, just return exit code.",
    )
    return parser


def _apply_arguments(config: DetectorConfig, args: argparse.Namespace) -> DetectorConfig:
    updated = config
    if args.capacity is not None:
        updated = replace(updated, capacity=args.capacity)
    if args.threshold is not None:
        updated = replace(updated, threshold=args.threshold)
    if args.strategy is not None:
        updated = replace(updated, strategy=args.strategy)
    if args.stream_id:
        updated = replace(updated, log=replace(updated.log, stream_id=args.stream_id))
    return updated.validate()


def main(argv: list[str] | None = None) -> int:
    """Run a detector over the observations and print one record per line."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else EXIT_ERROR
        return EXIT_OK if exit_code == 0 else EXIT_ERROR

    try:
        config = _apply_arguments(
            load_config(args.config, settings=get_settings()), args
        )
        observations = parse_observations(_load_text(args.input))
    except Exception as exc:
        if not args.quiet:
            print(str(exc), file=sys.stderr)
        return EXIT_ERROR

    package_logger = logging.getLogger("stream_anomaly")
    previous_level = package_logger.level
    listener = configure_structured_logging(
        package_logger,
        stream_id=config.log.stream_id,
        level=config.log.level_number,
    )
    anomalies = 0
    try:
        detector = AnomalyDetector.from_config(config)
        for sequence, value in enumerate(observations):
            detection = detector.observe(value)
            anomalies += detection.anomalous
            if args.quiet or (args.anomalies_only and not detection.anomalous):
                continue
            record = detection.to_record(
                stream_id=config.log.stream_id, sequence=sequence
            )
            print(json.dumps(record.model_dump_json_ready(), separators=(",", ":")))
    except Exception as exc:
        if not args.quiet:
            print(str(exc), file=sys.stderr)
        return EXIT_ERROR
    finally:
        shutdown_listeners([listener])
        detach_queue_handlers(package_logger)
        package_logger.setLevel(previous_level)

    if args.fail_on_anomaly and anomalies:
        return EXIT_ANOMALY
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
