"""Tests for structured logging pipeline utilities."""

from __future__ import annotations

import io
import json
import logging
import sys
from logging.handlers import QueueListener
from queue import Queue

import pytest

from stream_anomaly import logging_pipeline


def test_configure_structured_logging_emits_json() -> None:
    """Configure structured logging and verify JSON payloads are emitted."""

    logger = logging.getLogger("stream-anomaly-test")
    buffer = io.StringIO()
    listener = logging_pipeline.configure_structured_logging(
        logger, stream_id="cpu-load", level=logging.INFO, stream=buffer
    )
    try:
        logger.info("sample", extra={"observation": 4.2})
    finally:
        logging_pipeline.shutdown_listeners([listener])
        logging_pipeline.detach_queue_handlers(logger)

    payload = json.loads(buffer.getvalue().strip())
    assert payload["message"] == "sample"
    assert payload["level"] == "INFO"
    assert payload["stream_id"] == "cpu-load"
    assert payload["context"] == {"observation": 4.2}


def test_configure_structured_logging_generates_stream_id() -> None:
    """When the stream ID is omitted a random identifier is emitted."""

    logger = logging.getLogger("stream-anomaly-auto-id")
    buffer = io.StringIO()
    listener = logging_pipeline.configure_structured_logging(logger, stream=buffer)
    try:
        logger.info("auto-id")
    finally:
        logging_pipeline.shutdown_listeners([listener])
        logging_pipeline.detach_queue_handlers(logger)

    payload = json.loads(buffer.getvalue())
    assert isinstance(payload["stream_id"], str)
    assert payload["stream_id"]


def test_record_stream_id_overrides_default() -> None:
    """A per-record ``stream_id`` wins over the formatter default."""

    formatter = logging_pipeline.JsonFormatter(default_stream_id="default")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    record.stream_id = "override"

    payload = json.loads(formatter.format(record))
    assert payload["stream_id"] == "override"
    assert payload["context"] == {}


def test_exceptions_are_rendered() -> None:
    """Exception information is included in the payload."""

    formatter = logging_pipeline.JsonFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    payload = json.loads(formatter.format(record))
    assert "RuntimeError: boom" in payload["exception"]


def test_full_queue_drops_records() -> None:
    """A full queue discards records instead of blocking."""

    record_queue: Queue[logging.LogRecord] = Queue(maxsize=1)
    handler = logging_pipeline.BoundedQueueHandler(record_queue)
    logger = logging.getLogger("stream-anomaly-bounded")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    try:
        logger.info("first")
        logger.info("second")
    finally:
        logger.removeHandler(handler)

    assert record_queue.qsize() == 1
    assert record_queue.get_nowait().getMessage() == "first"


def test_detach_queue_handlers_keeps_other_handlers() -> None:
    """Only queue handlers installed by the pipeline are removed."""

    logger = logging.getLogger("stream-anomaly-detach")
    other = logging.NullHandler()
    logger.addHandler(other)
    listener = logging_pipeline.configure_structured_logging(
        logger, stream=io.StringIO()
    )
    logging_pipeline.shutdown_listeners([listener])
    logging_pipeline.detach_queue_handlers(logger)

    assert logger.handlers == [other]
    logger.removeHandler(other)


def test_shutdown_listeners_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    """Listener shutdown failures should emit warnings."""

    class _FailingListener(QueueListener):
        def __init__(self) -> None:
            super().__init__(Queue(), logging.StreamHandler())

        def stop(self) -> None:
            raise RuntimeError("stop failure")

    with caplog.at_level(logging.WARNING):
        logging_pipeline.shutdown_listeners([_FailingListener()])

    assert "Failed to stop logging listener" in caplog.text
