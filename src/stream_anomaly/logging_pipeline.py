"""Structured JSON logging for detector processes.

Records are handed to a bounded queue and written by a background
:class:`logging.handlers.QueueListener`, so a slow log sink never stalls the
detection loop. When the queue is full new records are dropped.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from queue import Full, Queue
from typing import Iterable, TextIO, override
from uuid import uuid4

LOGGER = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1024

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    Keys passed through ``extra`` are collected under ``context``. The stream
    identifier comes from ``extra={"stream_id": ...}`` when present and falls
    back to the formatter default.
    """

    def __init__(self, *, default_stream_id: str | None = None) -> None:
        super().__init__()
        self._default_stream_id = default_stream_id

    @override
    def format(self, record: logging.LogRecord) -> str:
        stream_id = getattr(record, "stream_id", None) or self._default_stream_id
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key != "stream_id"
        }
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "stream_id": stream_id,
            "context": context,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exception"] = record.exc_text
        return json.dumps(payload, default=str)


class BoundedQueueHandler(logging.handlers.QueueHandler):
    """Queue handler that drops records instead of blocking when full."""

    @override
    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except Full:
            self.handleError(record)

    @override
    def handleError(self, record: logging.LogRecord) -> None:
        return


def configure_structured_logging(
    logger: logging.Logger,
    *,
    stream_id: str | None = None,
    level: int = logging.INFO,
    stream: TextIO | None = None,
    queue_size: int = DEFAULT_QUEUE_SIZE,
) -> logging.handlers.QueueListener:
    """Attach a queue-backed JSON handler to ``logger``.

    Args:
        logger: Logger to configure, usually the ``stream_anomaly`` root.
        stream_id: Identifier stamped on every line that does not carry its
            own. A random UUID is used when omitted.
        level: Logging level applied to ``logger``.
        stream: Text stream written by the listener; ``sys.stderr`` when
            omitted.
        queue_size: Maximum number of buffered records.

    Returns:
        The started listener. Stop it with :func:`shutdown_listeners`.
    """

    logger.setLevel(level)
    record_queue: Queue[logging.LogRecord] = Queue(maxsize=queue_size)
    logger.addHandler(BoundedQueueHandler(record_queue))

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter(default_stream_id=stream_id or str(uuid4())))

    listener = logging.handlers.QueueListener(record_queue, handler)
    listener.start()
    return listener


def detach_queue_handlers(logger: logging.Logger) -> None:
    """Remove handlers installed by :func:`configure_structured_logging`."""

    for handler in list(logger.handlers):
        if isinstance(handler, BoundedQueueHandler):
            logger.removeHandler(handler)


def shutdown_listeners(listeners: Iterable[logging.handlers.QueueListener]) -> None:
    """Stop every listener, logging rather than raising on failure."""

    for listener in listeners:
        try:
            listener.stop()
        except Exception as exc:  # pragma: no cover - shutdown best effort
            LOGGER.warning("Failed to stop logging listener", exc_info=exc)
