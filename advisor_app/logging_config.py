"""Structured logging helpers for the Wardrobe Advisor app.

Every record is rendered as one JSON object carrying the active correlation id
and, inside :func:`operation_context`, the name of the running operation.
Wardrobe payloads contain photos, free-text notes and coordinates, so
anything attached to a record passes through :func:`redact_for_log` first.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import sys
import time
import uuid
from typing import Any, Dict, Iterator, Optional, TextIO

CORRELATION_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)
CURRENT_OPERATION: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("operation", default=None)

# Attributes every LogRecord has; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}

SENSITIVE_KEYS = frozenset(
    {
        "user_id",
        "latitude",
        "longitude",
        "image_url",
        "image_base64",
        "notes",
        "key",
        "weather_api_key",
    }
)
MAX_STRING_LENGTH = 200

_EMAIL = re.compile(r"[\w.\-]+@[\w.\-]+")
_BASE64_BLOB = re.compile(r"^[A-Za-z0-9+/]{120,}={0,2}$")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields are redacted and appended."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
            "operation": getattr(record, "operation", None) or CURRENT_OPERATION.get(),
        }
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key in payload:
                continue
            payload[key] = "[redacted]" if key in SENSITIVE_KEYS else redact_for_log(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: int | str | None = None, stream: TextIO | None = None) -> None:
    """Route the root logger through :class:`JsonFormatter`.

    ``LOG_LEVEL`` picks the level when none is passed. Calling this again
    replaces the previous handler instead of stacking another one.
    """

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))


def _redact_string(value: str) -> str:
    if value.startswith("data:image") or _BASE64_BLOB.match(value):
        return "[redacted-image]"
    value = _EMAIL.sub("[redacted-email]", value)
    if len(value) > MAX_STRING_LENGTH:
        return value[:MAX_STRING_LENGTH] + "...[truncated]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Recursively mask user ids, coordinates, notes and image payloads."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in SENSITIVE_KEYS else redact_for_log(value) for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    return _redact_string(str(payload))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return the active correlation id, assigning ``correlation_id`` or a fresh one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    fresh = uuid.uuid4().hex
    CORRELATION_ID.set(fresh)
    return fresh


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted ``fields`` attached as record attributes."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, **fields: Any) -> Iterator[str]:
    """Run one named operation under a correlation id and log how it ended.

    Records emitted inside the block carry ``operation=name``. An exception is
    logged with its duration and re-raised.
    """

    logger = logging.getLogger("advisor_app.operations")
    operation_token = CURRENT_OPERATION.set(name)
    started = time.perf_counter()
    with correlation_context(fields.pop("correlation_id", None) or CORRELATION_ID.get()) as correlation_id:
        log_event(logger, logging.DEBUG, "operation_started", operation=name, correlation_id=correlation_id, **fields)
        try:
            yield correlation_id
        except Exception:
            log_event(
                logger,
                logging.ERROR,
                "operation_failed",
                operation=name,
                correlation_id=correlation_id,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                exc_info=True,
            )
            raise
        finally:
            CURRENT_OPERATION.reset(operation_token)
        log_event(
            logger,
            logging.DEBUG,
            "operation_completed",
            operation=name,
            correlation_id=correlation_id,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
