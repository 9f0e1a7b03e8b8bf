"""Structured logging around wardrobe store and weather provider calls."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from advisor_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

_MAX_PREVIEW_ARGUMENTS = 4


def _arguments_preview(signature: inspect.Signature, args: tuple, kwargs: dict) -> Dict[str, Any]:
    bound = signature.bind_partial(*args, **kwargs).arguments
    bound.pop("self", None)
    preview = dict(list(bound.items())[:_MAX_PREVIEW_ARGUMENTS])
    if len(bound) > _MAX_PREVIEW_ARGUMENTS:
        preview["truncated"] = True
    return redact_for_log(preview)


def summarise_result(result: Any) -> Dict[str, Any]:
    """Describe a call result without logging wardrobe contents."""

    if result is None:
        return {"found": False}
    if isinstance(result, bool):
        return {"succeeded": result}
    if isinstance(result, (list, tuple)):
        return {"count": len(result)}
    return {"found": True}


def instrumented(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, outcome and duration of every call to the wrapped function.

    Arguments are previewed through :func:`redact_for_log`; results are only
    summarised (count or found flag). Exceptions are logged and re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            log_event(
                LOGGER,
                logging.DEBUG,
                "call_started",
                call=operation,
                correlation_id=correlation_id,
                arguments=_arguments_preview(signature, args, kwargs),
            )
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "call_failed",
                    call=operation,
                    correlation_id=correlation_id,
                    error_type=type(exc).__name__,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "call_completed",
                call=operation,
                correlation_id=correlation_id,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                **summarise_result(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrumented", "summarise_result"]
