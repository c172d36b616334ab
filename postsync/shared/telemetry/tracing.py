"""Tracing helpers for cache and remote operations.

traced() wraps a function in a span and records a small allowlist of its
arguments (ids, cache keys, flags) as span attributes. record_cache_outcome()
marks how a read was served (hit, miss, stale, dedup).
"""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Argument names recorded as span attributes; everything else (post bodies,
# fetchers, clients) is skipped.
_SAFE_SPAN_ARGS = frozenset({
    "key", "post_id", "owner_id", "user_id", "previous_owner_id", "kind",
    "freshness_window", "stale_while_revalidate",
})

CACHE_OUTCOMES = ("hit", "miss", "stale", "dedup")


def _attribute_value(value: Any) -> str | int | float | bool:
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, tuple):
        return ":".join(str(part) for part in value)
    return str(value)


def _record_args(
    span: trace.Span, signature: inspect.Signature, args: tuple, kwargs: dict
) -> None:
    try:
        bound = signature.bind(*args, **kwargs)
    except TypeError:
        # Let the call itself raise the argument error.
        return
    for name, value in bound.arguments.items():
        if name in _SAFE_SPAN_ARGS and value is not None:
            span.set_attribute(f"arg.{name}", _attribute_value(value))


def _mark(span: trace.Span, error: Exception | None) -> None:
    if error is None:
        span.set_status(Status(StatusCode.OK))
    else:
        span.set_status(Status(StatusCode.ERROR, str(error)))
        span.record_exception(error)


def traced(
    operation_name: str | None = None,
    attributes: dict | None = None,
) -> Callable:
    """Decorator to create a span for a function (sync or async).

    Args:
        operation_name: Span name (defaults to module.funcname).
        attributes: Optional static attributes set on every span.

    Returns:
        Decorated function.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"
        signature = inspect.signature(func)

        def start():
            return tracer.start_as_current_span(
                span_name,
                attributes=attributes,
                record_exception=False,
                set_status_on_exception=False,
            )

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with start() as span:
                _record_args(span, signature, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _mark(span, e)
                    raise
                _mark(span, None)
                return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with start() as span:
                _record_args(span, signature, args, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _mark(span, e)
                    raise
                _mark(span, None)
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)


def record_cache_outcome(outcome: str, key: tuple) -> None:
    """Add a cache.<outcome> event for key to the current span.

    Raises:
        ValueError: If outcome is not one of CACHE_OUTCOMES.
    """
    if outcome not in CACHE_OUTCOMES:
        raise ValueError(f"Unknown cache outcome: {outcome!r}")
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(f"cache.{outcome}", attributes={"cache.key": _attribute_value(key)})
