"""Structlog processors for service tracing."""

import sys
from typing import Any

from opentelemetry import trace

_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "passwd",
        "token",
        "access_token",
        "refresh_token",
        "api_key",
        "apikey",
        "secret",
        "secret_key",
        "authorization",
        "cookie",
        "session_id",
        "credit_card",
    }
)

_PRIMITIVES = (str, bool, int, float)


def censor_sensitive_data(logger: Any, method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Redact values for keys that look like secrets."""
    for key in event_dict:
        if key.lower() in _SENSITIVE_KEYS:
            event_dict[key] = "***REDACTED***"
    return event_dict


def add_service_name(service_name: str) -> Any:
    """Return a processor that binds service=<name> to every event."""

    def processor(logger: Any, method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def _exception_from(exc_info: Any) -> BaseException | None:
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1]
    if exc_info:
        return sys.exc_info()[1]
    return None


def record_span_events(logger: Any, method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mirror log events onto the current recording span.

    Events carrying an exception, either as ``exc_info`` or as a field value
    such as ``error=exc``, become exception events via ``record_exception``
    whatever their level; everything else becomes a plain span event. Must run
    before ``format_exc_info`` so the exception object is still available.
    """
    span = trace.get_current_span()
    if not span.is_recording():
        return event_dict

    attributes = {
        key: value
        for key, value in event_dict.items()
        if key not in ("event", "exc_info") and not key.startswith("_") and isinstance(value, _PRIMITIVES)
    }
    exc = _exception_from(event_dict.get("exc_info"))
    if exc is None:
        exc = next((value for value in event_dict.values() if isinstance(value, BaseException)), None)
    if exc is not None:
        span.record_exception(exc, attributes=attributes)
    else:
        span.add_event(str(event_dict.get("event", "")), attributes=attributes)
    return event_dict


def add_trace_context(logger: Any, method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Add ``trace_id`` and ``span_id`` of the current span, when there is one."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict.setdefault("trace_id", trace.format_trace_id(span_context.trace_id))
        event_dict.setdefault("span_id", trace.format_span_id(span_context.span_id))
    return event_dict
