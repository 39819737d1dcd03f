"""Request-level span hooks for HTTP middleware."""

from datetime import timedelta

from opentelemetry import context as otel_context
from opentelemetry import propagate, trace
from starlette.requests import Request
from starlette.responses import Response

TRACER_NAME = "service_tracing"

_NANOS_PER_MICROSECOND = 1_000


def _uri(request: Request) -> str:
    path = request.url.path
    query = request.url.query
    return f"{path}?{query}" if query else path


def make_span(request: Request, tracer: trace.Tracer | None = None) -> trace.Span:
    """Start a ``request`` span for an inbound HTTP request.

    The span is started but not made current; the caller owns activation and
    ending. ``status`` and ``latency`` are left unset until :func:`on_response`.

    An upstream trace context is taken from the request headers with the
    global propagator. Extraction without a usable ``traceparent`` still
    returns a context, holding an invalid span context, so the parent is only
    attached when it is valid. Otherwise the span starts a new trace.
    """
    tracer = tracer or trace.get_tracer(TRACER_NAME)
    extracted = propagate.extract(request.headers)
    parent_span_context = trace.get_current_span(extracted).get_span_context()
    parent = extracted if parent_span_context.is_valid else otel_context.Context()

    return tracer.start_span(
        "request",
        context=parent,
        kind=trace.SpanKind.SERVER,
        attributes={
            "method": request.method,
            "uri": _uri(request),
            "version": f"HTTP/{request.scope.get('http_version', '1.1')}",
        },
    )


def on_response(response: Response, latency: timedelta, span: trace.Span) -> None:
    """Record the response status and request latency (nanoseconds) on ``span``.

    Does not end the span.
    """
    span.set_attribute("status", str(response.status_code))
    span.set_attribute("latency", (latency // timedelta(microseconds=1)) * _NANOS_PER_MICROSECOND)
