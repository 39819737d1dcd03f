"""Per-request tracing middleware."""

import time
from datetime import timedelta

import structlog
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from service_tracing.tracing.spans import make_span, on_response

logger = structlog.get_logger()


class TracingMiddleware(BaseHTTPMiddleware):
    """Wrap every HTTP request in a ``request`` span.

    The span is built by :func:`make_span` (joining the caller's trace when a
    valid ``traceparent`` header is present), made current while the handler
    runs, annotated by :func:`on_response` and ended when the response is
    ready. Unhandled exceptions mark the span as failed and are logged as
    ``request_failed``; the structlog span bridge turns that log entry into the
    span's exception event. The exception is re-raised.
    """

    def __init__(self, app: ASGIApp, tracer: trace.Tracer | None = None) -> None:
        super().__init__(app)
        self.tracer = tracer

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        span = make_span(request, tracer=self.tracer)
        start = time.perf_counter()
        with trace.use_span(span, end_on_exit=True, record_exception=False):
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                logger.error(
                    "request_failed",
                    method=request.method,
                    path=request.url.path,
                    duration_ms=duration_ms,
                    exc_info=True,
                )
                raise
            on_response(response, timedelta(seconds=time.perf_counter() - start), span)
        return response
