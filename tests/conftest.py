"""Shared fixtures for service_tracing tests."""

import pytest
from opentelemetry import propagate, trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.util._once import Once
from starlette.requests import Request

_TRACING_ENV = ("OTEL_SERVICE_NAME", "OTEL_EXPORTER_OTLP_ENDPOINT", "LOG_FILTER", "LOG_FORMAT")


def _reset_trace_globals() -> None:
    trace._TRACER_PROVIDER = None
    trace._TRACER_PROVIDER_SET_ONCE = Once()


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield provider.get_tracer("tests")
    provider.shutdown()


@pytest.fixture
def clean_tracing(monkeypatch):
    """Give a test a process with no tracing pipeline installed, and restore it afterwards."""
    from service_tracing.tracing import pipeline

    for name in _TRACING_ENV:
        monkeypatch.delenv(name, raising=False)
    previous_propagator = propagate.get_global_textmap()
    _reset_trace_globals()
    yield
    installed = pipeline.get_pipeline()
    if installed is not None:
        installed.shutdown()
    pipeline._pipeline = None
    _reset_trace_globals()
    propagate.set_global_textmap(previous_propagator)


@pytest.fixture
def make_request():
    """Build a Starlette request from plain values."""
    return _make_request


def _make_request(
    path: str = "/health",
    method: str = "GET",
    headers: dict[str, str] | None = None,
    query_string: bytes = b"",
    http_version: str = "1.1",
) -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request(
        {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string,
            "headers": raw_headers,
            "http_version": http_version,
            "scheme": "http",
            "server": ("testserver", 80),
        }
    )
