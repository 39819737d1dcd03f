"""Tests for make_span and on_response."""

from datetime import timedelta

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from starlette.responses import Response

TRACE_ID = 0x0AF7651916CD43DD8448EB211C80319C
PARENT_SPAN_ID = 0xB7AD6B7169203331
TRACEPARENT = "00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-01"


class TestMakeSpan:
    def test_request_fields(self, tracer, span_exporter, make_request):
        from opentelemetry.trace import SpanKind

        from service_tracing.tracing import make_span

        span = make_span(make_request("/health"), tracer=tracer)
        span.end()
        (finished,) = span_exporter.get_finished_spans()
        assert finished.name == "request"
        assert finished.kind == SpanKind.SERVER
        assert finished.attributes["method"] == "GET"
        assert finished.attributes["uri"] == "/health"
        assert finished.attributes["version"] == "HTTP/1.1"

    def test_status_and_latency_unset_at_creation(self, tracer, make_request):
        from service_tracing.tracing import make_span

        span = make_span(make_request(), tracer=tracer)
        assert "status" not in span.attributes
        assert "latency" not in span.attributes
        span.end()

    def test_uri_includes_query(self, tracer, make_request):
        from service_tracing.tracing import make_span

        span = make_span(make_request("/items", method="POST", query_string=b"page=2"), tracer=tracer)
        assert span.attributes["uri"] == "/items?page=2"
        assert span.attributes["method"] == "POST"
        span.end()

    def test_http2_version(self, tracer, make_request):
        from service_tracing.tracing import make_span

        span = make_span(make_request(http_version="2"), tracer=tracer)
        assert span.attributes["version"] == "HTTP/2"
        span.end()

    def test_span_is_open_until_ended(self, tracer, span_exporter, make_request):
        from service_tracing.tracing import make_span

        span = make_span(make_request(), tracer=tracer)
        assert span.is_recording()
        assert span_exporter.get_finished_spans() == ()
        span.end()

    def test_valid_traceparent_becomes_parent(self, tracer, make_request):
        from service_tracing.tracing import make_span

        span = make_span(make_request(headers={"traceparent": TRACEPARENT}), tracer=tracer)
        span.end()
        assert span.parent is not None
        assert span.parent.is_remote
        assert span.parent.span_id == PARENT_SPAN_ID
        assert span.get_span_context().trace_id == TRACE_ID

    def test_no_traceparent_is_root(self, tracer, make_request):
        from service_tracing.tracing import make_span

        span = make_span(make_request(), tracer=tracer)
        span.end()
        assert span.parent is None

    def test_zero_trace_id_is_root(self, tracer, make_request):
        from service_tracing.tracing import make_span

        headers = {"traceparent": "00-00000000000000000000000000000000-0000000000000000-01"}
        span = make_span(make_request(headers=headers), tracer=tracer)
        span.end()
        assert span.parent is None
        assert span.get_span_context().trace_id != 0

    def test_garbage_traceparent_is_root(self, tracer, make_request):
        from service_tracing.tracing import make_span

        span = make_span(make_request(headers={"traceparent": "not-a-trace"}), tracer=tracer)
        span.end()
        assert span.parent is None

    def test_ignores_ambient_span_without_header(self, tracer, make_request):
        from service_tracing.tracing import make_span

        with tracer.start_as_current_span("outer"):
            span = make_span(make_request(), tracer=tracer)
        span.end()
        assert span.parent is None

    @pytest.mark.usefixtures("clean_tracing")
    def test_default_tracer_uses_global_provider(self, make_request, span_exporter):
        from service_tracing.tracing import make_span

        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(span_exporter))
        trace.set_tracer_provider(provider)
        span = make_span(make_request())
        assert span.is_recording()
        span.end()
        (finished,) = span_exporter.get_finished_spans()
        assert finished.name == "request"
        assert finished.instrumentation_scope.name == "service_tracing"
        provider.shutdown()


class TestOnResponse:
    def test_records_status_and_latency(self, tracer, span_exporter, make_request):
        from service_tracing.tracing import make_span, on_response

        span = make_span(make_request(), tracer=tracer)
        on_response(Response(status_code=404), timedelta(milliseconds=12), span)
        span.end()
        (finished,) = span_exporter.get_finished_spans()
        assert finished.attributes["status"] == "404"
        assert finished.attributes["latency"] == 12_000_000

    def test_does_not_end_span(self, tracer, span_exporter, make_request):
        from service_tracing.tracing import make_span, on_response

        span = make_span(make_request(), tracer=tracer)
        on_response(Response(status_code=200), timedelta(microseconds=1), span)
        assert span.is_recording()
        assert span_exporter.get_finished_spans() == ()
        span.end()

    def test_health_check_end_to_end(self, tracer, span_exporter, make_request):
        from service_tracing.tracing import make_span, on_response

        span = make_span(make_request("/health"), tracer=tracer)
        on_response(Response(status_code=200), timedelta(milliseconds=5), span)
        span.end()
        (finished,) = span_exporter.get_finished_spans()
        assert finished.parent is None
        assert dict(finished.attributes) == {
            "method": "GET",
            "uri": "/health",
            "version": "HTTP/1.1",
            "status": "200",
            "latency": 5_000_000,
        }
