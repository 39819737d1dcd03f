"""OpenTelemetry pipeline and request span hooks."""

from service_tracing.tracing.pipeline import (
    DEFAULT_OTLP_ENDPOINT,
    TracingPipeline,
    get_pipeline,
    init_tracing,
)
from service_tracing.tracing.spans import make_span, on_response

__all__ = [
    "DEFAULT_OTLP_ENDPOINT",
    "TracingPipeline",
    "get_pipeline",
    "init_tracing",
    "make_span",
    "on_response",
]
