"""Service Tracing - OpenTelemetry export and request spans for HTTP services."""

__version__ = "0.1.0"
DISTRIBUTION_NAME = "service-tracing"

from service_tracing.config import TracingSettings
from service_tracing.errors import (
    AlreadyInitializedError,
    ExporterConfigError,
    FilterParseError,
    InitError,
    TracingError,
)
from service_tracing.logging import get_logger, setup_logging
from service_tracing.middleware import TracingMiddleware
from service_tracing.tracing import (
    TracingPipeline,
    get_pipeline,
    init_tracing,
    make_span,
    on_response,
)

__all__ = [
    "DISTRIBUTION_NAME",
    "AlreadyInitializedError",
    "ExporterConfigError",
    "FilterParseError",
    "InitError",
    "TracingError",
    "TracingMiddleware",
    "TracingPipeline",
    "TracingSettings",
    "get_logger",
    "get_pipeline",
    "init_tracing",
    "make_span",
    "on_response",
    "setup_logging",
]
