"""Structured error hierarchy for service tracing."""

from service_tracing.errors.exceptions import (
    AlreadyInitializedError,
    ExporterConfigError,
    FilterParseError,
    InitError,
    TracingError,
)

__all__ = [
    "AlreadyInitializedError",
    "ExporterConfigError",
    "FilterParseError",
    "InitError",
    "TracingError",
]
