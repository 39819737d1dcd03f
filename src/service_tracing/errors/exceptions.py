"""Structured exception hierarchy for service tracing."""

from typing import Any


class TracingError(Exception):
    """Base exception for all service tracing errors.

    Attributes:
        error_code: Machine-readable error identifier.
        context: Arbitrary key-value pairs providing additional error context.
    """

    def __init__(self, message: str, error_code: str = "TRACING_ERROR", **context: Any) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.context = context


class InitError(TracingError):
    """Tracing pipeline initialisation failed. Startup should abort."""

    def __init__(self, message: str, error_code: str = "INIT_ERROR", **context: Any) -> None:
        super().__init__(message, error_code=error_code, **context)


class FilterParseError(InitError):
    """A log filter directive string could not be parsed."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, error_code="FILTER_PARSE_ERROR", **context)


class ExporterConfigError(InitError):
    """The span exporter could not be built from the given configuration."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, error_code="EXPORTER_CONFIG_ERROR", **context)


class AlreadyInitializedError(InitError):
    """A global tracer provider is already installed in this process."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, error_code="ALREADY_INITIALIZED", **context)
