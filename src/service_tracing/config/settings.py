"""Environment-based tracing configuration."""

import os
from dataclasses import dataclass, field

DEFAULT_LOG_FILTER = "info,opentelemetry.sdk.trace=trace,opentelemetry=debug"


def _optional_env(name: str) -> str | None:
    return os.getenv(name) or None


@dataclass(frozen=True)
class TracingSettings:
    """Immutable tracing configuration read from environment variables.

    ``service_name`` and ``otlp_endpoint`` stay ``None`` when unset so that
    :func:`service_tracing.init_tracing` can apply its own defaults.
    """

    service_name: str | None = field(default_factory=lambda: _optional_env("OTEL_SERVICE_NAME"))
    otlp_endpoint: str | None = field(
        default_factory=lambda: _optional_env("OTEL_EXPORTER_OTLP_ENDPOINT")
    )
    log_filter: str = field(default_factory=lambda: os.getenv("LOG_FILTER", DEFAULT_LOG_FILTER))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))

    def __post_init__(self) -> None:
        object.__setattr__(self, "log_format", self.log_format.lower())
