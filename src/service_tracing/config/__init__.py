"""Configuration for service tracing."""

from service_tracing.config.settings import DEFAULT_LOG_FILTER, TracingSettings

__all__ = ["DEFAULT_LOG_FILTER", "TracingSettings"]
