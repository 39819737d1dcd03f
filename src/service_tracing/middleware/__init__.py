"""Starlette middleware for traced services."""

from service_tracing.middleware.tracing import TracingMiddleware

__all__ = ["TracingMiddleware"]
