"""Structured logging for traced services."""

from service_tracing.logging.filter import TRACE, LogFilter, parse_filter
from service_tracing.logging.setup import get_logger, setup_logging

__all__ = ["TRACE", "LogFilter", "get_logger", "parse_filter", "setup_logging"]
