"""Structlog configuration for traced services."""

import logging
import sys

import structlog

from service_tracing.config import DEFAULT_LOG_FILTER
from service_tracing.logging.filter import TRACE, LogFilter, parse_filter
from service_tracing.logging.processors import (
    add_service_name,
    add_trace_context,
    censor_sensitive_data,
    record_span_events,
)


def setup_logging(
    service_name: str,
    log_filter: str | LogFilter = DEFAULT_LOG_FILTER,
    log_format: str = "json",
) -> None:
    """Configure structlog and stdlib logging for the entire process.

    Raises:
        FilterParseError: If ``log_filter`` is a malformed directive string.
    """
    if isinstance(log_filter, str):
        log_filter = parse_filter(log_filter)
    logging.addLevelName(TRACE, "TRACE")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_service_name(service_name),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        censor_sensitive_data,
        record_span_events,
        add_trace_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
    ]
    if log_format == "dev":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    log_filter.apply(root_logger)


def get_logger(**initial_bindings: object) -> structlog.stdlib.BoundLogger:
    """Return a structlog bound logger."""
    return structlog.get_logger(**initial_bindings)
