"""Per-logger verbosity directives.

A filter string is a comma-separated list of directives. A bare level sets the
default level; ``target=level`` sets the level of the stdlib logger named
``target`` (and, through the logger hierarchy, its children)::

    info,opentelemetry.sdk.trace=trace,opentelemetry=debug
"""

import logging
from dataclasses import dataclass, field

from service_tracing.errors import FilterParseError

TRACE = 5

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
}


@dataclass(frozen=True)
class LogFilter:
    """Parsed filter: a default level plus per-logger overrides."""

    default_level: int = logging.INFO
    targets: dict[str, int] = field(default_factory=dict)

    def apply(self, root: logging.Logger | None = None) -> None:
        """Set the root logger to the default level and each target to its own."""
        root = root or logging.getLogger()
        root.setLevel(self.default_level)
        for target, level in self.targets.items():
            logging.getLogger(target).setLevel(level)


def _parse_level(value: str, directive: str) -> int:
    level = _LEVELS.get(value.strip().lower())
    if level is None:
        raise FilterParseError(f"unknown log level {value.strip()!r}", directive=directive)
    return level


def parse_filter(directives: str) -> LogFilter:
    """Parse a filter string into a :class:`LogFilter`.

    Raises:
        FilterParseError: If any directive is malformed.
    """
    default_level = logging.INFO
    targets: dict[str, int] = {}
    for raw in directives.split(","):
        directive = raw.strip()
        if not directive:
            continue
        if "=" not in directive:
            default_level = _parse_level(directive, directive)
            continue
        target, _, value = directive.partition("=")
        target = target.strip()
        if not target or "=" in value:
            raise FilterParseError(f"malformed filter directive {directive!r}", directive=directive)
        targets[target] = _parse_level(value, directive)
    return LogFilter(default_level=default_level, targets=targets)
