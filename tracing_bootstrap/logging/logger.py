"""structlog pipeline for processes that let the bootstrap set up logging."""

import logging
import sys
from typing import Any, List, Optional

import structlog
from opentelemetry import trace
from structlog.types import EventDict, Processor

from tracing_bootstrap.logging.config import CONSOLE, LogConfig


def add_trace_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the ids of the active span so records can be joined with traces."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict.setdefault("trace_id", format(ctx.trace_id, "032x"))
        event_dict.setdefault("span_id", format(ctx.span_id, "016x"))
    return event_dict


def _add_service(service_name: str) -> Processor:
    def add_service(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def configure_logging(config: LogConfig, service_name: Optional[str] = None) -> None:
    """Configure structlog for the whole process.

    The initializer calls this twice: before the tracer settings are read,
    so parse diagnostics are rendered, and again once the service name is
    resolved, so later records carry it.

    Args:
        config: Level, renderer and output settings.
        service_name: Added as ``service`` to every record when given.
    """
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_trace_context,
    ]
    if service_name is not None:
        processors.append(_add_service(service_name))
    processors.append(structlog.processors.format_exc_info)

    if config.renderer == CONSOLE:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    if config.enable_console:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stdout)
    else:
        logger_factory = structlog.ReturnLoggerFactory()

    # Module loggers are not cached: a second call must replace the pipeline.
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_number(config.level)),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=False,
    )


def level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    return number if isinstance(number, int) else logging.INFO
