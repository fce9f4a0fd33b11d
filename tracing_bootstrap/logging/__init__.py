"""Logging module initialization."""

from tracing_bootstrap.logging.config import LogConfig
from tracing_bootstrap.logging.logger import add_trace_context, configure_logging

__all__ = ["LogConfig", "configure_logging", "add_trace_context"]
