"""
Tracing bootstrap for Python services.

Reads tracer settings from the host environment at startup and registers a
single process-wide OpenTelemetry tracer.
"""

from tracing_bootstrap.lifecycle import TracingInitializer
from tracing_bootstrap.logging import LogConfig, configure_logging
from tracing_bootstrap.middleware import TracingLifespanMiddleware, init_app
from tracing_bootstrap.sources import ChainSource, ConfigSource, EnvironSource, MappingSource
from tracing_bootstrap.tracing import (
    Format,
    TracerConfig,
    TracerHandle,
    TracerRegistry,
    build_config,
    get_tracer,
    register,
)

__all__ = [
    # Lifecycle
    "TracingInitializer",
    "TracingLifespanMiddleware",
    "init_app",
    # Sources
    "ConfigSource",
    "MappingSource",
    "EnvironSource",
    "ChainSource",
    # Tracing
    "build_config",
    "register",
    "get_tracer",
    "Format",
    "TracerConfig",
    "TracerHandle",
    "TracerRegistry",
    # Logging
    "configure_logging",
    "LogConfig",
]

__version__ = "0.1.0"
