"""Tracing module initialization."""

from tracing_bootstrap.tracing.builder import build_config
from tracing_bootstrap.tracing.config import (
    DEFAULT_SERVICE_NAME,
    CodecConfig,
    Format,
    ReporterConfig,
    SamplerConfig,
    SenderConfig,
    TracerConfig,
)
from tracing_bootstrap.tracing.registry import (
    TracerNotRegisteredError,
    TracerRegistry,
    get_global_registry,
    get_tracer,
    register,
)
from tracing_bootstrap.tracing.tracer import TracerHandle, create_handle

__all__ = [
    "build_config",
    "register",
    "get_tracer",
    "get_global_registry",
    "create_handle",
    "TracerRegistry",
    "TracerHandle",
    "TracerNotRegisteredError",
    "TracerConfig",
    "SamplerConfig",
    "ReporterConfig",
    "SenderConfig",
    "CodecConfig",
    "Format",
    "DEFAULT_SERVICE_NAME",
]
