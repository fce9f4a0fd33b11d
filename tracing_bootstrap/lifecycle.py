"""Startup/shutdown hook that registers the process tracer."""

from typing import Optional

from tracing_bootstrap.logging import LogConfig, configure_logging
from tracing_bootstrap.sources import ConfigSource, EnvironSource
from tracing_bootstrap.tracing.builder import build_config
from tracing_bootstrap.tracing.registry import TracerRegistry, get_global_registry
from tracing_bootstrap.tracing.tracer import TracerHandle


class TracingInitializer:
    """Lifecycle listener for the host application.

    ``context_initialized`` reads the configuration and registers a tracer
    every time it is called. ``context_destroyed`` does nothing: the
    registered tracer stays in place for the rest of the process.

    With ``setup_logging`` the initializer also configures structlog from the
    ``LOG_*`` keys of the same source, and stamps records with the resolved
    service name once the tracer is registered.
    """

    def __init__(
        self,
        source: Optional[ConfigSource] = None,
        registry: Optional[TracerRegistry] = None,
        setup_logging: bool = False,
    ):
        self.source = source if source is not None else EnvironSource()
        self.registry = registry if registry is not None else get_global_registry()
        self.setup_logging = setup_logging

    def context_initialized(self) -> TracerHandle:
        log_config = LogConfig.from_source(self.source) if self.setup_logging else None
        if log_config is not None:
            configure_logging(log_config)

        handle = self.registry.register(build_config(self.source))

        if log_config is not None:
            configure_logging(log_config, service_name=handle.config.service_name)
        return handle

    def context_destroyed(self) -> None:
        pass
