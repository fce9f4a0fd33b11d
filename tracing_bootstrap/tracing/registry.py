"""Process-wide tracer slot.

``TracerRegistry`` is written once at startup and read from any thread
afterwards. Reads take no lock: the slot holds a fully built, immutable
handle and rebinding an attribute is atomic.
"""

import threading
from typing import Optional

import structlog
from opentelemetry import propagate, trace

from tracing_bootstrap.metrics import registrations_total, reregistrations_total
from tracing_bootstrap.tracing.config import Format, TracerConfig
from tracing_bootstrap.tracing.tracer import TracerHandle, create_handle

logger = structlog.get_logger(__name__)


class TracerNotRegisteredError(RuntimeError):
    """Raised when the registry is read before a tracer was registered."""


class RegistryTracerProvider(trace.TracerProvider):
    """OpenTelemetry provider that forwards to the registry's current handle.

    The OpenTelemetry API accepts a global provider only once, so this
    forwarder is what gets installed. A later registration is then seen by
    every ``opentelemetry.trace.get_tracer`` call made after it. Tracers
    obtained earlier stay bound to the provider they came from.
    """

    def __init__(self, registry: "TracerRegistry"):
        self._registry = registry

    def get_tracer(self, *args, **kwargs) -> trace.Tracer:
        return self._registry.get().provider.get_tracer(*args, **kwargs)


class TracerRegistry:
    """Holds the active TracerHandle.

    With ``install_globals`` a ``RegistryTracerProvider`` and the HTTP header
    codec are also installed into the OpenTelemetry API globals so that
    instrumentation using ``opentelemetry.trace.get_tracer`` sees them.
    """

    def __init__(self, install_globals: bool = True):
        self.install_globals = install_globals
        self.global_provider = RegistryTracerProvider(self)
        self._handle: Optional[TracerHandle] = None
        self._lock = threading.Lock()

    def register(self, config: TracerConfig) -> TracerHandle:
        """Build a tracer from ``config`` and publish it.

        A second registration replaces the first. This is not prevented;
        it is logged as a warning and counted.
        """
        handle = create_handle(config)
        self.publish(handle)
        return handle

    def publish(self, handle: TracerHandle) -> None:
        with self._lock:
            previous = self._handle
            self._handle = handle

        registrations_total.inc()
        if previous is not None:
            reregistrations_total.inc()
            logger.warning(
                "tracer_reregistered",
                previous_service_name=previous.config.service_name,
                service_name=handle.config.service_name,
            )

        if self.install_globals:
            if previous is None:
                trace.set_tracer_provider(self.global_provider)
            propagate.set_global_textmap(handle.codec(Format.HTTP_HEADERS))

        logger.info("tracer_registered", **handle.config.describe())

    def get(self) -> TracerHandle:
        handle = self._handle
        if handle is None:
            raise TracerNotRegisteredError(
                "No tracer registered. Run the tracing initializer first."
            )
        return handle

    def is_registered(self) -> bool:
        return self._handle is not None


_global_registry = TracerRegistry()


def get_global_registry() -> TracerRegistry:
    return _global_registry


def register(config: TracerConfig) -> TracerHandle:
    """Register ``config`` in the process-wide registry."""
    return _global_registry.register(config)


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    """Get a tracer from the process-wide registry."""
    return _global_registry.get().get_tracer(name)
