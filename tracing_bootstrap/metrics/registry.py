"""Prometheus counters for the bootstrap."""

from prometheus_client import Counter, REGISTRY

# Use default registry
Registry = REGISTRY

property_errors_total = Counter(
    "tracing_bootstrap_property_errors_total",
    "Configuration properties discarded because they could not be parsed",
    ["property", "kind"],
    registry=Registry,
)

registrations_total = Counter(
    "tracing_bootstrap_registrations_total",
    "Tracers published to the tracer registry",
    registry=Registry,
)

reregistrations_total = Counter(
    "tracing_bootstrap_reregistrations_total",
    "Registrations that replaced an already registered tracer",
    registry=Registry,
)
