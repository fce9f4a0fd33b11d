"""Metrics module initialization."""

from tracing_bootstrap.metrics.registry import (
    Registry,
    property_errors_total,
    registrations_total,
    reregistrations_total,
)

__all__ = [
    "Registry",
    "property_errors_total",
    "registrations_total",
    "reregistrations_total",
]
