"""Shared fixtures for tracing bootstrap tests."""

from unittest.mock import patch

import pytest
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from tracing_bootstrap.tracing.registry import TracerRegistry


@pytest.fixture(autouse=True)
def memory_exporter():
    """Keep span export in memory so no test reaches for a collector."""
    exporter = InMemorySpanExporter()
    with patch("tracing_bootstrap.tracing.tracer.build_exporter", return_value=exporter):
        yield exporter


@pytest.fixture
def registry():
    """A registry that leaves the OpenTelemetry API globals alone."""
    registry = TracerRegistry(install_globals=False)
    yield registry
    if registry.is_registered():
        registry.get().provider.shutdown()
