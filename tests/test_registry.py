"""Tests for the tracer registry."""

import threading
from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY
from structlog.testing import capture_logs

from tracing_bootstrap.tracing.config import (
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


class TestTracerRegistry:
    def test_empty_registry(self, registry):
        assert registry.is_registered() is False
        with pytest.raises(TracerNotRegisteredError):
            registry.get()

    def test_register_publishes_handle(self, registry):
        handle = registry.register(TracerConfig(service_name="orders"))
        assert registry.get() is handle
        assert handle.config.service_name == "orders"

    def test_registration_is_logged_without_credentials(self, registry):
        config = TracerConfig(
            service_name="orders",
            reporter=ReporterConfig(sender=SenderConfig(auth_username="u", auth_password="secret")),
        )
        with capture_logs() as logs:
            registry.register(config)
        registered = [e for e in logs if e["event"] == "tracer_registered"]
        assert registered[0]["auth"] == "basic"
        assert "secret" not in repr(registered)

    def test_reregistration_replaces_and_warns(self, registry):
        before = REGISTRY.get_sample_value("tracing_bootstrap_reregistrations_total") or 0.0
        first = registry.register(TracerConfig(service_name="first"))

        with capture_logs() as logs:
            second = registry.register(TracerConfig(service_name="second"))

        assert registry.get() is second
        warnings = [e for e in logs if e["log_level"] == "warning"]
        assert warnings[0]["event"] == "tracer_reregistered"
        assert warnings[0]["previous_service_name"] == "first"
        assert REGISTRY.get_sample_value("tracing_bootstrap_reregistrations_total") == before + 1
        first.provider.shutdown()

    def test_readers_see_published_handle_from_other_threads(self, registry):
        handle = registry.register(TracerConfig(service_name="orders"))
        seen = []
        thread = threading.Thread(target=lambda: seen.append(registry.get()))
        thread.start()
        thread.join()
        assert seen == [handle]


class TestGlobals:
    def test_installs_opentelemetry_globals_once(self):
        registry = TracerRegistry(install_globals=True)
        with patch("opentelemetry.trace.set_tracer_provider") as set_provider, \
                patch("opentelemetry.propagate.set_global_textmap") as set_textmap:
            first = registry.register(TracerConfig(service_name="first"))
            second = registry.register(TracerConfig(service_name="second"))

        set_provider.assert_called_once_with(registry.global_provider)
        assert set_textmap.call_count == 2
        first.provider.shutdown()
        second.provider.shutdown()

    def test_global_provider_follows_reregistration(self):
        registry = TracerRegistry(install_globals=True)
        sample_all = SamplerConfig(type="const", param=1)
        with patch("opentelemetry.trace.set_tracer_provider") as set_provider, \
                patch("opentelemetry.propagate.set_global_textmap"):
            first = registry.register(TracerConfig(service_name="first", sampler=sample_all))
            second = registry.register(TracerConfig(service_name="second", sampler=sample_all))

        installed = set_provider.call_args.args[0]
        span = installed.get_tracer("checkout").start_span("charge")
        span.end()
        assert span.resource.attributes["service.name"] == "second"
        first.provider.shutdown()
        second.provider.shutdown()

    def test_global_provider_requires_registration(self):
        registry = TracerRegistry(install_globals=False)
        with pytest.raises(TracerNotRegisteredError):
            registry.global_provider.get_tracer("checkout")

    def test_disabled_globals_are_untouched(self, registry):
        with patch("opentelemetry.trace.set_tracer_provider") as set_provider:
            registry.register(TracerConfig(service_name="orders"))
        set_provider.assert_not_called()


class TestDefaultRegistry:
    def test_module_register_and_get_tracer(self, registry):
        with patch("tracing_bootstrap.tracing.registry._global_registry", registry):
            handle = register(
                TracerConfig(service_name="orders", sampler=SamplerConfig(type="const", param=1))
            )
            tracer = get_tracer()
            assert get_global_registry() is registry

        assert registry.get() is handle
        span = tracer.start_span("charge")
        span.end()
        assert span.instrumentation_scope.name == "orders"

    def test_module_get_tracer_before_register(self, registry):
        with patch("tracing_bootstrap.tracing.registry._global_registry", registry):
            with pytest.raises(TracerNotRegisteredError):
                get_tracer("checkout")
