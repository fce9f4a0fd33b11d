"""Tracer provider factory.

Turns a TracerConfig into OpenTelemetry SDK objects. This is the only place
where unset settings are replaced by library defaults.
"""

import base64
from dataclasses import dataclass
from typing import Dict, List, Mapping, MutableMapping, Optional

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter as GrpcSpanExporter,
)
from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
    OTLPSpanExporter as HttpSpanExporter,
)
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
)

from tracing_bootstrap.tracing.config import Format, ReporterConfig, SenderConfig, TracerConfig
from tracing_bootstrap.tracing.exporter import LoggingSpanExporter
from tracing_bootstrap.tracing.propagation import resolve_codecs
from tracing_bootstrap.tracing.samplers import build_sampler

DEFAULT_AGENT_HOST = "localhost"
DEFAULT_AGENT_PORT = 4317
DEFAULT_EXPORT_BATCH_SIZE = 512


def build_resource(config: TracerConfig) -> Resource:
    attributes = dict(config.tags)
    attributes[SERVICE_NAME] = config.service_name
    return Resource.create(attributes)


def auth_headers(sender: SenderConfig) -> Optional[Dict[str, str]]:
    """Bearer token wins over basic credentials; neither gives no headers."""
    if sender.auth_token:
        return {"Authorization": f"Bearer {sender.auth_token}"}
    if sender.auth_username and sender.auth_password:
        credentials = f"{sender.auth_username}:{sender.auth_password}".encode()
        return {"Authorization": "Basic " + base64.b64encode(credentials).decode()}
    return None


def build_exporter(sender: SenderConfig) -> SpanExporter:
    """Create the exporter for the configured sender.

    An endpoint selects the OTLP/HTTP exporter aimed at that URL. Otherwise
    spans go over OTLP/gRPC to the agent address; when neither host nor port
    is set the exporter keeps its own default address.
    """
    headers = auth_headers(sender)
    if sender.uses_endpoint:
        return HttpSpanExporter(endpoint=sender.endpoint, headers=headers)

    if sender.agent_host is None and sender.agent_port is None:
        return GrpcSpanExporter(headers=headers)

    host = sender.agent_host or DEFAULT_AGENT_HOST
    port = sender.agent_port or DEFAULT_AGENT_PORT
    return GrpcSpanExporter(endpoint=f"{host}:{port}", insecure=True, headers=headers)


def batch_options(reporter: ReporterConfig) -> Dict[str, int]:
    """BatchSpanProcessor keyword arguments for the settings that are set."""
    options: Dict[str, int] = {}
    if reporter.flush_interval is not None:
        options["schedule_delay_millis"] = reporter.flush_interval
    if reporter.max_queue_size is not None:
        options["max_queue_size"] = reporter.max_queue_size
        # The SDK rejects a batch larger than the queue.
        options["max_export_batch_size"] = min(DEFAULT_EXPORT_BATCH_SIZE, reporter.max_queue_size)
    return options


def build_span_processors(config: TracerConfig) -> List[SpanProcessor]:
    reporter = config.reporter
    processors: List[SpanProcessor] = [
        BatchSpanProcessor(build_exporter(reporter.sender), **batch_options(reporter))
    ]
    if reporter.log_spans:
        processors.append(SimpleSpanProcessor(LoggingSpanExporter(config.service_name)))
    return processors


def create_tracer_provider(config: TracerConfig) -> TracerProvider:
    provider = TracerProvider(
        resource=build_resource(config),
        sampler=build_sampler(config.sampler),
    )
    for processor in build_span_processors(config):
        provider.add_span_processor(processor)
    return provider


@dataclass(frozen=True)
class TracerHandle:
    """A built tracer with the codecs to carry its context across processes."""

    config: TracerConfig
    provider: TracerProvider
    codecs: Mapping[Format, TextMapPropagator]

    def get_tracer(self, name: Optional[str] = None) -> trace.Tracer:
        return self.provider.get_tracer(name or self.config.service_name)

    def codec(self, fmt: Format) -> TextMapPropagator:
        return self.codecs[fmt]

    def inject(self, fmt: Format, carrier: MutableMapping[str, str],
               context: Optional[Context] = None) -> MutableMapping[str, str]:
        """Write the current (or given) trace context into ``carrier``."""
        self.codecs[fmt].inject(carrier, context=context)
        return carrier

    def extract(self, fmt: Format, carrier: Mapping[str, str]) -> Context:
        """Read a trace context from ``carrier``."""
        return self.codecs[fmt].extract(carrier)


def create_handle(config: TracerConfig) -> TracerHandle:
    return TracerHandle(
        config=config,
        provider=create_tracer_provider(config),
        codecs=resolve_codecs(config.codec),
    )
