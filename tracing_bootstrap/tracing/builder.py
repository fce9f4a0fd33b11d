"""Build a TracerConfig from a configuration source."""

import structlog
from opentelemetry.propagators.b3 import B3MultiFormat

from tracing_bootstrap.sources import ConfigSource
from tracing_bootstrap.tracing import properties as props
from tracing_bootstrap.tracing.config import (
    DEFAULT_SERVICE_NAME,
    CodecConfig,
    Format,
    ReporterConfig,
    SamplerConfig,
    SenderConfig,
    TracerConfig,
)

logger = structlog.get_logger(__name__)


def build_config(source: ConfigSource) -> TracerConfig:
    """Read every tracer property from ``source``.

    Never raises for bad input: a missing service name is replaced by
    ``DEFAULT_SERVICE_NAME`` and malformed values are logged and left unset.

    Args:
        source: Where the raw property strings come from.

    Returns:
        The assembled configuration.
    """
    service_name = props.get_property(source, props.JAEGER_SERVICE_NAME)
    if service_name is None:
        service_name = props.get_property(source, props.SERVICE_NAME_ALIAS)
    if service_name is None:
        logger.warning("No Service Name set. Using default. Please change it.",
                       default=DEFAULT_SERVICE_NAME)
        service_name = DEFAULT_SERVICE_NAME

    sampler = SamplerConfig(
        type=props.get_property(source, props.JAEGER_SAMPLER_TYPE),
        param=props.get_property_as_number(source, props.JAEGER_SAMPLER_PARAM),
        manager_host_port=props.get_property(source, props.JAEGER_SAMPLER_MANAGER_HOST_PORT),
    )

    sender = SenderConfig(
        auth_username=props.get_property(source, props.JAEGER_USER),
        auth_password=props.get_property(source, props.JAEGER_PASSWORD),
        auth_token=props.get_property(source, props.JAEGER_AUTH_TOKEN),
        agent_host=props.get_property(source, props.JAEGER_AGENT_HOST),
        agent_port=props.get_parsed_property(source, props.JAEGER_AGENT_PORT, props.parse_port),
    )

    remote_endpoint = props.get_property(source, props.JAEGER_ENDPOINT)
    if remote_endpoint is not None and remote_endpoint.strip():
        sender = sender.with_endpoint(remote_endpoint)

    reporter = ReporterConfig(
        log_spans=props.get_property_as_bool(source, props.JAEGER_REPORTER_LOG_SPANS),
        flush_interval=props.get_parsed_property(
            source, props.JAEGER_REPORTER_FLUSH_INTERVAL, props.parse_positive_int
        ),
        max_queue_size=props.get_parsed_property(
            source, props.JAEGER_REPORTER_MAX_QUEUE_SIZE, props.parse_positive_int
        ),
        sender=sender,
    )

    codec = CodecConfig()
    if props.get_property_as_bool(source, props.ENABLE_B3_HEADER_PROPAGATION):
        logger.info("Enabling B3 Header Propagation for Jaeger")
        codec = codec.with_codec(Format.HTTP_HEADERS, B3MultiFormat())
        codec = codec.with_codec(Format.TEXT_MAP, B3MultiFormat())

    return TracerConfig(
        service_name=service_name,
        sampler=sampler,
        reporter=reporter,
        codec=codec,
        tags=props.get_property_as_tags(source, props.JAEGER_TAGS),
    )
