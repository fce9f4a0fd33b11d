"""Tracer configuration records.

``None`` in any optional field means the value was not configured and the
tracing library's own default applies when the tracer is built.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from opentelemetry.propagators.textmap import TextMapPropagator

DEFAULT_SERVICE_NAME = "thorntail/unknown"


class Format(enum.Enum):
    """Carrier formats that a codec can be registered for."""

    HTTP_HEADERS = "http_headers"
    TEXT_MAP = "text_map"


@dataclass(frozen=True)
class SamplerConfig:
    type: Optional[str] = None
    param: Optional[float] = None
    manager_host_port: Optional[str] = None


@dataclass(frozen=True)
class SenderConfig:
    auth_username: Optional[str] = None
    auth_password: Optional[str] = None
    auth_token: Optional[str] = None
    agent_host: Optional[str] = None
    agent_port: Optional[int] = None
    endpoint: Optional[str] = None

    @property
    def uses_endpoint(self) -> bool:
        """True when spans go to a collector URL instead of a local agent."""
        return self.endpoint is not None

    def with_endpoint(self, endpoint: str) -> "SenderConfig":
        """Return a copy that sends to ``endpoint``, dropping the agent address."""
        return replace(self, endpoint=endpoint, agent_host=None, agent_port=None)


@dataclass(frozen=True)
class ReporterConfig:
    log_spans: Optional[bool] = None
    flush_interval: Optional[int] = None
    max_queue_size: Optional[int] = None
    sender: SenderConfig = field(default_factory=SenderConfig)


@dataclass(frozen=True)
class CodecConfig:
    """Codec overrides per carrier format; formats not listed keep the default."""

    codecs: Mapping[Format, TextMapPropagator] = field(default_factory=dict)

    def with_codec(self, fmt: Format, codec: TextMapPropagator) -> "CodecConfig":
        codecs = dict(self.codecs)
        codecs[fmt] = codec
        return CodecConfig(codecs=codecs)

    def codec_for(self, fmt: Format) -> Optional[TextMapPropagator]:
        return self.codecs.get(fmt)


@dataclass(frozen=True)
class TracerConfig:
    service_name: str = DEFAULT_SERVICE_NAME
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    reporter: ReporterConfig = field(default_factory=ReporterConfig)
    codec: CodecConfig = field(default_factory=CodecConfig)
    tags: Mapping[str, str] = field(default_factory=dict)

    def describe(self) -> Dict[str, Any]:
        """Summary safe for logging; credentials are reported by kind only."""
        sender = self.reporter.sender
        if sender.auth_token:
            auth = "bearer"
        elif sender.auth_username and sender.auth_password:
            auth = "basic"
        else:
            auth = None
        return {
            "service_name": self.service_name,
            "sampler_type": self.sampler.type,
            "sampler_param": self.sampler.param,
            "log_spans": self.reporter.log_spans,
            "flush_interval": self.reporter.flush_interval,
            "max_queue_size": self.reporter.max_queue_size,
            "sender": "endpoint" if sender.uses_endpoint else "agent",
            "auth": auth,
            "codec_overrides": sorted(fmt.value for fmt in self.codec.codecs),
            "tags": dict(self.tags),
        }
