"""Codec resolution per carrier format."""

from typing import Dict

from opentelemetry.propagators.jaeger import JaegerPropagator
from opentelemetry.propagators.textmap import TextMapPropagator

from tracing_bootstrap.tracing.config import CodecConfig, Format


def default_codec() -> TextMapPropagator:
    """The library's own wire format, the ``uber-trace-id`` header."""
    return JaegerPropagator()


def resolve_codecs(config: CodecConfig) -> Dict[Format, TextMapPropagator]:
    """Return the codec for every format, overrides first then the default."""
    codecs: Dict[Format, TextMapPropagator] = {}
    for fmt in Format:
        codec = config.codec_for(fmt)
        codecs[fmt] = codec if codec is not None else default_codec()
    return codecs
