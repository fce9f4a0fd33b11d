"""Property names and per-field readers.

Every ``get_property_as_*`` reader returns ``None`` when the property is
absent, empty or malformed. Malformed values are logged and counted; they
never abort startup.
"""

import locale
import math
import os
import re
from typing import Callable, Dict, Optional, TypeVar

import structlog

from tracing_bootstrap.errors import PropertyParseError
from tracing_bootstrap.metrics import property_errors_total
from tracing_bootstrap.sources import ConfigSource

logger = structlog.get_logger(__name__)

T = TypeVar("T")

JAEGER_SERVICE_NAME = "JAEGER_SERVICE_NAME"
SERVICE_NAME_ALIAS = "service_name"
JAEGER_SAMPLER_TYPE = "JAEGER_SAMPLER_TYPE"
JAEGER_SAMPLER_PARAM = "JAEGER_SAMPLER_PARAM"
JAEGER_SAMPLER_MANAGER_HOST_PORT = "JAEGER_SAMPLER_MANAGER_HOST_PORT"
JAEGER_REPORTER_LOG_SPANS = "JAEGER_REPORTER_LOG_SPANS"
JAEGER_REPORTER_FLUSH_INTERVAL = "JAEGER_REPORTER_FLUSH_INTERVAL"
JAEGER_REPORTER_MAX_QUEUE_SIZE = "JAEGER_REPORTER_MAX_QUEUE_SIZE"
JAEGER_USER = "JAEGER_USER"
JAEGER_PASSWORD = "JAEGER_PASSWORD"
JAEGER_AUTH_TOKEN = "JAEGER_AUTH_TOKEN"
JAEGER_AGENT_HOST = "JAEGER_AGENT_HOST"
JAEGER_AGENT_PORT = "JAEGER_AGENT_PORT"
JAEGER_ENDPOINT = "JAEGER_ENDPOINT"
JAEGER_TAGS = "JAEGER_TAGS"
ENABLE_B3_HEADER_PROPAGATION = "enableB3HeaderPropagation"

_INT_PATTERN = re.compile(r"[+-]?\d+")
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1
_ENV_REFERENCE = re.compile(r"^\$\{\s*([^:}\s]+)\s*(?::([^}]*))?\}$")


def parse_int(name: str, value: str) -> int:
    """Parse a signed 32-bit decimal integer, rejecting whitespace and underscores."""
    if not _INT_PATTERN.fullmatch(value):
        raise PropertyParseError(name, value, "integer")
    number = int(value)
    if number < _INT_MIN or number > _INT_MAX:
        raise PropertyParseError(name, value, "integer", "out of range")
    return number


def parse_bool(name: str, value: str) -> bool:
    """Only ``true`` in any case is true; every other value is false."""
    return value.lower() == "true"


def parse_number(name: str, value: str) -> float:
    """Parse a number using the conventions of the current numeric locale."""
    try:
        number = locale.atof(value.strip())
    except ValueError as e:
        raise PropertyParseError(name, value, "number") from e
    if not math.isfinite(number):
        raise PropertyParseError(name, value, "number", "not finite")
    return number


def parse_positive_int(name: str, value: str) -> int:
    number = parse_int(name, value)
    if number <= 0:
        raise PropertyParseError(name, value, "integer", "must be positive")
    return number


def parse_port(name: str, value: str) -> int:
    number = parse_int(name, value)
    if not 0 < number < 65536:
        raise PropertyParseError(name, value, "integer", "not a valid port")
    return number


def get_property(source: ConfigSource, name: str) -> Optional[str]:
    """Return the raw value, with empty strings treated as absent."""
    value = source.get(name)
    if value is None or value == "":
        return None
    return value


def get_parsed_property(
    source: ConfigSource,
    name: str,
    parser: Callable[[str, str], T],
) -> Optional[T]:
    """Read a property through ``parser``; log and discard it on failure."""
    value = get_property(source, name)
    if value is None:
        return None
    try:
        return parser(name, value)
    except PropertyParseError as e:
        logger.error(
            "property_parse_failed",
            property=e.name,
            value=e.value,
            kind=e.kind,
            error=str(e),
        )
        property_errors_total.labels(property=e.name, kind=e.kind).inc()
        return None


def get_property_as_int(source: ConfigSource, name: str) -> Optional[int]:
    return get_parsed_property(source, name, parse_int)


def get_property_as_bool(source: ConfigSource, name: str) -> Optional[bool]:
    return get_parsed_property(source, name, parse_bool)


def get_property_as_number(source: ConfigSource, name: str) -> Optional[float]:
    return get_parsed_property(source, name, parse_number)


def get_property_as_tags(source: ConfigSource, name: str) -> Dict[str, str]:
    """Parse ``key=value`` pairs separated by commas.

    A value of the form ``${ENV_VAR:default}`` is replaced by the named
    environment variable, or by ``default`` when it is unset.
    """
    raw = get_property(source, name)
    tags: Dict[str, str] = {}
    if raw is None:
        return tags

    for entry in raw.split(","):
        key, sep, value = entry.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or "=" in value:
            logger.error("tracer_tag_malformed", property=name, tag=entry.strip())
            property_errors_total.labels(property=name, kind="tag").inc()
            continue
        tags[key] = _resolve_env_reference(value)
    return tags


def _resolve_env_reference(value: str) -> str:
    match = _ENV_REFERENCE.match(value)
    if not match:
        return value
    env_name, default = match.group(1), match.group(2)
    return os.getenv(env_name, default if default is not None else "")
