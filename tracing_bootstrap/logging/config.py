"""Logging settings, read from the same source as the tracer settings."""

from dataclasses import dataclass

from tracing_bootstrap.sources import ConfigSource
from tracing_bootstrap.tracing import properties as props

LOG_LEVEL = "LOG_LEVEL"
LOG_FORMAT = "LOG_FORMAT"
LOG_CONSOLE_ENABLED = "LOG_CONSOLE_ENABLED"

JSON = "json"
CONSOLE = "console"


@dataclass(frozen=True)
class LogConfig:
    """How the bootstrap renders its diagnostics.

    ``renderer`` is ``json`` for one JSON object per line or ``console`` for
    the human-readable development format.
    """

    level: str = "info"
    renderer: str = JSON
    enable_console: bool = True

    @classmethod
    def from_source(cls, source: ConfigSource) -> "LogConfig":
        renderer = (props.get_property(source, LOG_FORMAT) or JSON).lower()
        enable_console = props.get_property_as_bool(source, LOG_CONSOLE_ENABLED)
        return cls(
            level=(props.get_property(source, LOG_LEVEL) or "info").lower(),
            renderer=renderer if renderer in (JSON, CONSOLE) else JSON,
            enable_console=True if enable_console is None else enable_console,
        )
