"""Error types raised inside the bootstrap layer."""

from typing import Optional


class TracingBootstrapError(Exception):
    """Base class for tracing bootstrap errors."""


class PropertyParseError(TracingBootstrapError, ValueError):
    """A configuration property held a value that could not be parsed."""

    def __init__(self, name: str, value: str, kind: str, reason: Optional[str] = None):
        self.name = name
        self.value = value
        self.kind = kind
        message = f"Failed to parse {kind} for property '{name}' with value '{value}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedSamplerError(TracingBootstrapError):
    """The sampler settings cannot be turned into a sampler."""
