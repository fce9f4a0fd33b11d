"""Configuration sources read by the tracing bootstrap.

A source is any object with a ``get(name)`` method returning the raw string
value for a key, or ``None`` when the key is absent. Sources are read-only.
"""

import os
from typing import Any, Mapping, Optional, Protocol


class ConfigSource(Protocol):
    """Read-only key/value lookup."""

    def get(self, name: str) -> Optional[str]:
        ...


class MappingSource:
    """Source backed by a mapping such as a framework's config object.

    Non-string values are converted with ``str()`` so that settings declared
    as ints or bools in Python config files read the same as their string
    forms. A ``None`` value counts as absent.
    """

    def __init__(self, mapping: Mapping[str, Any]):
        self._mapping = mapping

    def get(self, name: str) -> Optional[str]:
        value = self._mapping.get(name)
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def __repr__(self) -> str:
        return f"MappingSource(keys={sorted(self._mapping)!r})"


class EnvironSource:
    """Source backed by the process environment."""

    def __init__(self, prefix: str = "", environ: Optional[Mapping[str, str]] = None):
        self.prefix = prefix
        self._environ = environ

    def get(self, name: str) -> Optional[str]:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(self.prefix + name)

    def __repr__(self) -> str:
        return f"EnvironSource(prefix={self.prefix!r})"


class ChainSource:
    """Source that asks each wrapped source in order; the first hit wins."""

    def __init__(self, *sources: ConfigSource):
        self.sources = sources

    def get(self, name: str) -> Optional[str]:
        for source in self.sources:
            value = source.get(name)
            if value is not None:
                return value
        return None

    def __repr__(self) -> str:
        return f"ChainSource({', '.join(repr(s) for s in self.sources)})"
