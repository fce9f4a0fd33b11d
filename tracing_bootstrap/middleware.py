"""Host framework adapters for TracingInitializer."""

from typing import Any, Mapping, Optional

from tracing_bootstrap.lifecycle import TracingInitializer
from tracing_bootstrap.sources import ChainSource, ConfigSource, EnvironSource, MappingSource
from tracing_bootstrap.tracing.registry import TracerRegistry

EXTENSION_KEY = "tracing_bootstrap"


class TracingLifespanMiddleware:
    """ASGI middleware that registers the tracer on ``lifespan.startup``.

    The handle is also stored in the lifespan state under
    ``tracing_bootstrap`` when the server provides one.
    """

    def __init__(
        self,
        app,
        source: Optional[ConfigSource] = None,
        registry: Optional[TracerRegistry] = None,
        setup_logging: bool = False,
    ):
        self.app = app
        self.initializer = TracingInitializer(source, registry, setup_logging)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "lifespan":
            await self.app(scope, receive, send)
            return

        async def receive_wrapper():
            message = await receive()
            if message["type"] == "lifespan.startup":
                handle = self.initializer.context_initialized()
                state = scope.get("state")
                if state is not None:
                    state[EXTENSION_KEY] = handle
            elif message["type"] == "lifespan.shutdown":
                self.initializer.context_destroyed()
            return message

        await self.app(scope, receive_wrapper, send)


def init_app(
    app,
    source: Optional[ConfigSource] = None,
    registry: Optional[TracerRegistry] = None,
    setup_logging: bool = False,
):
    """Register the tracer for a Flask application.

    Settings come from ``app.config`` first, then the process environment.

    Usage:
        from flask import Flask
        app = Flask(__name__)
        app.config["JAEGER_SERVICE_NAME"] = "orders"
        init_app(app)
    """
    if source is None:
        config: Mapping[str, Any] = app.config
        source = ChainSource(MappingSource(config), EnvironSource())

    handle = TracingInitializer(source, registry, setup_logging).context_initialized()
    app.extensions[EXTENSION_KEY] = handle
    return handle
