"""Span exporter that writes finished spans to the structured log."""

from typing import Sequence

import structlog
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

logger = structlog.get_logger(__name__)


class LoggingSpanExporter(SpanExporter):
    """Logs one record per span, used when span logging is enabled."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        self._closed = False

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if self._closed:
            return SpanExportResult.FAILURE

        for span in spans:
            ctx = span.get_span_context()
            parent = span.parent
            duration_ms = None
            if span.end_time is not None and span.start_time is not None:
                duration_ms = (span.end_time - span.start_time) / 1e6
            logger.info(
                "span_reported",
                service=self.service_name,
                span_name=span.name,
                trace_id=format(ctx.trace_id, "032x"),
                span_id=format(ctx.span_id, "016x"),
                parent_span_id=format(parent.span_id, "016x") if parent else None,
                kind=span.kind.name,
                status=span.status.status_code.name,
                duration_ms=duration_ms,
                attributes=dict(span.attributes or {}),
            )
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        self._closed = True

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True
