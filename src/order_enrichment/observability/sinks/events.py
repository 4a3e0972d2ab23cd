"""
order_enrichment.observability.sinks.events

Structured event sink (structlog).

Responsibilities:
- Turn every telemetry call into one structured log record tagged with `signal=<kind>`.
"""

from __future__ import annotations

from collections.abc import Mapping
from time import perf_counter
from typing import Any

from order_enrichment.observability.logging import get_logger
from order_enrichment.observability.signals import (
    Attributes,
    SignalKind,
    SpanHandle,
    SpanStatus,
    stringify,
)
from order_enrichment.observability.sinks.base import TelemetrySink


class EventSink(TelemetrySink):
    name = "events"

    def __init__(self, logger: Any | None = None) -> None:
        self._log = logger if logger is not None else get_logger("telemetry.events")

    def record_event(
        self,
        name: str,
        attributes: Attributes | None = None,
        measurements: Mapping[str, float] | None = None,
    ) -> None:
        self._log.info(
            name,
            signal=SignalKind.event.value,
            attributes=stringify(attributes),
            measurements=dict(measurements or {}),
        )

    def record_metric(self, name: str, value: float, attributes: Attributes | None = None) -> None:
        self._log.info(
            "metric",
            signal=SignalKind.metric.value,
            metric=name,
            value=float(value),
            attributes=stringify(attributes),
        )

    def record_exception(
        self,
        error: BaseException,
        attributes: Attributes | None = None,
        span: SpanHandle | None = None,
    ) -> None:
        self._log.error(
            "exception",
            signal=SignalKind.exception.value,
            exception_type=type(error).__name__,
            message=str(error),
            span_id=span.span_id if span is not None else None,
            attributes=stringify(attributes),
            exc_info=error,
        )

    def _open_span(self, span: SpanHandle) -> float:
        self._log.info(
            "span_start",
            signal=SignalKind.span_start.value,
            span=span.name,
            span_id=span.span_id,
            attributes=span.attributes,
        )
        return perf_counter()

    def _span_event(self, span: SpanHandle, name: str, attributes: dict[str, Any]) -> None:
        self._log.info(
            "span_event",
            signal=SignalKind.span_event.value,
            span=span.name,
            span_id=span.span_id,
            name=name,
            attributes=stringify(attributes),
        )

    def _span_status(self, span: SpanHandle, status: SpanStatus, description: str | None) -> None:
        self._log.debug(
            "span_status",
            span=span.name,
            span_id=span.span_id,
            status=status.value,
            description=description,
        )

    def _close_span(self, span: SpanHandle) -> None:
        self._log.info(
            "span_end",
            signal=SignalKind.span_end.value,
            span=span.name,
            span_id=span.span_id,
            status=span.status.value,
            duration_ms=round((perf_counter() - span.native) * 1000.0, 3),
        )


# --- Module Notes -----------------------------------------------------------
# Attributes are nested (not splatted) so keys such as "event" cannot collide with structlog's.
