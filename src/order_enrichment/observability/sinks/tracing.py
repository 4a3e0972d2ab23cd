"""
order_enrichment.observability.sinks.tracing

Distributed tracing sink (OpenTelemetry).

Responsibilities:
- Map span handles onto real OpenTelemetry spans, parented through the OTel context.
- Record span status, span events and exceptions on those spans.
- Mirror events and metrics onto OTel instruments from an injected Meter.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from opentelemetry import context as otel_context
from opentelemetry import metrics, trace
from opentelemetry.trace import SpanKind, Status, StatusCode

from order_enrichment.observability.signals import Attributes, SpanHandle, SpanStatus, stringify
from order_enrichment.observability.sinks.base import TelemetrySink


@dataclass(slots=True)
class _OtelSpanRef:
    span: trace.Span
    token: object


class TracingSink(TelemetrySink):
    """
    Tracer and meter are injected; with no exporter configured they are the
    OpenTelemetry no-op implementations and every call is cheap.
    """

    name = "tracing"

    def __init__(self, *, tracer: trace.Tracer, meter: metrics.Meter) -> None:
        self._tracer = tracer
        self._meter = meter
        self._lock = threading.Lock()
        self._histograms: dict[str, metrics.Histogram] = {}
        self._events = meter.create_counter(
            "telemetry.events", unit="1", description="Telemetry events recorded"
        )
        self._exceptions = meter.create_counter(
            "telemetry.exceptions", unit="1", description="Exceptions recorded"
        )

    def record_event(
        self,
        name: str,
        attributes: Attributes | None = None,
        measurements: Mapping[str, float] | None = None,
    ) -> None:
        self._events.add(1, {"event": name})

    def record_metric(self, name: str, value: float, attributes: Attributes | None = None) -> None:
        self._histogram(name).record(float(value), stringify(attributes))

    def record_exception(
        self,
        error: BaseException,
        attributes: Attributes | None = None,
        span: SpanHandle | None = None,
    ) -> None:
        target = span.native.span if span is not None and span.native is not None else trace.get_current_span()
        if target.is_recording():
            target.record_exception(error, attributes=stringify(attributes))
        self._exceptions.add(1, {"exception.type": type(error).__name__})

    def _histogram(self, name: str) -> metrics.Histogram:
        with self._lock:
            histogram = self._histograms.get(name)
            if histogram is None:
                histogram = self._meter.create_histogram(
                    name,
                    unit="ms" if name.endswith("duration") else "1",
                    description=f"Recorded values of {name}",
                )
                self._histograms[name] = histogram
            return histogram

    def _open_span(self, span: SpanHandle) -> _OtelSpanRef:
        # Outbound calls are tagged with peer.service; everything else is internal work.
        kind = SpanKind.CLIENT if "peer.service" in span.attributes else SpanKind.INTERNAL
        otel_span = self._tracer.start_span(span.name, kind=kind, attributes=span.attributes)
        token = otel_context.attach(trace.set_span_in_context(otel_span))
        return _OtelSpanRef(span=otel_span, token=token)

    def _span_event(self, span: SpanHandle, name: str, attributes: dict[str, Any]) -> None:
        span.native.span.add_event(name, attributes=stringify(attributes))

    def _span_status(self, span: SpanHandle, status: SpanStatus, description: str | None) -> None:
        if status is SpanStatus.ok:
            span.native.span.set_status(Status(StatusCode.OK))
        else:
            span.native.span.set_status(Status(StatusCode.ERROR, description))

    def _close_span(self, span: SpanHandle) -> None:
        ref: _OtelSpanRef = span.native
        try:
            ref.span.end()
        finally:
            otel_context.detach(ref.token)


# --- Module Notes -----------------------------------------------------------
# Spans are opened and closed inside one request task, so the context attach/detach pair
# always runs against the same contextvars copy.
