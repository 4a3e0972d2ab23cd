"""
order_enrichment.observability.sinks.recording

In-memory sink that keeps every call as a `TelemetrySignal`.

Responsibilities:
- Provide an inspectable, thread-safe record of the signal sequence for diagnostics and tests.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from order_enrichment.observability.signals import (
    Attributes,
    SignalKind,
    SpanHandle,
    SpanStatus,
    TelemetrySignal,
    stringify,
)
from order_enrichment.observability.sinks.base import TelemetrySink


class RecordingSink(TelemetrySink):
    name = "recording"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._signals: list[TelemetrySignal] = []

    @property
    def signals(self) -> list[TelemetrySignal]:
        with self._lock:
            return list(self._signals)

    def clear(self) -> None:
        with self._lock:
            self._signals.clear()

    def of_kind(self, kind: SignalKind, name: str | None = None) -> list[TelemetrySignal]:
        return [s for s in self.signals if s.kind is kind and (name is None or s.name == name)]

    def events(self, name: str | None = None) -> list[TelemetrySignal]:
        return self.of_kind(SignalKind.event, name)

    def metrics(self, name: str | None = None) -> list[TelemetrySignal]:
        return self.of_kind(SignalKind.metric, name)

    def exceptions(self) -> list[TelemetrySignal]:
        return self.of_kind(SignalKind.exception)

    def spans(self, name: str | None = None) -> list[TelemetrySignal]:
        """Span end signals, one per ended span."""
        return self.of_kind(SignalKind.span_end, name)

    def _append(self, signal: TelemetrySignal) -> None:
        with self._lock:
            self._signals.append(signal)

    def record_event(
        self,
        name: str,
        attributes: Attributes | None = None,
        measurements: Mapping[str, float] | None = None,
    ) -> None:
        self._append(
            TelemetrySignal(
                name=name,
                kind=SignalKind.event,
                attributes=stringify(attributes),
                measurements={k: float(v) for k, v in (measurements or {}).items()},
            )
        )

    def record_metric(self, name: str, value: float, attributes: Attributes | None = None) -> None:
        self._append(
            TelemetrySignal(
                name=name,
                kind=SignalKind.metric,
                attributes=stringify(attributes),
                measurements={"value": float(value)},
            )
        )

    def record_exception(
        self,
        error: BaseException,
        attributes: Attributes | None = None,
        span: SpanHandle | None = None,
    ) -> None:
        attrs = stringify(attributes)
        attrs["exception.type"] = type(error).__name__
        attrs["exception.message"] = str(error)
        if span is not None:
            attrs["span.id"] = span.span_id
        self._append(TelemetrySignal(name=type(error).__name__, kind=SignalKind.exception, attributes=attrs))

    def _open_span(self, span: SpanHandle) -> None:
        self._append(
            TelemetrySignal(
                name=span.name,
                kind=SignalKind.span_start,
                attributes={**span.attributes, "span.id": span.span_id},
            )
        )

    def _span_event(self, span: SpanHandle, name: str, attributes: dict[str, Any]) -> None:
        self._append(
            TelemetrySignal(
                name=name,
                kind=SignalKind.span_event,
                attributes={**stringify(attributes), "span.name": span.name, "span.id": span.span_id},
            )
        )

    def _span_status(self, span: SpanHandle, status: SpanStatus, description: str | None) -> None:
        return None

    def _close_span(self, span: SpanHandle) -> None:
        self._append(
            TelemetrySignal(
                name=span.name,
                kind=SignalKind.span_end,
                attributes={"span.id": span.span_id, "status": span.status.value},
                measurements={"duration_ms": span.duration_ms or 0.0},
            )
        )
