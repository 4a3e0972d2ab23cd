"""
order_enrichment.observability.sinks.metrics

Dimensional metrics sink (prometheus_client).

Responsibilities:
- Count events, span events, spans (by status) and exceptions.
- Keep one histogram per recorded metric name, labelled by the metric attributes.
- Own a private CollectorRegistry so several apps/tests never share series.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Mapping
from time import perf_counter
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

from order_enrichment.observability.signals import Attributes, SpanHandle, SpanStatus, stringify
from order_enrichment.observability.sinks.base import TelemetrySink

# Milliseconds: 5ms up to 10s.
DURATION_MS_BUCKETS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000)

_INVALID = re.compile(r"[^a-zA-Z0-9_]")


def metric_name(raw: str) -> str:
    name = _INVALID.sub("_", raw).strip("_").lower()
    if not name or name[0].isdigit():
        name = f"m_{name}"
    return name


class MetricsSink(TelemetrySink):
    """
    Ids never become labels: events are counted by name only, and callers pass
    low-cardinality attributes (operation, outcome, error kind) to `record_metric`.
    """

    name = "metrics"

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._lock = threading.Lock()
        self._histograms: dict[str, tuple[Histogram, tuple[str, ...]]] = {}

        self._events = Counter(
            "telemetry_events",
            "Telemetry events recorded, by event name",
            ["event"],
            registry=self.registry,
        )
        self._span_events = Counter(
            "telemetry_span_events",
            "Span events recorded, by span and event name",
            ["span", "event"],
            registry=self.registry,
        )
        self._spans = Counter(
            "telemetry_spans",
            "Spans ended, by span name and final status",
            ["span", "status"],
            registry=self.registry,
        )
        self._span_duration = Histogram(
            "telemetry_span_duration_seconds",
            "Span wall-clock duration",
            ["span"],
            registry=self.registry,
        )
        self._exceptions = Counter(
            "telemetry_exceptions",
            "Exceptions recorded, by exception type",
            ["exception_type"],
            registry=self.registry,
        )

    def record_event(
        self,
        name: str,
        attributes: Attributes | None = None,
        measurements: Mapping[str, float] | None = None,
    ) -> None:
        self._events.labels(event=name).inc()

    def record_metric(self, name: str, value: float, attributes: Attributes | None = None) -> None:
        labels = {metric_name(k): v for k, v in stringify(attributes).items()}
        histogram, label_names = self._histogram(name, tuple(sorted(labels)))
        if label_names:
            histogram.labels(**labels).observe(float(value))
        else:
            histogram.observe(float(value))

    def record_exception(
        self,
        error: BaseException,
        attributes: Attributes | None = None,
        span: SpanHandle | None = None,
    ) -> None:
        self._exceptions.labels(exception_type=type(error).__name__).inc()

    def exposition(self) -> bytes:
        return generate_latest(self.registry)

    def _histogram(self, raw_name: str, label_names: tuple[str, ...]) -> tuple[Histogram, tuple[str, ...]]:
        name = metric_name(raw_name)
        with self._lock:
            existing = self._histograms.get(name)
            if existing is None:
                histogram = Histogram(
                    name,
                    f"Recorded values of {raw_name}",
                    list(label_names),
                    registry=self.registry,
                    buckets=DURATION_MS_BUCKETS,
                )
                existing = (histogram, label_names)
                self._histograms[name] = existing
        if existing[1] != label_names:
            raise ValueError(
                f"metric {raw_name!r} recorded with labels {label_names}, registered with {existing[1]}"
            )
        return existing

    def _open_span(self, span: SpanHandle) -> float:
        return perf_counter()

    def _span_event(self, span: SpanHandle, name: str, attributes: dict[str, Any]) -> None:
        self._span_events.labels(span=span.name, event=name).inc()

    def _span_status(self, span: SpanHandle, status: SpanStatus, description: str | None) -> None:
        # Status is counted once, at span end.
        return None

    def _close_span(self, span: SpanHandle) -> None:
        self._spans.labels(span=span.name, status=span.status.value).inc()
        self._span_duration.labels(span=span.name).observe(perf_counter() - span.native)


# --- Module Notes -----------------------------------------------------------
# prometheus_client primitives are thread-safe; the lock only guards lazy histogram creation.
