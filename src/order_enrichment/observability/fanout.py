"""
order_enrichment.observability.fanout

Composite that drives every sink through the same telemetry calls.

Responsibilities:
- Deliver each event, metric and exception to all sinks, isolating sink failures.
- Record downstream dependency calls under one shared metric name.
- Provide scoped span acquisition (`TelemetryFanout.span`) that ends every sink's span
  exactly once on every exit path.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from order_enrichment.observability.logging import get_logger
from order_enrichment.observability.signals import (
    Attributes,
    SpanHandle,
    SpanState,
    SpanStatus,
    stringify,
)
from order_enrichment.observability.sinks.base import TelemetrySink

log = get_logger(__name__)

DEPENDENCY_METRIC = "dependency.duration"


class TelemetryFanout:
    def __init__(self, sinks: Sequence[TelemetrySink]) -> None:
        self._sinks = tuple(sinks)

    @property
    def sinks(self) -> tuple[TelemetrySink, ...]:
        return self._sinks

    def record_event(
        self,
        name: str,
        attributes: Attributes | None = None,
        measurements: Mapping[str, float] | None = None,
    ) -> None:
        for sink in self._sinks:
            _guard(sink, "record_event", sink.record_event, name, attributes, measurements)

    def record_metric(self, name: str, value: float, attributes: Attributes | None = None) -> None:
        for sink in self._sinks:
            _guard(sink, "record_metric", sink.record_metric, name, value, attributes)

    def record_dependency(
        self, dependency_type: str, target: str, duration_ms: float, *, success: bool
    ) -> None:
        """One downstream call (HTTP service, database), recorded as a duration metric."""
        self.record_metric(
            DEPENDENCY_METRIC,
            duration_ms,
            {
                "dependency.type": dependency_type,
                "dependency.target": target,
                "success": "true" if success else "false",
            },
        )

    def record_exception(
        self,
        error: BaseException,
        attributes: Attributes | None = None,
        span: ScopedSpan | None = None,
    ) -> None:
        for sink in self._sinks:
            handle = span.handle_for(sink) if span is not None else None
            _guard(sink, "record_exception", sink.record_exception, error, attributes, handle)

    @contextmanager
    def span(self, name: str, attributes: Attributes | None = None) -> Iterator[ScopedSpan]:
        """
        Open `name` on every sink; always end it on exit.

        If an exception escapes while the span was never marked, it is marked failed
        first. Exceptions still propagate.
        """

        scoped = ScopedSpan(self._sinks, name, attributes)
        scoped.open()
        try:
            yield scoped
        except Exception as exc:
            if scoped.state is SpanState.started:
                scoped.fail(type(exc).__name__)
            raise
        finally:
            scoped.close()


class ScopedSpan:
    """
    One logical span across all sinks.

    Tracks its own lifecycle, so contract violations (e.g. marking after end)
    raise `SpanStateError` to the caller even when every sink already dropped out.
    """

    def __init__(self, sinks: Sequence[TelemetrySink], name: str, attributes: Attributes | None) -> None:
        self._sinks = tuple(sinks)
        self._logical = SpanHandle(name, attributes)
        self._handles: dict[int, SpanHandle] = {}

    @property
    def name(self) -> str:
        return self._logical.name

    @property
    def attributes(self) -> dict[str, str]:
        return self._logical.attributes

    @property
    def state(self) -> SpanState:
        return self._logical.state

    @property
    def status(self) -> SpanStatus:
        return self._logical.status

    def handle_for(self, sink: TelemetrySink) -> SpanHandle | None:
        return self._handles.get(id(sink))

    def open(self) -> None:
        self._logical.start()
        for sink in self._sinks:
            handle = _guard(sink, "start_span", sink.start_span, self._logical.name, self._logical.attributes)
            if handle is not None:
                self._handles[id(sink)] = handle

    def add_event(self, name: str, attributes: Attributes | None = None) -> None:
        self._logical.require_open("add an event to")
        attrs = stringify(attributes)
        self._each("add_span_event", lambda sink, h: sink.add_span_event(h, name, attrs))

    def succeed(self) -> None:
        self._logical.mark(SpanStatus.ok)
        self._each("mark_span", lambda sink, h: sink.mark_span(h, SpanStatus.ok))

    def fail(self, description: str | None = None) -> None:
        self._logical.mark(SpanStatus.error)
        self._each("mark_span", lambda sink, h: sink.mark_span(h, SpanStatus.error, description))

    def close(self) -> None:
        self._logical.end()
        self._each("end_span", lambda sink, h: sink.end_span(h))

    def _each(self, operation: str, call: Callable[[TelemetrySink, SpanHandle], None]) -> None:
        for sink in self._sinks:
            handle = self._handles.get(id(sink))
            if handle is None:
                continue
            _guard(sink, operation, call, sink, handle)


def _guard(sink: TelemetrySink, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
    # A broken backend must not starve the others of the signal.
    try:
        return fn(*args)
    except Exception:
        log.exception("telemetry_sink_error", sink=sink.name, operation=operation)
        return None


# --- Module Notes -----------------------------------------------------------
# Orchestration code talks only to TelemetryFanout/ScopedSpan; sinks are swapped at wiring time.
