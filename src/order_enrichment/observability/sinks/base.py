"""
order_enrichment.observability.sinks.base

The telemetry sink contract.

Responsibilities:
- Define the capability set: events, metrics, span lifecycle, exceptions.
- Enforce the span lifecycle once, here, so backends only implement the hooks.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any

from order_enrichment.observability.signals import Attributes, SpanHandle, SpanStatus


class TelemetrySink(abc.ABC):
    """
    Every backend receives the same calls for a given logical operation.

    Subclasses implement the three record_* methods plus the `_open_span`,
    `_span_event`, `_span_status` and `_close_span` hooks. The public span
    methods validate state on the handle before touching the backend.
    """

    name: str = "sink"

    @abc.abstractmethod
    def record_event(
        self,
        name: str,
        attributes: Attributes | None = None,
        measurements: Mapping[str, float] | None = None,
    ) -> None: ...

    @abc.abstractmethod
    def record_metric(self, name: str, value: float, attributes: Attributes | None = None) -> None: ...

    @abc.abstractmethod
    def record_exception(
        self,
        error: BaseException,
        attributes: Attributes | None = None,
        span: SpanHandle | None = None,
    ) -> None: ...

    def start_span(self, name: str, attributes: Attributes | None = None) -> SpanHandle:
        span = SpanHandle(name, attributes)
        span.start(self._open_span(span))
        return span

    def add_span_event(
        self, span: SpanHandle, name: str, attributes: Attributes | None = None
    ) -> None:
        span.require_open("add an event to")
        self._span_event(span, name, dict(attributes or {}))

    def mark_span(
        self, span: SpanHandle, status: SpanStatus, description: str | None = None
    ) -> None:
        span.mark(status)
        self._span_status(span, status, description)

    def end_span(
        self,
        span: SpanHandle,
        status: SpanStatus | None = None,
        description: str | None = None,
    ) -> None:
        if status is not None:
            self.mark_span(span, status, description)
        # State flips first so a failing backend hook cannot leave the span open.
        span.end()
        self._close_span(span)

    @abc.abstractmethod
    def _open_span(self, span: SpanHandle) -> Any: ...

    @abc.abstractmethod
    def _span_event(self, span: SpanHandle, name: str, attributes: dict[str, Any]) -> None: ...

    @abc.abstractmethod
    def _span_status(
        self, span: SpanHandle, status: SpanStatus, description: str | None
    ) -> None: ...

    @abc.abstractmethod
    def _close_span(self, span: SpanHandle) -> None: ...


# --- Module Notes -----------------------------------------------------------
# Sinks are independent: none of them may inspect or depend on another sink's state.
