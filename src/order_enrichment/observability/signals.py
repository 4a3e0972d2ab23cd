"""
order_enrichment.observability.signals

Telemetry value types shared by every sink.

Responsibilities:
- Define the signal record (`TelemetrySignal`) and its kinds.
- Define the span lifecycle (`SpanState`) and final status (`SpanStatus`).
- Provide `SpanHandle`, the per-sink span object that enforces the lifecycle.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any

from order_enrichment.errors import SpanStateError

Attributes = Mapping[str, Any]


class SignalKind(enum.StrEnum):
    event = "event"
    metric = "metric"
    span_start = "span_start"
    span_event = "span_event"
    span_end = "span_end"
    exception = "exception"


class SpanState(enum.StrEnum):
    not_started = "NOT_STARTED"
    started = "STARTED"
    succeeded = "SUCCEEDED"
    failed = "FAILED"
    ended = "ENDED"


class SpanStatus(enum.StrEnum):
    unset = "UNSET"
    ok = "OK"
    error = "ERROR"


@dataclass(frozen=True, slots=True)
class TelemetrySignal:
    name: str
    kind: SignalKind
    attributes: dict[str, str] = field(default_factory=dict)
    measurements: dict[str, float] = field(default_factory=dict)


def stringify(attributes: Attributes | None) -> dict[str, str]:
    # Sinks only accept string attributes; keeps label sets uniform across backends.
    if not attributes:
        return {}
    return {str(k): "" if v is None else str(v) for k, v in attributes.items()}


class SpanHandle:
    """
    One sink's view of a span.

    Lifecycle: NOT_STARTED -> STARTED -> {SUCCEEDED, FAILED} -> ENDED. A span can be
    re-marked while open; once ENDED every further mark, event or end raises
    `SpanStateError`.
    """

    __slots__ = ("name", "attributes", "span_id", "native", "_state", "_status", "_t0", "_t1")

    def __init__(self, name: str, attributes: Attributes | None = None) -> None:
        self.name = name
        self.attributes = stringify(attributes)
        self.span_id = uuid.uuid4().hex[:16]
        self.native: Any = None
        self._state = SpanState.not_started
        self._status = SpanStatus.unset
        self._t0: float | None = None
        self._t1: float | None = None

    @property
    def state(self) -> SpanState:
        return self._state

    @property
    def status(self) -> SpanStatus:
        return self._status

    @property
    def is_open(self) -> bool:
        return self._state in (SpanState.started, SpanState.succeeded, SpanState.failed)

    @property
    def duration_ms(self) -> float | None:
        if self._t0 is None:
            return None
        end = self._t1 if self._t1 is not None else perf_counter()
        return (end - self._t0) * 1000.0

    def require_open(self, action: str) -> None:
        if not self.is_open:
            raise SpanStateError(f"cannot {action} span {self.name!r} in state {self._state}")

    def start(self, native: Any = None) -> None:
        if self._state is not SpanState.not_started:
            raise SpanStateError(f"span {self.name!r} already started (state {self._state})")
        self.native = native
        self._t0 = perf_counter()
        self._state = SpanState.started

    def mark(self, status: SpanStatus) -> None:
        self.require_open("mark")
        if status is SpanStatus.ok:
            self._state = SpanState.succeeded
        elif status is SpanStatus.error:
            self._state = SpanState.failed
        else:
            raise ValueError("a span can only be marked OK or ERROR")
        self._status = status

    def end(self) -> None:
        self.require_open("end")
        self._t1 = perf_counter()
        self._state = SpanState.ended

    def __repr__(self) -> str:
        return f"SpanHandle(name={self.name!r}, span_id={self.span_id!r}, state={self._state})"


# --- Module Notes -----------------------------------------------------------
# SpanHandle carries no backend state beyond `native`; each sink decides what to store there.
