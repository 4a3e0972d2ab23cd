"""
order_enrichment.errors

Error taxonomy and typed lookup results.

Responsibilities:
- Model expected lookup failures (validation, not found) as values, not exceptions.
- Define `DependencyError`, the exception recorded when the customer service call fails.
- Define `SpanStateError` for telemetry span contract violations.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(enum.StrEnum):
    # Stable, low-cardinality labels; safe to use as metric dimensions.
    timeout = "timeout"
    connection_error = "connection_error"
    not_found = "not_found"
    http_error = "http_error"
    invalid_payload = "invalid_payload"
    unexpected_error = "unexpected_error"


class LookupErrorKind(enum.StrEnum):
    validation = "validation"
    not_found = "not_found"
    unexpected = "unexpected"


class DependencyError(Exception):
    """
    The customer service call failed.

    Never surfaced to API callers: the orchestrator records it and degrades.
    """

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value


class SpanStateError(RuntimeError):
    """Raised when a span is used in a way its lifecycle does not allow."""


@dataclass(frozen=True, slots=True)
class LookupFailure:
    kind: LookupErrorKind
    detail: str = ""


@dataclass(frozen=True, slots=True)
class LookupResult(Generic[T]):
    value: T | None = None
    failure: LookupFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> LookupResult[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, kind: LookupErrorKind, detail: str = "") -> LookupResult[T]:
        return cls(failure=LookupFailure(kind=kind, detail=detail))


# --- Module Notes -----------------------------------------------------------
# Routers map LookupErrorKind to HTTP status codes; services never raise for expected outcomes.
