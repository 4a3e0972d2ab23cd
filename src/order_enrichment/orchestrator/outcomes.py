"""
order_enrichment.orchestrator.outcomes

Result variants of a customer service call.

Responsibilities:
- Define the closed set `EnrichmentSuccess | EnrichmentEmpty | EnrichmentFailure`.
- Carry the observed call duration on every variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from order_enrichment.errors import DependencyError, ErrorKind
from order_enrichment.models import Customer


@dataclass(frozen=True, slots=True)
class EnrichmentSuccess:
    customer: Customer
    duration_ms: float


@dataclass(frozen=True, slots=True)
class EnrichmentEmpty:
    duration_ms: float


@dataclass(frozen=True, slots=True)
class EnrichmentFailure:
    error_kind: ErrorKind
    duration_ms: float
    error: DependencyError = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.error is None:
            object.__setattr__(self, "error", DependencyError(self.error_kind))


EnrichmentOutcome = Union[EnrichmentSuccess, EnrichmentEmpty, EnrichmentFailure]


# --- Module Notes -----------------------------------------------------------
# Expected dependency failures travel as values; only truly unexpected faults are raised.
