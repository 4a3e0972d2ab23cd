"""
order_enrichment.services.common

Helpers shared by the lookup services.

Responsibilities:
- Decide whether an incoming id is blank.
- Record the per-operation duration metric with a fixed label set.
"""

from __future__ import annotations

from time import perf_counter

from order_enrichment.observability.fanout import TelemetryFanout


def is_blank(record_id: str | None) -> bool:
    return record_id is None or not str(record_id).strip()


def record_duration(
    telemetry: TelemetryFanout,
    metric: str,
    *,
    operation: str,
    start: float,
    outcome: str,
    error_kind: str = "none",
) -> None:
    telemetry.record_metric(
        metric,
        (perf_counter() - start) * 1000.0,
        {"operation": operation, "outcome": outcome, "error.kind": error_kind},
    )


# --- Module Notes -----------------------------------------------------------
# Labels are always {operation, outcome, error.kind} so each metric keeps one label set.
