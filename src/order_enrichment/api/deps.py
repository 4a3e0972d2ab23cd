"""
order_enrichment.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, services and telemetry.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from fastapi import Request

from order_enrichment.observability.fanout import TelemetryFanout
from order_enrichment.observability.sinks import MetricsSink
from order_enrichment.services.customer_lookup_service import CustomerLookupService
from order_enrichment.services.order_lookup_service import OrderLookupService
from order_enrichment.settings import Settings


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def telemetry_dep(request: Request) -> TelemetryFanout:
    # Built in the app lifespan (see `order_enrichment.api.app.create_app`).
    return request.app.state.telemetry  # type: ignore[attr-defined]


def metrics_sink_dep(request: Request) -> MetricsSink | None:
    return getattr(request.app.state, "metrics_sink", None)


def order_service_dep(request: Request) -> OrderLookupService:
    return request.app.state.order_service  # type: ignore[attr-defined]


def customer_service_dep(request: Request) -> CustomerLookupService:
    return request.app.state.customer_service  # type: ignore[attr-defined]


# --- Module Notes -----------------------------------------------------------
# Services are app-scoped; everything request-scoped (spans, outcomes) is created inside them.
