"""
order_enrichment.api.app

FastAPI app factory for the order enrichment service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Create and dispose shared infrastructure (customer HTTP client, telemetry providers).
- Provide a single composition root where stores, sinks and services are wired.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from order_enrichment import __version__
from order_enrichment.api.routers.customers import router as customers_router
from order_enrichment.api.routers.health import router as health_router
from order_enrichment.api.routers.metrics import router as metrics_router
from order_enrichment.api.routers.orders import router as orders_router
from order_enrichment.customer_clients.http import RemoteCustomerClient
from order_enrichment.observability.fanout import TelemetryFanout
from order_enrichment.observability.logging import configure_logging, get_logger
from order_enrichment.observability.middleware import RequestContextMiddleware
from order_enrichment.observability.providers import build_providers, build_sinks
from order_enrichment.observability.sinks import MetricsSink, TelemetrySink
from order_enrichment.orchestrator.enrichment import EnrichmentOrchestrator
from order_enrichment.services.customer_lookup_service import CustomerLookupService
from order_enrichment.services.order_lookup_service import OrderLookupService
from order_enrichment.settings import Settings
from order_enrichment.stores.seed import build_customer_store, build_order_store

log = get_logger(__name__)


def create_app(*, settings: Settings, sinks: Sequence[TelemetrySink] | None = None) -> FastAPI:
    """
    `sinks` replaces the default events/metrics/tracing set (tests pass recording sinks).
    Set `app.state.customer_transport` before startup to route customer calls through a
    custom httpx transport (e.g. ASGITransport for in-process calls).
    """

    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        providers = build_providers(settings)
        app_sinks = list(sinks) if sinks is not None else build_sinks(providers)
        telemetry = TelemetryFanout(app_sinks)

        http = httpx.AsyncClient(
            base_url=settings.customer_service_base_url,
            timeout=settings.customer_service_timeout_s,
            transport=getattr(app.state, "customer_transport", None),
        )
        client = RemoteCustomerClient(http=http, timeout_s=settings.customer_service_timeout_s)

        orders = build_order_store(settings)
        customers = build_customer_store(settings)

        app.state.settings = settings
        app.state.telemetry = telemetry
        app.state.metrics_sink = next((s for s in app_sinks if isinstance(s, MetricsSink)), None)
        app.state.orders = orders
        app.state.customers = customers
        app.state.order_service = OrderLookupService(
            orders=orders,
            orchestrator=EnrichmentOrchestrator(client=client, telemetry=telemetry),
            telemetry=telemetry,
        )
        app.state.customer_service = CustomerLookupService(customers=customers, telemetry=telemetry)
        try:
            yield
        finally:
            await http.aclose()
            providers.shutdown()
            log.info("shutdown")

    app = FastAPI(
        title="Order Enrichment Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router)
    app.include_router(orders_router)
    app.include_router(customers_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; business logic stays
# in services/orchestrator layers.
