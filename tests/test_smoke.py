"""
tests.test_smoke

End-to-end checks against the assembled app.

Responsibilities:
- Ensure the FastAPI app starts and serves health, order, customer and metrics endpoints.
- Exercise enrichment over HTTP, with the customer routes served by the same app.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import pytest

from order_enrichment.api.app import create_app
from order_enrichment.observability.sinks import MetricsSink, RecordingSink
from order_enrichment.settings import Settings


@asynccontextmanager
async def running_app(recording: RecordingSink | None = None) -> AsyncIterator[httpx.AsyncClient]:
    settings = Settings(env="test", order_store_latency_ms=0, customer_store_latency_ms=0)
    app = create_app(settings=settings, sinks=[recording or RecordingSink(), MetricsSink()])
    # Customer calls loop back into this app in-process.
    app.state.customer_transport = httpx.ASGITransport(app=app)

    # httpx ASGITransport does not manage lifespan automatically; do it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.mark.asyncio
async def test_health_endpoints() -> None:
    async with running_app() as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"

        r = await client.get("/api/orders/health")
        assert r.status_code == 200
        assert r.text == "Order Service is UP"

        r = await client.get("/api/customers/health")
        assert r.status_code == 200
        assert r.text == "Customer Service is UP"


@pytest.mark.asyncio
async def test_order_is_enriched_over_http() -> None:
    recording = RecordingSink()
    async with running_app(recording) as client:
        r = await client.get("/api/orders/ORD-002")

    assert r.status_code == 200
    body = r.json()
    assert body["orderId"] == "ORD-002"
    assert body["quantity"] == 2
    assert body["unitPrice"] == 29.99
    assert body["totalAmount"] == 59.98
    assert body["status"] == "PENDING"
    assert len(body["orderDate"]) == len("2024-01-01T00:00:00")
    assert body["customer"]["customerId"] == "456"
    assert body["customer"]["firstName"] == "Jane"
    assert r.headers["x-request-id"]

    assert len(recording.events("CustomerEnrichmentSuccess")) == 1
    assert len(recording.events("CustomerRequest")) == 1


@pytest.mark.asyncio
async def test_order_error_statuses() -> None:
    async with running_app() as client:
        r = await client.get("/api/orders/%20%20%20")
        assert r.status_code == 400

        r = await client.get("/api/orders/ORD-999-UNKNOWN")
        assert r.status_code == 404


@pytest.mark.asyncio
async def test_customer_endpoint() -> None:
    async with running_app() as client:
        r = await client.get("/api/customers/789")
        assert r.status_code == 200
        assert r.json()["status"] == "INACTIVE"
        assert r.json()["lastName"] == "Johnson"

        r = await client.get("/api/customers/nope")
        assert r.status_code == 404

        r = await client.get("/api/customers/%20")
        assert r.status_code == 400


@pytest.mark.asyncio
async def test_request_id_is_propagated() -> None:
    async with running_app() as client:
        r = await client.get("/healthz", headers={"x-request-id": "req-42"})
        assert r.headers["x-request-id"] == "req-42"


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_prometheus_text() -> None:
    async with running_app() as client:
        await client.get("/api/orders/ORD-001")
        r = await client.get("/metrics")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert 'telemetry_events_total{event="OrderFound"} 1.0' in r.text
    assert "order_processing_duration_count" in r.text
    assert "customer_enrichment_duration_count" in r.text


@pytest.mark.asyncio
async def test_dependencies_are_recorded_per_call() -> None:
    recording = RecordingSink()
    async with running_app(recording) as client:
        r = await client.get("/api/orders/ORD-001")
        assert r.status_code == 200
        r = await client.get("/metrics")

    targets = [m.attributes["dependency.target"] for m in recording.metrics("dependency.duration")]
    assert sorted(targets) == ["customer-db", "customer-service"]
    assert all(m.attributes["success"] == "true" for m in recording.metrics("dependency.duration"))
    assert 'dependency_duration_count{dependency_target="customer-db",dependency_type="Database",success="true"} 1.0' in r.text


# --- Module Notes -----------------------------------------------------------
# Lifespan is entered through app.router.lifespan_context because ASGITransport skips it.
