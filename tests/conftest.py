"""
tests.conftest

Shared fixtures.

Responsibilities:
- A telemetry harness wiring every real sink to in-memory backends.
- Fake customer services built on httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
import structlog
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from structlog.testing import CapturingLogger

from order_enrichment.api.schemas import CustomerOut
from order_enrichment.customer_clients.http import RemoteCustomerClient
from order_enrichment.models import Customer
from order_enrichment.observability.fanout import TelemetryFanout
from order_enrichment.observability.sinks import EventSink, MetricsSink, RecordingSink, TracingSink
from order_enrichment.orchestrator.enrichment import EnrichmentOrchestrator
from order_enrichment.services.order_lookup_service import OrderLookupService
from order_enrichment.stores.record_store import RecordStore
from order_enrichment.stores.seed import seed_customers, seed_orders

CUSTOMER_BASE_URL = "http://customer-service"


@dataclass
class TelemetryHarness:
    recording: RecordingSink
    events: EventSink
    event_log: CapturingLogger
    metrics: MetricsSink
    tracing: TracingSink
    span_exporter: InMemorySpanExporter
    metric_reader: InMemoryMetricReader
    fanout: TelemetryFanout = field(init=False)

    def __post_init__(self) -> None:
        self.fanout = TelemetryFanout([self.events, self.metrics, self.tracing, self.recording])

    # events sink (structlog)
    def logged(self, event: str, **match: Any) -> list[dict[str, Any]]:
        out = []
        for call in self.event_log.calls:
            kw = call.kwargs
            if kw.get("event") != event:
                continue
            if all(kw.get(k) == v for k, v in match.items()):
                out.append(kw)
        return out

    # metrics sink (prometheus)
    def sample(self, name: str, labels: dict[str, str] | None = None) -> float:
        return self.metrics.registry.get_sample_value(name, labels or {}) or 0.0

    # tracing sink (OpenTelemetry)
    def finished_spans(self, name: str | None = None) -> list[ReadableSpan]:
        spans = self.span_exporter.get_finished_spans()
        return [s for s in spans if name is None or s.name == name]

    def otel_points(self, metric: str) -> list[Any]:
        data = self.metric_reader.get_metrics_data()
        points: list[Any] = []
        if data is None:
            return points
        for rm in data.resource_metrics:
            for sm in rm.scope_metrics:
                for m in sm.metrics:
                    if m.name == metric:
                        points.extend(m.data.data_points)
        return points


@pytest.fixture
def harness() -> TelemetryHarness:
    exporter = InMemorySpanExporter()
    tracer_provider = TracerProvider()
    tracer_provider.add_span_processor(SimpleSpanProcessor(exporter))

    reader = InMemoryMetricReader()
    meter_provider = MeterProvider(metric_readers=[reader])

    event_log = CapturingLogger()
    events = EventSink(
        logger=structlog.wrap_logger(event_log, processors=[], wrapper_class=structlog.BoundLogger)
    )
    return TelemetryHarness(
        recording=RecordingSink(),
        events=events,
        event_log=event_log,
        metrics=MetricsSink(),
        tracing=TracingSink(
            tracer=tracer_provider.get_tracer("tests"),
            meter=meter_provider.get_meter("tests"),
        ),
        span_exporter=exporter,
        metric_reader=reader,
    )


def customer_json(customer: Customer) -> dict[str, Any]:
    return CustomerOut.from_domain(customer).model_dump(by_alias=True, mode="json")


def healthy_customer_service(delays: dict[str, float] | None = None) -> Callable[..., Any]:
    customers = {c.customer_id: c for c in seed_customers()}

    async def handler(request: httpx.Request) -> httpx.Response:
        customer_id = request.url.path.rsplit("/", 1)[-1]
        if delays and customer_id in delays:
            await asyncio.sleep(delays[customer_id])
        customer = customers.get(customer_id)
        if customer is None:
            return httpx.Response(404)
        return httpx.Response(200, json=customer_json(customer))

    return handler


def unreachable_customer_service(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def customer_client(handler: Callable[..., Any], timeout_s: float = 1.0) -> RemoteCustomerClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=CUSTOMER_BASE_URL)
    return RemoteCustomerClient(http=http, timeout_s=timeout_s)


def order_service(
    harness: TelemetryHarness,
    handler: Callable[..., Any],
    orders: Any | None = None,
) -> OrderLookupService:
    store = orders
    if store is None:
        store = RecordStore.from_records(name="orders", records=seed_orders(), key=lambda o: o.order_id)
    orchestrator = EnrichmentOrchestrator(client=customer_client(handler), telemetry=harness.fanout)
    return OrderLookupService(orders=store, orchestrator=orchestrator, telemetry=harness.fanout)


# --- Module Notes -----------------------------------------------------------
# The harness attaches every production sink plus a RecordingSink, so one test run checks
# that all backends saw the same signal set.
