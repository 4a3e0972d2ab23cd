"""
tests.test_enrichment

Enrichment outcomes and the signal set each one produces.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from opentelemetry.trace import StatusCode

from order_enrichment.errors import ErrorKind
from order_enrichment.models import Order
from order_enrichment.orchestrator.enrichment import (
    ENRICHMENT_DURATION_METRIC,
    ENRICHMENT_SPAN,
    EnrichmentOrchestrator,
)
from order_enrichment.orchestrator.outcomes import EnrichmentEmpty, EnrichmentFailure, EnrichmentSuccess
from order_enrichment.stores.seed import seed_customers

from conftest import customer_client, healthy_customer_service, unreachable_customer_service


class _Fixed:
    def __init__(self, outcome) -> None:
        self.outcome = outcome
        self.calls: list[str] = []

    def absolute_url(self, customer_id: str) -> str:
        return f"http://customer-service/api/customers/{customer_id}"

    async def fetch(self, customer_id: str):
        self.calls.append(customer_id)
        return self.outcome


class _Raising(_Fixed):
    def __init__(self) -> None:
        super().__init__(None)

    async def fetch(self, customer_id: str):
        raise RuntimeError("client bug")


def _order(customer_id: str = "123") -> Order:
    return Order("ORD-001", customer_id, "Laptop Computer", 1, Decimal("999.99"))


def _labels(outcome: str, error_kind: str) -> dict[str, str]:
    return {"operation": "customer_enrichment", "outcome": outcome, "error_kind": error_kind}


@pytest.mark.asyncio
async def test_success_attaches_customer_and_reports_success(harness) -> None:
    orchestrator = EnrichmentOrchestrator(
        client=customer_client(healthy_customer_service()), telemetry=harness.fanout
    )
    order = _order("123")

    enriched = await orchestrator.enrich(order)

    assert enriched.customer is not None
    assert enriched.customer.full_name == "John Doe"
    assert order.customer is None
    assert enriched.total_amount == order.total_amount

    rec = harness.recording
    (event,) = rec.events("CustomerEnrichmentSuccess")
    assert event.attributes == {"orderId": "ORD-001", "customerId": "123"}
    assert "enrichmentDuration" in event.measurements
    (metric,) = rec.metrics(ENRICHMENT_DURATION_METRIC)
    assert metric.attributes["outcome"] == "success"
    assert rec.exceptions() == []
    assert rec.spans(ENRICHMENT_SPAN)[0].attributes["status"] == "OK"

    assert harness.sample("customer_enrichment_duration_count", _labels("success", "none")) == 1.0

    (span,) = harness.finished_spans(ENRICHMENT_SPAN)
    assert span.status.status_code is StatusCode.OK
    assert span.attributes["customer.id"] == "123"
    assert span.attributes["peer.service"] == "customer-service"
    request_event, span_event = span.events
    assert request_event.name == "http.request.start"
    assert request_event.attributes["http.url"] == "http://customer-service/api/customers/123"
    assert request_event.attributes["http.method"] == "GET"
    assert span_event.name == "customer.enrichment.success"
    assert span_event.attributes["customer.name"] == "John Doe"


@pytest.mark.asyncio
async def test_empty_response_is_metric_failure_but_span_ok(harness) -> None:
    orchestrator = EnrichmentOrchestrator(
        client=_Fixed(EnrichmentEmpty(duration_ms=4.0)), telemetry=harness.fanout
    )
    order = _order()

    result = await orchestrator.enrich(order)

    assert result == order
    assert result.customer is None

    rec = harness.recording
    assert len(rec.events("CustomerEnrichmentEmpty")) == 1
    assert rec.events("CustomerEnrichmentFailure") == []
    (metric,) = rec.metrics(ENRICHMENT_DURATION_METRIC)
    assert metric.attributes["outcome"] == "failure"
    assert metric.attributes["error.kind"] == "empty_response"
    assert metric.measurements["value"] == 4.0
    assert rec.exceptions() == []

    (span,) = harness.finished_spans(ENRICHMENT_SPAN)
    assert span.status.status_code is StatusCode.OK
    assert [e.name for e in span.events] == ["http.request.start", "customer.enrichment.empty_response"]
    assert harness.sample("customer_enrichment_duration_count", _labels("failure", "empty_response")) == 1.0


@pytest.mark.asyncio
async def test_dependency_failure_degrades_and_records_exception(harness) -> None:
    orchestrator = EnrichmentOrchestrator(
        client=customer_client(unreachable_customer_service), telemetry=harness.fanout
    )
    order = _order()

    result = await orchestrator.enrich(order)

    assert result == order

    rec = harness.recording
    (event,) = rec.events("CustomerEnrichmentFailure")
    assert event.attributes["errorKind"] == "connection_error"
    (exc,) = rec.exceptions()
    assert exc.attributes["exception.type"] == "DependencyError"
    assert exc.attributes["span.id"]
    assert rec.spans(ENRICHMENT_SPAN)[0].attributes["status"] == "ERROR"

    (span,) = harness.finished_spans(ENRICHMENT_SPAN)
    assert span.status.status_code is StatusCode.ERROR
    assert span.status.description == "connection_error"
    assert [e.name for e in span.events] == ["http.request.start", "exception"]

    assert harness.sample("customer_enrichment_duration_count", _labels("failure", "connection_error")) == 1.0
    assert harness.sample("telemetry_exceptions_total", {"exception_type": "DependencyError"}) == 1.0


@pytest.mark.asyncio
async def test_unknown_customer_is_not_found_failure(harness) -> None:
    orchestrator = EnrichmentOrchestrator(
        client=customer_client(healthy_customer_service()), telemetry=harness.fanout
    )

    result = await orchestrator.enrich(_order("does-not-exist"))

    assert result.customer is None
    (event,) = harness.recording.events("CustomerEnrichmentFailure")
    assert event.attributes["errorKind"] == ErrorKind.not_found.value


@pytest.mark.asyncio
async def test_raising_client_becomes_unexpected_error(harness) -> None:
    orchestrator = EnrichmentOrchestrator(client=_Raising(), telemetry=harness.fanout)
    order = _order()

    result = await orchestrator.enrich(order)

    assert result == order
    (event,) = harness.recording.events("CustomerEnrichmentFailure")
    assert event.attributes["errorKind"] == "unexpected_error"
    (exc,) = harness.recording.exceptions()
    assert "client bug" in exc.attributes["exception.message"]
    assert harness.recording.spans(ENRICHMENT_SPAN)[0].attributes["status"] == "ERROR"


@pytest.mark.asyncio
async def test_failure_outcome_without_error_gets_default_dependency_error(harness) -> None:
    client = _Fixed(EnrichmentFailure(error_kind=ErrorKind.timeout, duration_ms=2000.0))
    orchestrator = EnrichmentOrchestrator(client=client, telemetry=harness.fanout)

    await orchestrator.enrich(_order())

    assert client.calls == ["123"]
    (exc,) = harness.recording.exceptions()
    assert exc.attributes["error.kind"] == "timeout"
    assert harness.sample("customer_enrichment_duration_count", _labels("failure", "timeout")) == 1.0


@pytest.mark.asyncio
async def test_every_seed_customer_enriches(harness) -> None:
    orchestrator = EnrichmentOrchestrator(
        client=customer_client(healthy_customer_service()), telemetry=harness.fanout
    )
    for customer in seed_customers():
        enriched = await orchestrator.enrich(_order(customer.customer_id))
        assert enriched.customer.customer_id == customer.customer_id
        assert enriched.customer.status is customer.status

    assert len(harness.recording.events("CustomerEnrichmentSuccess")) == len(seed_customers())


def _dependency(success: str) -> dict[str, str]:
    return {"dependency_type": "HTTP", "dependency_target": "customer-service", "success": success}


@pytest.mark.asyncio
async def test_non_outcome_from_client_follows_failure_path(harness) -> None:
    orchestrator = EnrichmentOrchestrator(client=_Fixed(None), telemetry=harness.fanout)
    order = _order()

    result = await orchestrator.enrich(order)

    assert result == order
    rec = harness.recording
    (event,) = rec.events("CustomerEnrichmentFailure")
    assert event.attributes["errorKind"] == "unexpected_error"
    (metric,) = rec.metrics(ENRICHMENT_DURATION_METRIC)
    assert metric.attributes["error.kind"] == "unexpected_error"
    (exc,) = rec.exceptions()
    assert "NoneType" in exc.attributes["exception.message"]
    assert rec.spans(ENRICHMENT_SPAN)[0].attributes["status"] == "ERROR"
    assert harness.sample("dependency_duration_count", _dependency("false")) == 1.0


@pytest.mark.asyncio
async def test_fault_while_reporting_falls_back_to_failure_set(harness) -> None:
    customer = seed_customers()[0]
    broken = EnrichmentSuccess(customer=customer, duration_ms=None)  # type: ignore[arg-type]
    orchestrator = EnrichmentOrchestrator(client=_Fixed(broken), telemetry=harness.fanout)

    result = await orchestrator.enrich(_order())

    assert result.customer is None
    rec = harness.recording
    (event,) = rec.events("CustomerEnrichmentFailure")
    assert event.attributes["errorKind"] == "unexpected_error"
    (exc,) = rec.exceptions()
    assert "TypeError" in exc.attributes["exception.message"]
    (end,) = rec.spans(ENRICHMENT_SPAN)
    assert end.attributes["status"] == "ERROR"
    (span,) = harness.finished_spans(ENRICHMENT_SPAN)
    assert span.status.status_code is StatusCode.ERROR


@pytest.mark.asyncio
async def test_each_call_records_one_http_dependency(harness) -> None:
    orchestrator = EnrichmentOrchestrator(
        client=customer_client(healthy_customer_service()), telemetry=harness.fanout
    )

    await orchestrator.enrich(_order("123"))
    await orchestrator.enrich(_order("missing"))

    assert harness.sample("dependency_duration_count", _dependency("true")) == 1.0
    assert harness.sample("dependency_duration_count", _dependency("false")) == 1.0
    (success, failure) = harness.recording.metrics("dependency.duration")
    assert success.attributes["dependency.type"] == "HTTP"
    assert failure.attributes["success"] == "false"


# --- Module Notes -----------------------------------------------------------
# Stub clients implement the CustomerFetcher protocol; real HTTP paths use MockTransport.
