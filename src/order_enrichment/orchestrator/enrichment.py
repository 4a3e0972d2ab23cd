"""
order_enrichment.orchestrator.enrichment

Order -> customer enrichment flow.

Responsibilities:
- Fetch the order's customer through the client boundary inside a scoped span.
- Attach the customer on success; degrade to the bare order on empty or failed fetches.
- Emit the success/empty/failure signal set through the telemetry fanout.
"""

from __future__ import annotations

from time import perf_counter
from typing import Protocol

from order_enrichment.errors import DependencyError, ErrorKind
from order_enrichment.models import Order
from order_enrichment.observability.fanout import ScopedSpan, TelemetryFanout
from order_enrichment.observability.logging import get_logger
from order_enrichment.orchestrator.outcomes import (
    EnrichmentEmpty,
    EnrichmentFailure,
    EnrichmentOutcome,
    EnrichmentSuccess,
)

log = get_logger(__name__)

ENRICHMENT_SPAN = "customer.enrichment"
ENRICHMENT_DURATION_METRIC = "customer.enrichment.duration"


class CustomerFetcher(Protocol):
    def absolute_url(self, customer_id: str) -> str: ...

    async def fetch(self, customer_id: str) -> EnrichmentOutcome: ...


class EnrichmentOrchestrator:
    """
    `enrich` never raises (cancellation aside): every outcome, including unexpected
    faults inside the enrichment boundary, ends in a returned Order.
    """

    def __init__(
        self,
        *,
        client: CustomerFetcher,
        telemetry: TelemetryFanout,
        target: str = "customer-service",
    ) -> None:
        self._client = client
        self._telemetry = telemetry
        self._target = target

    async def enrich(self, order: Order) -> Order:
        attributes = {
            "order.id": order.order_id,
            "customer.id": order.customer_id,
            "operation": "customer_enrichment",
            "peer.service": self._target,
        }
        try:
            with self._telemetry.span(ENRICHMENT_SPAN, attributes) as span:
                start = perf_counter()
                outcome, enriched = await self._fetch(order, span, start)
                self._telemetry.record_dependency(
                    "HTTP",
                    self._target,
                    outcome.duration_ms,
                    success=not isinstance(outcome, EnrichmentFailure),
                )
                try:
                    self._report(order, outcome, span)
                except Exception as e:
                    # Signals already sent for the broken outcome stay; the failure set follows.
                    log.exception("customer_enrichment_report_failed", order_id=order.order_id)
                    self._report(order, _unexpected(e, start), span)
                    return order
                return enriched
        except Exception:
            # Only reachable if reporting the failure itself breaks; the span is already closed.
            log.exception("customer_enrichment_aborted", order_id=order.order_id)
            return order

    async def _fetch(
        self, order: Order, span: ScopedSpan, start: float
    ) -> tuple[EnrichmentOutcome, Order]:
        try:
            span.add_event(
                "http.request.start",
                {"http.url": self._client.absolute_url(order.customer_id), "http.method": "GET"},
            )
            outcome = await self._client.fetch(order.customer_id)
            if not isinstance(outcome, (EnrichmentSuccess, EnrichmentEmpty, EnrichmentFailure)):
                raise TypeError(f"customer client returned {type(outcome).__name__}, not an enrichment outcome")
            if isinstance(outcome, EnrichmentSuccess):
                return outcome, order.with_customer(outcome.customer)
            return outcome, order
        except Exception as e:
            log.exception("customer_enrichment_unexpected_error", order_id=order.order_id)
            return _unexpected(e, start), order

    def _report(self, order: Order, outcome: EnrichmentOutcome, span: ScopedSpan) -> None:
        t = self._telemetry
        ids = {"orderId": order.order_id, "customerId": order.customer_id}
        duration = outcome.duration_ms

        if isinstance(outcome, EnrichmentSuccess):
            t.record_event("CustomerEnrichmentSuccess", ids, {"enrichmentDuration": duration})
            t.record_metric(ENRICHMENT_DURATION_METRIC, duration, _metric_tags("success", "none"))
            span.succeed()
            span.add_event(
                "customer.enrichment.success",
                {"customer.name": outcome.customer.full_name, "duration.ms": f"{duration:.0f}"},
            )
            log.info(
                "customer_enrichment_succeeded",
                order_id=order.order_id,
                customer_id=order.customer_id,
                duration_ms=round(duration, 2),
            )
        elif isinstance(outcome, EnrichmentEmpty):
            # Metric says failure, span stays OK: an empty body is not a transport error.
            t.record_event("CustomerEnrichmentEmpty", ids, {"enrichmentDuration": duration})
            t.record_metric(ENRICHMENT_DURATION_METRIC, duration, _metric_tags("failure", "empty_response"))
            span.add_event("customer.enrichment.empty_response", {"duration.ms": f"{duration:.0f}"})
            span.succeed()
            log.warning(
                "customer_enrichment_empty",
                order_id=order.order_id,
                customer_id=order.customer_id,
            )
        else:
            kind = outcome.error_kind.value
            t.record_event("CustomerEnrichmentFailure", {**ids, "errorKind": kind}, {"enrichmentDuration": duration})
            t.record_metric(ENRICHMENT_DURATION_METRIC, duration, _metric_tags("failure", kind))
            t.record_exception(outcome.error, {**ids, "error.kind": kind}, span=span)
            span.fail(kind)
            log.warning(
                "customer_enrichment_failed",
                order_id=order.order_id,
                customer_id=order.customer_id,
                error_kind=kind,
            )


def _unexpected(error: Exception, start: float) -> EnrichmentFailure:
    wrapped = DependencyError(ErrorKind.unexpected_error, f"{type(error).__name__}: {error}")
    wrapped.__cause__ = error
    return EnrichmentFailure(
        error_kind=ErrorKind.unexpected_error,
        duration_ms=(perf_counter() - start) * 1000.0,
        error=wrapped,
    )


def _metric_tags(outcome: str, error_kind: str) -> dict[str, str]:
    return {"operation": "customer_enrichment", "outcome": outcome, "error.kind": error_kind}


# --- Module Notes -----------------------------------------------------------
# The orchestrator holds no per-request state; concurrent enrich() calls share only the
# client and the fanout.
