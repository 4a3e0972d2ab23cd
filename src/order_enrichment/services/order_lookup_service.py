"""
order_enrichment.services.order_lookup_service

Order lookup entry point.

Responsibilities:
- Validate the order id and look the order up in its store.
- Own the top-level `order.processing` span and delegate enrichment to the orchestrator.
- Return typed results for validation/not-found; turn unexpected faults into an
  `unexpected` result only after the span is closed.
"""

from __future__ import annotations

from time import perf_counter

from order_enrichment.errors import LookupErrorKind, LookupResult
from order_enrichment.models import Order
from order_enrichment.observability.fanout import TelemetryFanout
from order_enrichment.observability.logging import get_logger
from order_enrichment.orchestrator.enrichment import EnrichmentOrchestrator
from order_enrichment.services.common import is_blank, record_duration
from order_enrichment.stores.record_store import RecordStore

log = get_logger(__name__)

ORDER_SPAN = "order.processing"
ORDER_DURATION_METRIC = "order.processing.duration"


class OrderLookupService:
    def __init__(
        self,
        *,
        orders: RecordStore[Order],
        orchestrator: EnrichmentOrchestrator,
        telemetry: TelemetryFanout,
    ) -> None:
        self._orders = orders
        self._orchestrator = orchestrator
        self._telemetry = telemetry

    async def get(self, order_id: str | None) -> LookupResult[Order]:
        t = self._telemetry
        log.info("order_lookup_requested", order_id=order_id)
        t.record_event("OrderRequest", {"orderId": order_id})

        if is_blank(order_id):
            log.warning("invalid_order_request", order_id=order_id)
            t.record_event("InvalidOrderRequest", {"orderId": order_id})
            return LookupResult.fail(LookupErrorKind.validation, "order id must not be blank")

        start = perf_counter()
        with t.span(ORDER_SPAN, {"order.id": order_id, "operation": "order_lookup"}) as span:
            try:
                order = await self._orders.lookup(order_id)
                if order is None:
                    log.warning("order_not_found", order_id=order_id)
                    t.record_event("OrderNotFound", {"orderId": order_id})
                    span.fail("order_not_found")
                    self._duration(start, "failure", "order_not_found")
                    return LookupResult.fail(LookupErrorKind.not_found, f"order {order_id} not found")

                t.record_event(
                    "OrderFound",
                    {"orderId": order_id, "customerId": order.customer_id, "status": order.status.value},
                    {"totalAmount": float(order.total_amount)},
                )
                span.add_event("order.found", {"order.id": order_id, "customer.id": order.customer_id})

                enriched = await self._orchestrator.enrich(order)

                span.succeed()
                self._duration(start, "success")
                log.info(
                    "order_lookup_completed",
                    order_id=order_id,
                    customer_id=order.customer_id,
                    enriched=enriched.customer is not None,
                    total_amount=str(enriched.total_amount),
                )
                return LookupResult.success(enriched)
            except Exception as e:
                log.exception("order_lookup_failed", order_id=order_id)
                t.record_exception(e, {"orderId": order_id}, span=span)
                span.fail(type(e).__name__)
                self._duration(start, "failure", "unexpected_error")
                return LookupResult.fail(LookupErrorKind.unexpected, f"{type(e).__name__}: {e}")

    def _duration(self, start: float, outcome: str, error_kind: str = "none") -> None:
        record_duration(
            self._telemetry,
            ORDER_DURATION_METRIC,
            operation="order_lookup",
            start=start,
            outcome=outcome,
            error_kind=error_kind,
        )


# --- Module Notes -----------------------------------------------------------
# Enrichment failures never reach this layer: a degraded order still ends the
# order.processing span in success.
