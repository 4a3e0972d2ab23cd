"""
order_enrichment.services.customer_lookup_service

Customer lookup entry point (backs the customer service API).

Responsibilities:
- Validate the customer id and look the customer up in its store.
- Emit the request/invalid/found/not-found signal set inside a `customer.lookup` span.
- Record the store round trip as a `customer-db` dependency.
"""

from __future__ import annotations

from time import perf_counter

from order_enrichment.errors import LookupErrorKind, LookupResult
from order_enrichment.models import Customer
from order_enrichment.observability.fanout import TelemetryFanout
from order_enrichment.observability.logging import get_logger
from order_enrichment.services.common import is_blank, record_duration
from order_enrichment.stores.record_store import RecordStore

log = get_logger(__name__)

CUSTOMER_SPAN = "customer.lookup"
CUSTOMER_DURATION_METRIC = "customer.lookup.duration"
CUSTOMER_DB = "customer-db"


class CustomerLookupService:
    def __init__(self, *, customers: RecordStore[Customer], telemetry: TelemetryFanout) -> None:
        self._customers = customers
        self._telemetry = telemetry

    async def get(self, customer_id: str | None) -> LookupResult[Customer]:
        t = self._telemetry
        t.record_event("CustomerRequest", {"customerId": customer_id})

        if is_blank(customer_id):
            log.warning("invalid_customer_request", customer_id=customer_id)
            t.record_event("InvalidCustomerRequest", {"customerId": customer_id})
            return LookupResult.fail(LookupErrorKind.validation, "customer id must not be blank")

        start = perf_counter()
        with t.span(CUSTOMER_SPAN, {"customer.id": customer_id, "operation": "customer_lookup"}) as span:
            lookup_start = perf_counter()
            try:
                customer = await self._customers.lookup(customer_id)
                t.record_dependency("Database", CUSTOMER_DB, _ms_since(lookup_start), success=True)
            except Exception as e:
                t.record_dependency("Database", CUSTOMER_DB, _ms_since(lookup_start), success=False)
                log.exception("customer_lookup_failed", customer_id=customer_id)
                t.record_exception(e, {"customerId": customer_id}, span=span)
                span.fail(type(e).__name__)
                self._duration(start, "failure", "unexpected_error")
                return LookupResult.fail(LookupErrorKind.unexpected, f"{type(e).__name__}: {e}")

            if customer is None:
                log.warning("customer_not_found", customer_id=customer_id)
                t.record_event("CustomerNotFound", {"customerId": customer_id})
                span.fail("customer_not_found")
                self._duration(start, "failure", "customer_not_found")
                return LookupResult.fail(LookupErrorKind.not_found, f"customer {customer_id} not found")

            t.record_event(
                "CustomerFound",
                {"customerId": customer_id, "customerStatus": customer.status.value},
            )
            span.add_event("customer.found", {"customer.id": customer_id})
            span.succeed()
            self._duration(start, "success")
            log.info("customer_lookup_completed", customer_id=customer_id)
            return LookupResult.success(customer)

    def _duration(self, start: float, outcome: str, error_kind: str = "none") -> None:
        record_duration(
            self._telemetry,
            CUSTOMER_DURATION_METRIC,
            operation="customer_lookup",
            start=start,
            outcome=outcome,
            error_kind=error_kind,
        )


def _ms_since(start: float) -> float:
    return (perf_counter() - start) * 1000.0


# --- Module Notes -----------------------------------------------------------
# The store latency stands in for the customer database round trip.
