"""
order_enrichment.api.routers.customers

Customer API (the dependent service the order flow calls).

Responsibilities:
- `GET /api/customers/{customer_id}`: customer lookup.
- `GET /api/customers/health`: plain-text liveness marker.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from order_enrichment.api.deps import customer_service_dep, telemetry_dep
from order_enrichment.api.schemas import CustomerOut
from order_enrichment.errors import LookupErrorKind
from order_enrichment.observability.fanout import TelemetryFanout
from order_enrichment.services.customer_lookup_service import CustomerLookupService

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("/health", response_class=PlainTextResponse)
async def health(telemetry: TelemetryFanout = Depends(telemetry_dep)) -> str:
    telemetry.record_event("HealthCheck", {"service": "customer-service"})
    return "Customer Service is UP"


@router.get("/{customer_id}", response_model=CustomerOut)
async def get_customer(
    customer_id: str,
    service: CustomerLookupService = Depends(customer_service_dep),
) -> CustomerOut:
    result = await service.get(customer_id)
    if result.ok and result.value is not None:
        return CustomerOut.from_domain(result.value)

    kind = result.failure.kind if result.failure else LookupErrorKind.unexpected
    if kind is LookupErrorKind.validation:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid customer id")
    if kind is LookupErrorKind.not_found:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Customer not found")
    raise HTTPException(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail="Unexpected error")
