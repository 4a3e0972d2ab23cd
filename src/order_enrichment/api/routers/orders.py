"""
order_enrichment.api.routers.orders

Order API.

Responsibilities:
- `GET /api/orders/{order_id}`: enriched order lookup.
- `GET /api/orders/health`: plain-text liveness marker.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from order_enrichment.api.deps import order_service_dep, telemetry_dep
from order_enrichment.api.schemas import OrderOut
from order_enrichment.errors import LookupErrorKind
from order_enrichment.observability.fanout import TelemetryFanout
from order_enrichment.services.order_lookup_service import OrderLookupService

router = APIRouter(prefix="/api/orders", tags=["orders"])


# Registered before /{order_id} so "health" is never treated as an id.
@router.get("/health", response_class=PlainTextResponse)
async def health(telemetry: TelemetryFanout = Depends(telemetry_dep)) -> str:
    telemetry.record_event("HealthCheck", {"service": "order-service"})
    return "Order Service is UP"


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(
    order_id: str,
    service: OrderLookupService = Depends(order_service_dep),
) -> OrderOut:
    result = await service.get(order_id)
    if result.ok and result.value is not None:
        return OrderOut.from_domain(result.value)

    kind = result.failure.kind if result.failure else LookupErrorKind.unexpected
    if kind is LookupErrorKind.validation:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid order id")
    if kind is LookupErrorKind.not_found:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Order not found")
    raise HTTPException(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail="Unexpected error")
