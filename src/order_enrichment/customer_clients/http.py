"""
order_enrichment.customer_clients.http

HTTP client boundary used by the orchestrator to call the customer service.

Responsibilities:
- Fetch a customer by id over `GET /api/customers/{customer_id}`.
- Apply a bounded timeout to every call and measure its duration.
- Map every result, including transport failures, onto an EnrichmentOutcome (never raise).
"""

from __future__ import annotations

from datetime import datetime
from time import perf_counter
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from order_enrichment.errors import DependencyError, ErrorKind
from order_enrichment.models import Customer, CustomerStatus
from order_enrichment.observability.logging import get_logger
from order_enrichment.orchestrator.outcomes import (
    EnrichmentEmpty,
    EnrichmentFailure,
    EnrichmentOutcome,
    EnrichmentSuccess,
)

log = get_logger(__name__)


class CustomerPayload(BaseModel):
    """Wire shape of the customer service response."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(alias="customerId")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    status: CustomerStatus = CustomerStatus.active
    created_at: datetime | None = Field(default=None, alias="createdAt")

    def to_domain(self) -> Customer:
        kwargs = {}
        if self.created_at is not None:
            kwargs["created_at"] = self.created_at
        return Customer(
            customer_id=self.customer_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            status=self.status,
            **kwargs,
        )


class RemoteCustomerClient:
    """
    - `http` is a shared AsyncClient whose base_url points at the customer service.
    - `timeout_s` bounds each call; expiry maps to ErrorKind.timeout.
    """

    def __init__(self, *, http: httpx.AsyncClient, timeout_s: float) -> None:
        self._http = http
        self._timeout = httpx.Timeout(timeout_s)

    def url_for(self, customer_id: str) -> str:
        return f"/api/customers/{quote(customer_id, safe='')}"

    def absolute_url(self, customer_id: str) -> str:
        return str(self._http.base_url.join(self.url_for(customer_id)))

    async def fetch(self, customer_id: str) -> EnrichmentOutcome:
        start = perf_counter()
        try:
            response = await self._http.get(self.url_for(customer_id), timeout=self._timeout)
        except httpx.TimeoutException as e:
            return self._failure(ErrorKind.timeout, start, e)
        except httpx.TransportError as e:
            return self._failure(ErrorKind.connection_error, start, e)
        except Exception as e:
            return self._failure(ErrorKind.unexpected_error, start, e)

        try:
            return self._map_response(response, start)
        except Exception as e:
            return self._failure(ErrorKind.unexpected_error, start, e)

    def _map_response(self, response: httpx.Response, start: float) -> EnrichmentOutcome:
        if response.status_code == 404:
            return self._failure(ErrorKind.not_found, start, None, f"HTTP 404 from {response.url}")
        if response.is_error or not response.is_success:
            return self._failure(
                ErrorKind.http_error, start, None, f"HTTP {response.status_code} from {response.url}"
            )
        if response.status_code == 204 or not response.content.strip():
            return EnrichmentEmpty(duration_ms=_elapsed_ms(start))

        try:
            body = response.json()
        except ValueError as e:
            return self._failure(ErrorKind.invalid_payload, start, e)
        if not body:
            # JSON null or {}: the call succeeded but there is nothing to attach.
            return EnrichmentEmpty(duration_ms=_elapsed_ms(start))
        try:
            customer = CustomerPayload.model_validate(body).to_domain()
        except ValidationError as e:
            return self._failure(ErrorKind.invalid_payload, start, e)
        return EnrichmentSuccess(customer=customer, duration_ms=_elapsed_ms(start))

    def _failure(
        self,
        kind: ErrorKind,
        start: float,
        cause: BaseException | None,
        message: str | None = None,
    ) -> EnrichmentFailure:
        duration_ms = _elapsed_ms(start)
        detail = message or (f"{type(cause).__name__}: {cause}" if cause is not None else kind.value)
        error = DependencyError(kind, detail)
        if cause is not None:
            error.__cause__ = cause
        log.warning("customer_fetch_failed", error_kind=kind.value, detail=detail, duration_ms=duration_ms)
        return EnrichmentFailure(error_kind=kind, duration_ms=duration_ms, error=error)


def _elapsed_ms(start: float) -> float:
    return (perf_counter() - start) * 1000.0


# --- Module Notes -----------------------------------------------------------
# No retries here; a retrying transport can be injected through the AsyncClient.
