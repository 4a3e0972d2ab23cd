"""
order_enrichment.api.schemas

Wire schemas for the public API.

Responsibilities:
- Render Order and Customer records as camelCase JSON.
- Keep amounts exact until the final JSON number and format dates as `YYYY-MM-DDTHH:MM:SS`.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from order_enrichment.models import Customer, Order

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class CustomerOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(serialization_alias="customerId")
    first_name: str = Field(serialization_alias="firstName")
    last_name: str = Field(serialization_alias="lastName")
    email: str
    status: str
    created_at: datetime = Field(serialization_alias="createdAt")

    @field_serializer("created_at")
    def _fmt_created_at(self, value: datetime) -> str:
        return value.strftime(DATE_FORMAT)

    @classmethod
    def from_domain(cls, customer: Customer) -> CustomerOut:
        return cls(
            customer_id=customer.customer_id,
            first_name=customer.first_name,
            last_name=customer.last_name,
            email=customer.email,
            status=customer.status.value,
            created_at=customer.created_at,
        )


class OrderOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(serialization_alias="orderId")
    customer_id: str = Field(serialization_alias="customerId")
    product_name: str = Field(serialization_alias="productName")
    quantity: int
    unit_price: Decimal = Field(serialization_alias="unitPrice")
    total_amount: Decimal = Field(serialization_alias="totalAmount")
    status: str
    order_date: datetime = Field(serialization_alias="orderDate")
    customer: CustomerOut | None = None

    @field_serializer("unit_price", "total_amount")
    def _fmt_amount(self, value: Decimal) -> float:
        return float(value)

    @field_serializer("order_date")
    def _fmt_order_date(self, value: datetime) -> str:
        return value.strftime(DATE_FORMAT)

    @classmethod
    def from_domain(cls, order: Order) -> OrderOut:
        return cls(
            order_id=order.order_id,
            customer_id=order.customer_id,
            product_name=order.product_name,
            quantity=order.quantity,
            unit_price=order.unit_price,
            total_amount=order.total_amount,
            status=order.status.value,
            order_date=order.order_date,
            customer=CustomerOut.from_domain(order.customer) if order.customer is not None else None,
        )


# --- Module Notes -----------------------------------------------------------
# The customer client parses the same CustomerOut shape back (see customer_clients.http).
