"""
order_enrichment.models

Domain records served by the lookup APIs.

Responsibilities:
- Define immutable Order and Customer records and their status enums.
- Enforce the Order amount invariant (`total_amount = unit_price * quantity`).
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


def _now() -> datetime:
    # Whole seconds: the wire format has no sub-second component.
    return datetime.now().replace(microsecond=0)


class OrderStatus(enum.StrEnum):
    pending = "PENDING"
    confirmed = "CONFIRMED"
    shipped = "SHIPPED"
    delivered = "DELIVERED"
    cancelled = "CANCELLED"


class CustomerStatus(enum.StrEnum):
    active = "ACTIVE"
    inactive = "INACTIVE"
    suspended = "SUSPENDED"


@dataclass(frozen=True, slots=True)
class Customer:
    customer_id: str
    first_name: str
    last_name: str
    email: str
    status: CustomerStatus = CustomerStatus.active
    created_at: datetime = field(default_factory=_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True, slots=True)
class Order:
    """
    A customer order.

    `total_amount` is derived once from `unit_price` and `quantity` and cannot be
    passed in. `customer` stays None until enrichment attaches one via `with_customer`.
    """

    order_id: str
    customer_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    status: OrderStatus = OrderStatus.pending
    order_date: datetime = field(default_factory=_now)
    customer: Customer | None = None
    total_amount: Decimal = field(init=False)

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError(f"quantity must be a positive integer, got {self.quantity!r}")
        unit_price = Decimal(str(self.unit_price))
        if unit_price < 0:
            raise ValueError(f"unit_price must be non-negative, got {unit_price}")
        object.__setattr__(self, "unit_price", unit_price)
        object.__setattr__(self, "total_amount", unit_price * self.quantity)

    def with_customer(self, customer: Customer) -> Order:
        # Customer is frozen; replace() gives the order its own copy of the reference holder.
        return dataclasses.replace(self, customer=dataclasses.replace(customer))


# --- Module Notes -----------------------------------------------------------
# Records are frozen; the seed module creates them once and nothing mutates them afterwards.
