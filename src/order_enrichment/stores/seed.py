"""
order_enrichment.stores.seed

Seed data for the in-memory stores.

Responsibilities:
- Build the demo orders and customers served by the API.
- Wrap them in RecordStores configured from Settings.
"""

from __future__ import annotations

from decimal import Decimal

from order_enrichment.models import Customer, CustomerStatus, Order
from order_enrichment.settings import Settings
from order_enrichment.stores.record_store import RecordStore


def seed_orders() -> list[Order]:
    return [
        Order("ORD-001", "123", "Laptop Computer", 1, Decimal("999.99")),
        Order("ORD-002", "456", "Wireless Mouse", 2, Decimal("29.99")),
        Order("ORD-003", "789", "USB-C Cable", 3, Decimal("19.99")),
        Order("ORD-004", "999", "External Monitor", 1, Decimal("299.99")),
        Order("ORD-005", "123", "Mechanical Keyboard", 1, Decimal("149.99")),
    ]


def seed_customers() -> list[Customer]:
    return [
        Customer("123", "John", "Doe", "john.doe@example.com", CustomerStatus.active),
        Customer("456", "Jane", "Smith", "jane.smith@example.com", CustomerStatus.active),
        Customer("789", "Bob", "Johnson", "bob.johnson@example.com", CustomerStatus.inactive),
        Customer("999", "Alice", "Williams", "alice.williams@example.com", CustomerStatus.suspended),
    ]


def build_order_store(settings: Settings) -> RecordStore[Order]:
    return RecordStore.from_records(
        name="orders",
        records=seed_orders(),
        key=lambda o: o.order_id,
        latency_ms=settings.order_store_latency_ms,
    )


def build_customer_store(settings: Settings) -> RecordStore[Customer]:
    return RecordStore.from_records(
        name="customers",
        records=seed_customers(),
        key=lambda c: c.customer_id,
        latency_ms=settings.customer_store_latency_ms,
    )


# --- Module Notes -----------------------------------------------------------
# Tests build their own stores; this module only feeds the running app.
