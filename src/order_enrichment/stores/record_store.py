"""
order_enrichment.stores.record_store

Immutable key -> record store.

Responsibilities:
- Serve lookups with a configurable simulated round-trip delay.
- Guarantee no mutation after construction (safe for concurrent readers).
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Callable, Generic, TypeVar

from order_enrichment.observability.logging import get_logger

R = TypeVar("R")

log = get_logger(__name__)


class RecordStore(Generic[R]):
    def __init__(self, *, name: str, records: Mapping[str, R], latency_ms: int = 0) -> None:
        if latency_ms < 0:
            raise ValueError("latency_ms must be >= 0")
        self._name = name
        # Copy then freeze: later changes to the caller's mapping cannot leak in.
        self._records: Mapping[str, R] = MappingProxyType(dict(records))
        self._latency_s = latency_ms / 1000.0

    @classmethod
    def from_records(
        cls,
        *,
        name: str,
        records: Iterable[R],
        key: Callable[[R], str],
        latency_ms: int = 0,
    ) -> RecordStore[R]:
        return cls(name=name, records={key(r): r for r in records}, latency_ms=latency_ms)

    @property
    def name(self) -> str:
        return self._name

    async def lookup(self, record_id: str) -> R | None:
        if self._latency_s:
            await asyncio.sleep(self._latency_s)
        record = self._records.get(record_id)
        log.debug("store_lookup", store=self._name, record_id=record_id, hit=record is not None)
        return record

    def ids(self) -> list[str]:
        return sorted(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)


# --- Module Notes -----------------------------------------------------------
# Lookups never raise for a missing key; callers decide what "not found" means.
