"""
order_enrichment.stores

Read-only record stores.

Responsibilities:
- Provide immutable id -> record lookups with simulated backing-store latency.
- Hold the seed data loaded at startup.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on RecordStore, never on the seed module directly.
