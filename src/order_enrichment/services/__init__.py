"""
order_enrichment.services

Service-layer package.

Responsibilities:
- Request-scoped lookup entry points for orders and customers.
- Own the top-level telemetry span of each request.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with fake clients/stores.
