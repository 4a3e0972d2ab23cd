"""
order_enrichment.api

HTTP API package.

Responsibilities:
- FastAPI app factory, dependency wiring, routers and wire schemas.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: they translate LookupResult values into HTTP responses.
