"""
order_enrichment.customer_clients

Customer service client package.

Responsibilities:
- Provide the client boundary used by the orchestrator to fetch customers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The orchestrator depends on this boundary, not on HTTP details.
