"""
order_enrichment.orchestrator

Enrichment orchestration package.

Responsibilities:
- Outcome variants produced by the customer client.
- The order -> customer enrichment flow and its degrade-on-failure policy.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Call sites should go through the service layer rather than driving the orchestrator directly.
