"""
order_enrichment.observability

Observability package.

Responsibilities:
- Structured logging configuration and request context propagation.
- The telemetry sink contract, its implementations, and the fanout that drives them.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# New sinks plug in under `observability.sinks` without touching orchestration logic.
