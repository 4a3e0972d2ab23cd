"""
order_enrichment.observability.sinks

Telemetry sink implementations.

Responsibilities:
- `TelemetrySink`: the capability contract every backend honors.
- `EventSink` (structlog), `MetricsSink` (prometheus_client), `TracingSink` (OpenTelemetry),
  `RecordingSink` (in-memory).
"""

from order_enrichment.observability.sinks.base import TelemetrySink
from order_enrichment.observability.sinks.events import EventSink
from order_enrichment.observability.sinks.metrics import MetricsSink
from order_enrichment.observability.sinks.recording import RecordingSink
from order_enrichment.observability.sinks.tracing import TracingSink

__all__ = ["EventSink", "MetricsSink", "RecordingSink", "TelemetrySink", "TracingSink"]
