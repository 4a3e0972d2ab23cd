"""
order_enrichment.observability.providers

Telemetry provider and sink construction.

Responsibilities:
- Build OpenTelemetry tracer/meter providers with OTLP exporters when a telemetry
  connection string is configured, and no-op providers otherwise.
- Assemble the default sink set (events, metrics, tracing) for the app.
"""

from __future__ import annotations

from dataclasses import dataclass

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry

from order_enrichment.observability.logging import get_logger
from order_enrichment.observability.sinks import EventSink, MetricsSink, TelemetrySink, TracingSink
from order_enrichment.settings import Settings

log = get_logger(__name__)


@dataclass(slots=True)
class TelemetryProviders:
    """
    Holds the SDK providers for this app instance.

    Providers are never registered as the process-wide OTel globals; sinks receive
    their tracer and meter explicitly.
    """

    instrumentation_name: str
    tracer_provider: TracerProvider | None = None
    meter_provider: MeterProvider | None = None

    def tracer(self) -> trace.Tracer:
        if self.tracer_provider is None:
            return trace.NoOpTracer()
        return self.tracer_provider.get_tracer(self.instrumentation_name)

    def meter(self) -> metrics.Meter:
        if self.meter_provider is None:
            return metrics.NoOpMeter(self.instrumentation_name)
        return self.meter_provider.get_meter(self.instrumentation_name)

    def shutdown(self) -> None:
        if self.tracer_provider is not None:
            self.tracer_provider.shutdown()
        if self.meter_provider is not None:
            self.meter_provider.shutdown()


def create_resource(settings: Settings) -> Resource:
    return Resource(
        attributes={
            SERVICE_NAME: settings.service_name,
            SERVICE_VERSION: settings.service_version,
            DEPLOYMENT_ENVIRONMENT: settings.env,
        }
    )


def build_providers(settings: Settings) -> TelemetryProviders:
    if not settings.telemetry_export_enabled:
        log.info("telemetry_export_disabled")
        return TelemetryProviders(instrumentation_name=settings.service_name)

    endpoint = (settings.telemetry_connection_string or "").strip()
    insecure = not endpoint.startswith("https://")
    resource = create_resource(settings)

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=insecure))
    )

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=endpoint, insecure=insecure),
        export_interval_millis=settings.metrics_export_interval_ms,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])

    log.info("telemetry_export_enabled", endpoint=endpoint)
    return TelemetryProviders(
        instrumentation_name=settings.service_name,
        tracer_provider=tracer_provider,
        meter_provider=meter_provider,
    )


def build_sinks(
    providers: TelemetryProviders,
    *,
    registry: CollectorRegistry | None = None,
) -> list[TelemetrySink]:
    return [
        EventSink(),
        MetricsSink(registry=registry),
        TracingSink(tracer=providers.tracer(), meter=providers.meter()),
    ]


# --- Module Notes -----------------------------------------------------------
# Exporters push in the background (batch processor / periodic reader); an unreachable
# collector drops telemetry but never blocks or fails a request.
