"""
order_enrichment.api.routers.metrics

Prometheus scrape endpoint.

Responsibilities:
- Serve the metrics sink registry as text exposition on `/metrics`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.status import HTTP_404_NOT_FOUND

from order_enrichment.api.deps import metrics_sink_dep
from order_enrichment.observability.sinks import MetricsSink

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics(sink: MetricsSink | None = Depends(metrics_sink_dep)) -> Response:
    # Prometheus scrape endpoint for the app's private registry.
    if sink is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="metrics sink not configured")
    return Response(content=sink.exposition(), media_type=CONTENT_TYPE_LATEST)


# --- Module Notes -----------------------------------------------------------
# Returns 404 when the app was built without a MetricsSink.
