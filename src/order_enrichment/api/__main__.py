"""
order_enrichment.api.__main__

Entrypoint for running the service via `python -m order_enrichment.api`
(or the `order-enrichment` console script).

Responsibilities:
- Load settings and create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from order_enrichment.api.app import create_app
from order_enrichment.observability.logging import get_logger
from order_enrichment.settings import get_settings

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    log.info(
        "serving",
        host=settings.api_host,
        port=settings.api_port,
        customer_service=settings.customer_service_base_url,
        telemetry_export=settings.telemetry_export_enabled,
    )

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
