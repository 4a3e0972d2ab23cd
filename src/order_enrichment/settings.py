"""
order_enrichment.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide the telemetry connection string from repr/logging.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    - Strict env-driven configuration (prefix `ORDER_SVC_`)
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="ORDER_SVC_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "order-service"
    service_version: str = "0.1.0"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Dependent customer service. The customer routes are hosted by this same app,
    # so the default points back at our own port.
    customer_service_base_url: str = "http://localhost:8080"
    customer_service_timeout_s: float = Field(default=2.0, gt=0)

    # Simulated backing-store round trips.
    order_store_latency_ms: int = Field(default=50, ge=0)
    customer_store_latency_ms: int = Field(default=200, ge=0)

    # When set, used as the OTLP collector endpoint; when unset tracing runs on no-op providers.
    telemetry_connection_string: str | None = Field(default=None, repr=False)
    metrics_export_interval_ms: int = Field(default=30_000, gt=0)

    @property
    def telemetry_export_enabled(self) -> bool:
        return bool(self.telemetry_connection_string and self.telemetry_connection_string.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other layer receives a Settings instance; nothing reads os.environ directly.
