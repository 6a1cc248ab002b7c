"""
Exporter settings.

Configuration loaded from environment variables and an optional .env file.
"""
from datetime import timedelta
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Town hall queue exporter configuration."""

    # Application settings
    app_name: str = "townhall-exporter"

    # Source page
    source_url: str = "https://erlangen.de/themenseite/service/buerger/aktuelle-wartezeit"
    block_selector: str = ".fr-view"
    value_selector: str = ".flex>span"
    block_marker: str = "Wartende Personen"
    waiting_time_suffix: str = " Minuten"
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = "townhall-exporter/1.0 (+https://prometheus.io)"

    # Metrics endpoint
    host: str = "localhost"
    port: int = Field(default=12080, ge=0, le=65535)
    metrics_path: str = "/metrics"
    read_timeout_ms: int = Field(default=500, gt=0)
    metric_prefix: str = "erth"
    expose_internal_metrics: bool = False

    # Cache
    cache_ttl_seconds: float = Field(default=30.0, ge=0)

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cache_ttl(self) -> timedelta:
        """Cache time-to-live as a timedelta."""
        return timedelta(seconds=self.cache_ttl_seconds)

    @property
    def read_timeout(self) -> float:
        """Request-line read timeout in seconds."""
        return self.read_timeout_ms / 1000

    @property
    def json_logs(self) -> bool:
        """Whether logs are emitted as JSON lines."""
        return self.log_format.lower() == "json"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance.
    """
    return Settings()
