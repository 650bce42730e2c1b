"""Application settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pricing_core.constants import DEFAULT_COMPARISON_CURRENCIES, SUPPORTED_CURRENCIES


class Settings(BaseSettings):
    """Central configuration for job-hunter-pricing."""

    model_config = SettingsConfigDict(env_prefix="JHP_", env_file=".env")

    # --- Exchange rates ---
    fx_api_url: str = Field(
        default="https://api.exchangerate-api.com/v4/latest/USD",
        description="FX rate endpoint returning {rates: {CODE: float}} for base USD",
    )
    rates_ttl_hours: int = Field(
        default=24,
        description="Age after which the rate snapshot is refreshed",
    )
    rates_retry_cooldown_minutes: int = Field(
        default=30,
        description="Minimum wait before retrying a failed rate refresh",
    )
    fx_retry_max: int = Field(
        default=3,
        description="Maximum attempts per FX fetch",
    )
    fx_retry_wait_min: float = Field(
        default=1.0,
        description="Minimum retry wait in seconds",
    )
    fx_retry_wait_max: float = Field(
        default=10.0,
        description="Maximum retry wait in seconds",
    )

    # --- Geolocation ---
    ip_geolocation_providers: list[str] = Field(
        default=[
            "https://ipapi.co/json/",
            "https://freegeoip.app/json/",
            "https://ipwhois.app/json/",
        ],
        description="IP geolocation endpoints, tried in order",
    )
    reverse_geocode_url: str = Field(
        default="https://api.bigdatacloud.net/data/reverse-geocode-client",
        description="Reverse geocoding endpoint (latitude/longitude -> countryCode)",
    )
    geolocation_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound on waiting for device coordinates",
    )

    # --- HTTP ---
    http_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout per outbound HTTP request in seconds",
    )

    # --- Backend ---
    backend_api_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the job-automation backend",
    )
    backend_api_token: SecretStr | None = Field(
        default=None,
        description="Bearer token for the backend tier endpoint",
    )

    # --- Cache ---
    cache_backend: Literal["memory", "disk", "redis"] = Field(
        default="memory",
        description="Key/value backend: 'memory' per process, 'disk' or 'redis' persistent",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/job_hunter_pricing"),
        description="Directory for diskcache persistent cache",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis URL (required if cache_backend=redis)",
    )
    storage_ttl_days: int = Field(
        default=365,
        description="TTL for persisted preferences and rate snapshots",
    )

    # --- Pricing ---
    default_currency: str = Field(
        default="USD",
        description="Currency used when no preference or detection is available",
    )
    comparison_currencies: list[str] = Field(
        default=list(DEFAULT_COMPARISON_CURRENCIES),
        description="Currencies shown in 'price in other currencies' displays",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )

    @model_validator(mode="after")
    def validate_currency_config(self) -> Settings:
        """Normalize currency codes and reject unsupported defaults."""
        self.default_currency = self.default_currency.upper()
        if self.default_currency not in SUPPORTED_CURRENCIES:
            msg = f"default_currency {self.default_currency!r} is not supported"
            raise ValueError(msg)
        self.comparison_currencies = [c.upper() for c in self.comparison_currencies]
        return self

    @model_validator(mode="after")
    def validate_cache_config(self) -> Settings:
        """Validate cache backend and TTL configuration."""
        if self.cache_backend == "redis" and not self.redis_url:
            msg = "redis_url required when cache_backend=redis"
            raise ValueError(msg)
        if self.rates_ttl_hours <= 0 or self.storage_ttl_days <= 0:
            msg = "rates_ttl_hours and storage_ttl_days must be positive"
            raise ValueError(msg)
        return self
