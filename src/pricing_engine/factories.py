"""Factory functions for building the pricing engine from settings."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import httpx

from pricing_core.interfaces.cache import CacheClient
from pricing_core.interfaces.geolocation import PositionProvider, StaticPositionProvider
from pricing_core.models.location import DeviceContext
from pricing_core.state import EngineState

if TYPE_CHECKING:
    from pricing_core.config.settings import Settings
    from pricing_engine.service import PricingService

Closer = Callable[[], Awaitable[None]]


def create_cache_client(settings: Settings) -> tuple[CacheClient, Closer | None]:
    """Create the key/value backend selected by ``settings.cache_backend``.

    Returns the client and an async closer for backends holding a connection.
    """
    if settings.cache_backend == "redis":
        from pricing_infra.cache.redis_cache import RedisCacheClient

        redis_cache = RedisCacheClient.from_url(settings.redis_url or "")
        return redis_cache, redis_cache.close

    if settings.cache_backend == "disk":
        from pricing_infra.cache.disk_cache import DiskCacheClient

        disk_cache = DiskCacheClient(settings.cache_dir)

        async def close_disk() -> None:
            disk_cache.close()

        return disk_cache, close_disk

    from pricing_infra.cache.memory_cache import MemoryCacheClient

    return MemoryCacheClient(), None


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared HTTP client for every outbound call the engine makes."""
    return httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        follow_redirects=True,
        headers={"Accept": "application/json"},
    )


def build_pricing_service(
    settings: Settings,
    *,
    cache: CacheClient | None = None,
    http: httpx.AsyncClient | None = None,
    device: DeviceContext | None = None,
    positions: PositionProvider | None = None,
) -> PricingService:
    """Wire a PricingService. Injected ``cache``/``http`` are not closed by the service."""
    from pricing_engine.calculator import PricingCalculator
    from pricing_engine.catalog import TierCatalog
    from pricing_engine.clients.exchange_rates import ExchangeRateClient
    from pricing_engine.clients.ip_geolocation import IPGeolocationClient
    from pricing_engine.clients.reverse_geocode import ReverseGeocodeClient
    from pricing_engine.clients.tier_catalog import TierCatalogClient
    from pricing_engine.converter import CurrencyConverter
    from pricing_engine.location.resolver import LocationResolver
    from pricing_engine.location.strategies import (
        DeviceGeolocationStrategy,
        IPGeolocationStrategy,
        LocaleStrategy,
        TimezoneStrategy,
    )
    from pricing_engine.rates.rate_store import RateStore
    from pricing_engine.service import PricingService
    from pricing_infra.cache.pricing_storage import PricingStorage

    closers: list[Closer] = []
    if http is None:
        http = create_http_client(settings)
        closers.append(http.aclose)
    if cache is None:
        cache, close_cache = create_cache_client(settings)
        if close_cache is not None:
            closers.append(close_cache)

    device = device or DeviceContext.from_environment()
    positions = positions or StaticPositionProvider(device.coordinates)

    state = EngineState()
    storage = PricingStorage(cache, ttl_days=settings.storage_ttl_days)
    rate_store = RateStore(
        state,
        storage,
        ExchangeRateClient(
            http,
            settings.fx_api_url,
            max_attempts=settings.fx_retry_max,
            wait_min=settings.fx_retry_wait_min,
            wait_max=settings.fx_retry_wait_max,
        ),
        ttl_hours=settings.rates_ttl_hours,
        retry_cooldown_minutes=settings.rates_retry_cooldown_minutes,
    )
    converter = CurrencyConverter(rate_store)

    token = settings.backend_api_token.get_secret_value() if settings.backend_api_token else None
    catalog = TierCatalog(TierCatalogClient(http, settings.backend_api_url, token))

    resolver = LocationResolver(
        [
            IPGeolocationStrategy(IPGeolocationClient(http), settings.ip_geolocation_providers),
            DeviceGeolocationStrategy(
                positions,
                ReverseGeocodeClient(http, settings.reverse_geocode_url),
                timeout_seconds=settings.geolocation_timeout_seconds,
            ),
            TimezoneStrategy(device),
            LocaleStrategy(device),
        ],
        fallback_currency=settings.default_currency,
    )

    return PricingService(
        settings,
        state=state,
        storage=storage,
        rate_store=rate_store,
        converter=converter,
        catalog=catalog,
        resolver=resolver,
        calculator=PricingCalculator(catalog, converter),
        closers=closers,
    )
