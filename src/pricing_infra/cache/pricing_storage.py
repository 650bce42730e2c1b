"""Typed access to the persisted pricing keys on top of a CacheClient."""

from __future__ import annotations

import json
from datetime import datetime

import structlog
from pydantic import ValidationError

from pricing_core.constants import (
    EXCHANGE_RATES_KEY,
    EXCHANGE_RATES_UPDATED_KEY,
    USER_CURRENCY_KEY,
    USER_LOCATION_KEY,
)
from pricing_core.interfaces.cache import CacheClient
from pricing_core.models.currency import RateSnapshot
from pricing_core.models.location import LocationSignal

logger = structlog.get_logger()


class PricingStorage:
    """Reads and writes the four logical keys: location, user currency, rates, rates timestamp.

    Entries are regenerable, so a corrupt entry is logged and treated as absent.
    """

    def __init__(self, cache: CacheClient, ttl_days: int = 365) -> None:
        """Initialize with a CacheClient implementation."""
        self._cache = cache
        self._ttl_seconds = ttl_days * 86400

    # --- Location ---

    async def get_location(self) -> LocationSignal | None:
        """Return the last detected location, if any."""
        raw = await self._cache.get(USER_LOCATION_KEY)
        if raw is None:
            return None
        try:
            return LocationSignal.model_validate_json(raw)
        except ValidationError:
            logger.warning("stored_location_invalid", key=USER_LOCATION_KEY)
            return None

    async def set_location(self, location: LocationSignal) -> None:
        """Persist a detected location."""
        await self._cache.set(
            USER_LOCATION_KEY, location.model_dump_json(), ttl_seconds=self._ttl_seconds
        )

    async def clear_location(self) -> None:
        """Forget the detected location so the next detection re-runs the cascade."""
        await self._cache.delete(USER_LOCATION_KEY)

    # --- User currency ---

    async def get_user_currency(self) -> str | None:
        """Return the visitor's explicit currency choice, if any."""
        return await self._cache.get(USER_CURRENCY_KEY)

    async def set_user_currency(self, code: str) -> None:
        """Persist the visitor's explicit currency choice."""
        await self._cache.set(USER_CURRENCY_KEY, code, ttl_seconds=self._ttl_seconds)

    async def clear_user_currency(self) -> None:
        """Remove the visitor's explicit currency choice."""
        await self._cache.delete(USER_CURRENCY_KEY)

    # --- Rate snapshot ---

    async def get_rate_snapshot(self) -> RateSnapshot | None:
        """Return the persisted rate table and its timestamp, if both are readable."""
        raw_rates = await self._cache.get(EXCHANGE_RATES_KEY)
        if raw_rates is None:
            return None
        raw_updated = await self._cache.get(EXCHANGE_RATES_UPDATED_KEY)
        try:
            rates = json.loads(raw_rates)
            fetched_at = datetime.fromisoformat(raw_updated) if raw_updated else None
            return RateSnapshot(rates=rates, fetched_at=fetched_at)
        except (ValueError, ValidationError):
            logger.warning("stored_rates_invalid", key=EXCHANGE_RATES_KEY)
            return None

    async def set_rate_snapshot(self, snapshot: RateSnapshot) -> None:
        """Persist a rate table and its timestamp (two independent overwrites)."""
        await self._cache.set(
            EXCHANGE_RATES_KEY, json.dumps(snapshot.rates), ttl_seconds=self._ttl_seconds
        )
        if snapshot.fetched_at is not None:
            await self._cache.set(
                EXCHANGE_RATES_UPDATED_KEY,
                snapshot.fetched_at.isoformat(),
                ttl_seconds=self._ttl_seconds,
            )
