"""RateStore: USD exchange-rate table with a 24h freshness window.

The in-memory table starts from compiled-in approximate rates so prices can
always be rendered. ``refresh_if_stale`` first adopts any persisted snapshot,
then fetches a new table when that snapshot is missing or older than the TTL.
A failed fetch leaves both the in-memory and the persisted snapshot untouched.
Storage errors are logged; the in-memory table stays authoritative.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx
import structlog

from pricing_core.constants import BASE_CURRENCY, SUPPORTED_CURRENCIES
from pricing_core.exceptions import RateFetchError
from pricing_core.models.currency import RateSnapshot
from pricing_core.state import EngineState
from pricing_engine.clients.exchange_rates import ExchangeRateClient
from pricing_infra.cache.pricing_storage import PricingStorage

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RateStore:
    """Owns the rate fields of EngineState."""

    def __init__(
        self,
        state: EngineState,
        storage: PricingStorage,
        fx_client: ExchangeRateClient,
        *,
        ttl_hours: int = 24,
        retry_cooldown_minutes: int = 30,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize with session state, persistence, and the FX client."""
        self._state = state
        self._storage = storage
        self._fx_client = fx_client
        self._ttl_hours = ttl_hours
        self._retry_cooldown = timedelta(minutes=retry_cooldown_minutes)
        self._clock = clock

    def is_supported(self, code: str) -> bool:
        """True if ``code`` is one of the engine's currencies."""
        return code.upper() in SUPPORTED_CURRENCIES

    def get_rate(self, code: str) -> float | None:
        """Units of ``code`` per 1 USD, or None for unsupported codes."""
        code = code.upper()
        if code == BASE_CURRENCY:
            return 1.0
        return self._state.rates.get(code)

    def snapshot(self) -> RateSnapshot:
        """Return a copy of the current rate table."""
        return self._state.snapshot()

    def is_stale(self, now: datetime | None = None) -> bool:
        """True if the in-memory snapshot needs a refresh."""
        return self.snapshot().is_stale(now or self._clock(), self._ttl_hours)

    async def refresh_if_stale(self, now: datetime | None = None) -> bool:
        """Fetch a new table if the current one is stale. Never raises.

        Returns True only when a fetch succeeded during this call.
        """
        now = now or self._clock()
        await self._load_persisted()

        if not self.is_stale(now):
            return False
        last_attempt = self._state.last_refresh_attempt_at
        if last_attempt is not None and now - last_attempt < self._retry_cooldown:
            logger.debug("rates_refresh_cooling_down", last_attempt=last_attempt.isoformat())
            return False

        self._state.last_refresh_attempt_at = now
        try:
            fetched = await self._fx_client.fetch_rates()
        except (httpx.HTTPError, RateFetchError) as e:
            logger.warning(
                "rates_refresh_failed",
                error_type=type(e).__name__,
                error=str(e),
                snapshot_age_from=(
                    self._state.rates_fetched_at.isoformat()
                    if self._state.rates_fetched_at
                    else None
                ),
            )
            return False

        updated = self._merge(fetched)
        self._state.rates_fetched_at = now
        try:
            await self._storage.set_rate_snapshot(self.snapshot())
        except Exception as e:
            logger.warning("rates_persist_failed", error_type=type(e).__name__, error=str(e))
        logger.info("rates_refreshed", currencies=updated, fetched_at=now.isoformat())
        return True

    async def _load_persisted(self) -> None:
        """Adopt the persisted snapshot once per session."""
        if self._state.rates_loaded:
            return
        self._state.rates_loaded = True
        try:
            persisted = await self._storage.get_rate_snapshot()
        except Exception as e:
            logger.warning("rates_load_failed", error_type=type(e).__name__, error=str(e))
            return
        if persisted is None:
            return
        self._merge(persisted.rates)
        self._state.rates_fetched_at = persisted.fetched_at
        logger.debug(
            "rates_loaded_from_storage",
            fetched_at=persisted.fetched_at.isoformat() if persisted.fetched_at else None,
        )

    def _merge(self, rates: dict[str, float]) -> int:
        """Overwrite supported, positive rates; USD stays 1. Returns the count updated."""
        updated = 0
        for code, rate in rates.items():
            code = code.upper()
            if code in SUPPORTED_CURRENCIES and code != BASE_CURRENCY and rate > 0:
                self._state.rates[code] = float(rate)
                updated += 1
        self._state.rates[BASE_CURRENCY] = 1.0
        return updated
