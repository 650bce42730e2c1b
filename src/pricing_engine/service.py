"""PricingService: the facade hosts call into.

Owns the session's EngineState and wires the rate store, detection cascade,
catalog and calculator together. Every public call degrades instead of
raising: detection falls back to the default currency, rate refresh keeps the
previous table, and catalog loads keep the current catalog.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import TypeVar

import structlog

from pricing_core.config.settings import Settings
from pricing_core.constants import BASE_CURRENCY
from pricing_core.models.currency import CurrencyInfo, RateSnapshot
from pricing_core.models.location import DetectionResult, DetectionSource, LocationSignal
from pricing_core.models.plan import (
    AnnualSavings,
    CostBreakdown,
    CurrencyQuote,
    FeatureRow,
    FeatureUsage,
    LocalizedPlan,
    TierRecommendation,
)
from pricing_core.models.tier import BillingCycle, SubscriptionTier
from pricing_core.state import EngineState
from pricing_engine.calculator import PricingCalculator
from pricing_engine.catalog import TierCatalog
from pricing_engine.converter import CurrencyConverter
from pricing_engine.location.mapping import currency_for_country
from pricing_engine.location.resolver import LocationResolver
from pricing_engine.observability import bind_session_context, clear_session_context
from pricing_engine.rates.rate_store import RateStore
from pricing_infra.cache.pricing_storage import PricingStorage

logger = structlog.get_logger()

_PERSISTED_SOURCES = (DetectionSource.IP_GEOLOCATION, DetectionSource.DEVICE_GEOLOCATION)

_T = TypeVar("_T")


class PricingService:
    """Session-scoped entry point for currency detection and localized pricing."""

    def __init__(
        self,
        settings: Settings,
        *,
        state: EngineState,
        storage: PricingStorage,
        rate_store: RateStore,
        converter: CurrencyConverter,
        catalog: TierCatalog,
        resolver: LocationResolver,
        calculator: PricingCalculator,
        closers: Iterable[Callable[[], Awaitable[None]]] = (),
    ) -> None:
        """Initialize with pre-built components; see ``build_pricing_service``."""
        self.settings = settings
        self._state = state
        self._storage = storage
        self._rates = rate_store
        self._converter = converter
        self._catalog = catalog
        self._resolver = resolver
        self._calculator = calculator
        self._closers = list(closers)
        self.session_id = uuid.uuid4().hex[:12]

    @property
    def catalog(self) -> TierCatalog:
        """The session's tier catalog."""
        return self._catalog

    # --- Lifecycle ---

    async def initialize(self) -> DetectionResult:
        """Start the session: refresh stale rates, load the remote catalog, detect once.

        Binds ``session_id`` to every log entry until ``aclose``.
        """
        bind_session_context(self.session_id)
        await self._rates.refresh_if_stale()
        await self._catalog.load_remote()
        return await self.detect_user_currency()

    async def aclose(self) -> None:
        """Release owned resources (HTTP client, cache connections)."""
        task = self._state.detection_task
        if task is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)
        for close in self._closers:
            await close()
        self._closers.clear()
        clear_session_context()

    # --- Detection & preference ---

    async def detect_user_currency(self) -> DetectionResult:
        """Return the visitor's currency. Never raises.

        The result is kept for the session until the explicit choice changes.
        Concurrent callers share one in-flight detection; a caller that is
        cancelled stops waiting without cancelling it for the others.
        """
        task = self._state.detection_task
        if task is None:
            task = asyncio.create_task(self._detect())
            self._state.detection_task = task
        return await asyncio.shield(task)

    async def _detect(self) -> DetectionResult:
        try:
            override = await self._read_storage(self._storage.get_user_currency, "user_currency")
            if override and self._rates.is_supported(override):
                return DetectionResult(
                    currency=override.upper(),
                    source=DetectionSource.USER_PREFERENCE,
                    location=self._state.location,
                )

            cached = self._state.location or await self._read_storage(
                self._storage.get_location, "location"
            )
            if cached is not None:
                self._state.location = cached
                currency = cached.currency or currency_for_country(cached.country_code)
                return DetectionResult(
                    currency=self._supported_or_default(currency),
                    source=DetectionSource.CACHED_LOCATION,
                    location=cached,
                )

            result = await self._resolver.resolve()
            if result.location is not None and result.source in _PERSISTED_SOURCES:
                self._state.location = result.location
                try:
                    await self._storage.set_location(result.location)
                except Exception as e:
                    logger.warning(
                        "location_persist_failed", error_type=type(e).__name__, error=str(e)
                    )
            currency = self._supported_or_default(result.currency)
            if currency != result.currency:
                result = result.model_copy(update={"currency": currency})
            return result
        except Exception as e:
            logger.error(
                "currency_detection_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return DetectionResult(
                currency=self.settings.default_currency, source=DetectionSource.FALLBACK
            )

    @staticmethod
    async def _read_storage(read: Callable[[], Awaitable[_T]], key: str) -> _T | None:
        """Stored value, or None if the backend fails; detection then continues."""
        try:
            return await read()
        except Exception as e:
            logger.warning(
                "storage_read_failed", key=key, error_type=type(e).__name__, error=str(e)
            )
            return None

    def _supported_or_default(self, currency: str) -> str:
        currency = currency.upper()
        return currency if self._rates.is_supported(currency) else self.settings.default_currency

    async def set_user_currency(self, code: str) -> bool:
        """Persist an explicit currency choice; False for unsupported codes."""
        code = code.upper()
        if not self._rates.is_supported(code):
            logger.warning("user_currency_unsupported", currency=code)
            return False
        await self._storage.set_user_currency(code)
        self._state.detection_task = None
        logger.info("user_currency_set", currency=code)
        return True

    async def get_user_currency(self) -> str:
        """The explicit choice if one was made, else the configured default."""
        stored = await self._storage.get_user_currency()
        if stored and self._rates.is_supported(stored):
            return stored.upper()
        return self.settings.default_currency

    async def clear_user_currency(self) -> None:
        """Forget the explicit choice so detection runs again."""
        await self._storage.clear_user_currency()
        self._state.detection_task = None

    def location(self) -> LocationSignal | None:
        """Location detected (or restored) during this session, if any."""
        return self._state.location

    # --- Rates & formatting ---

    async def refresh_rates(self) -> bool:
        """Refresh the rate table if it is stale; True if a fetch succeeded."""
        return await self._rates.refresh_if_stale()

    def rate_snapshot(self) -> RateSnapshot:
        """Copy of the current rate table."""
        return self._rates.snapshot()

    def supported_currencies(self) -> list[CurrencyInfo]:
        return self._converter.supported_currencies()

    def convert(self, amount_usd: float, currency: str) -> float:
        return self._converter.from_usd(amount_usd, currency)

    def format_currency(self, amount: float, currency: str = BASE_CURRENCY) -> str:
        return self._converter.format(amount, currency)

    # --- Pricing ---

    def to_localized_plan(
        self,
        tier: SubscriptionTier,
        currency: str = BASE_CURRENCY,
        cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> LocalizedPlan:
        return self._calculator.to_localized_plan(tier, currency, cycle)

    def localize_all(
        self, currency: str = BASE_CURRENCY, cycle: BillingCycle = BillingCycle.MONTHLY
    ) -> list[LocalizedPlan]:
        return self._calculator.localize_all(currency, cycle)

    def get_tier_pricing(
        self,
        tier_id: str,
        currency: str = BASE_CURRENCY,
        cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> LocalizedPlan | None:
        return self._calculator.get_tier_pricing(tier_id, currency, cycle)

    def compare_across_currencies(
        self,
        tier_id: str,
        currencies: Iterable[str] | None = None,
        cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> list[CurrencyQuote]:
        """Price one tier in several currencies (configured comparison set by default)."""
        if currencies is None:
            currencies = self.settings.comparison_currencies
        return self._calculator.compare_across_currencies(tier_id, currencies, cycle)

    def annual_savings(self, tier_id: str, currency: str = BASE_CURRENCY) -> AnnualSavings | None:
        return self._calculator.annual_savings(tier_id, currency)

    def total_cost(
        self,
        tier_id: str,
        currency: str = BASE_CURRENCY,
        cycle: BillingCycle = BillingCycle.MONTHLY,
        tax_rate: float = 0.0,
    ) -> CostBreakdown | None:
        return self._calculator.total_cost(tier_id, currency, cycle, tax_rate)

    def feature_matrix(self) -> list[FeatureRow]:
        return self._calculator.feature_matrix()

    def recommend_tier_change(
        self,
        current_tier_id: str,
        usage: Mapping[str, FeatureUsage | Mapping[str, int | None] | int],
    ) -> TierRecommendation:
        return self._calculator.recommend_tier_change(current_tier_id, usage)

    async def save_tier(self, tier: SubscriptionTier) -> bool:
        """Persist a tier on the backend and reload the catalog."""
        return await self._catalog.save_tier(tier)
