"""TierCatalog: the session's list of subscription tiers."""

from __future__ import annotations

from collections.abc import Iterable

import httpx
import structlog

from pricing_core.data.default_tiers import DEFAULT_TIERS
from pricing_core.exceptions import CatalogFetchError, EmptyCatalogError
from pricing_core.models.tier import SubscriptionTier
from pricing_engine.clients.tier_catalog import TierCatalogClient

logger = structlog.get_logger()


class TierCatalog:
    """Compiled-in tiers, optionally replaced wholesale by the backend's catalog.

    There is no merge operation: a remote catalog is trusted as
    complete, so a mix of remote and default tiers can never exist.
    """

    def __init__(
        self,
        client: TierCatalogClient | None = None,
        defaults: Iterable[SubscriptionTier] = DEFAULT_TIERS,
    ) -> None:
        """Initialize with the defaults and an optional backend client."""
        self._client = client
        self._defaults = tuple(defaults)
        self._tiers: tuple[SubscriptionTier, ...] = self._defaults
        self._is_remote = False

    @property
    def is_remote(self) -> bool:
        """True once a remote catalog has replaced the defaults."""
        return self._is_remote

    def get_all(self) -> list[SubscriptionTier]:
        """All tiers in catalog order."""
        return list(self._tiers)

    def get_by_id(self, tier_id: str) -> SubscriptionTier | None:
        """Return the tier with ``tier_id``, or None."""
        return next((t for t in self._tiers if t.id == tier_id), None)

    def sorted_by_price(self) -> list[SubscriptionTier]:
        """Tiers by ascending monthly USD price (stable for ties)."""
        return sorted(self._tiers, key=lambda t: t.base_price.monthly)

    def replace_catalog(self, tiers: Iterable[SubscriptionTier]) -> None:
        """Replace every tier at once. An empty list is rejected."""
        new_tiers = tuple(tiers)
        if not new_tiers:
            raise EmptyCatalogError("refusing to replace the tier catalog with an empty list")
        for tier in new_tiers:
            if tier.base_price.has_yearly_markup:
                logger.warning(
                    "tier_yearly_price_exceeds_monthly_total",
                    tier=tier.id,
                    monthly=tier.base_price.monthly,
                    yearly=tier.base_price.yearly,
                )
        self._tiers = new_tiers
        self._is_remote = True

    def reset_to_defaults(self) -> None:
        """Discard any remote catalog."""
        self._tiers = self._defaults
        self._is_remote = False

    async def load_remote(self) -> bool:
        """Fetch and adopt the backend catalog; keep the current one on any failure."""
        if self._client is None:
            return False
        try:
            tiers = await self._client.fetch_tiers()
            self.replace_catalog(tiers)
        except (httpx.HTTPError, CatalogFetchError) as e:
            logger.warning(
                "tier_catalog_load_failed",
                error_type=type(e).__name__,
                error=str(e),
                keeping=len(self._tiers),
            )
            return False
        logger.info("tier_catalog_loaded", count=len(self._tiers))
        return True

    async def save_tier(self, tier: SubscriptionTier) -> bool:
        """Persist ``tier`` on the backend and reload. Failure is reported, not raised."""
        if self._client is None:
            return False
        try:
            await self._client.save_tier(tier)
        except httpx.HTTPError as e:
            logger.error("tier_save_failed", tier=tier.id, error=str(e))
            return False
        await self.load_remote()
        return True
