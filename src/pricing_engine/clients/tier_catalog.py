"""Backend tier catalog client (GET list, POST one)."""

from __future__ import annotations

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from pricing_core.exceptions import CatalogFetchError
from pricing_core.models.tier import SubscriptionTier

logger = structlog.get_logger()

TIERS_PATH = "/api/subscriptions/tiers/"

_TIER_LIST = TypeAdapter(list[SubscriptionTier])


class TierCatalogClient:
    """Reads and writes the authoritative tier catalog on the backend."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        token: str | None = None,
    ) -> None:
        """Initialize with a shared HTTP client, backend base URL, and bearer token."""
        self._http = http
        self._url = base_url.rstrip("/") + TIERS_PATH
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    async def fetch_tiers(self) -> list[SubscriptionTier]:
        """Return the full remote catalog; every entry must validate."""
        response = await self._http.get(self._url, headers=self._headers)
        response.raise_for_status()
        try:
            tiers = _TIER_LIST.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise CatalogFetchError(f"invalid tier catalog from {self._url}: {e}") from e
        logger.debug("tier_catalog_fetched", url=self._url, count=len(tiers))
        return tiers

    async def save_tier(self, tier: SubscriptionTier) -> None:
        """Create or update one tier on the backend."""
        response = await self._http.post(
            self._url,
            headers=self._headers,
            json=tier.model_dump(mode="json", by_alias=True),
        )
        response.raise_for_status()
