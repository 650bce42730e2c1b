"""IP geolocation provider client.

Providers disagree on field names: ipapi.co and ipwhois.app send
``country_code`` plus a ``country`` name, freegeoip-style services send the
ISO code in ``country``. Both shapes are normalized here.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from pricing_core.exceptions import LocationLookupError
from pricing_core.models.location import LocationSignal
from pricing_engine.location.mapping import currency_for_country

logger = structlog.get_logger()


def extract_country(data: dict[str, Any]) -> tuple[str, str] | None:
    """Return ``(country_code, country_name)`` from a provider payload, or None."""
    code = data.get("country_code")
    if isinstance(code, str) and code.strip():
        name = data.get("country") or data.get("country_name") or ""
        return code.strip().upper(), str(name)
    code = data.get("country")
    if isinstance(code, str) and code.strip():
        name = data.get("country_name") or code
        return code.strip().upper(), str(name)
    return None


class IPGeolocationClient:
    """Resolves the caller's country from a single IP geolocation endpoint."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        """Initialize with a shared HTTP client."""
        self._http = http

    async def lookup(self, provider_url: str) -> LocationSignal:
        """Query ``provider_url`` and map the reported country to a currency."""
        response = await self._http.get(provider_url)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise LocationLookupError(f"{provider_url} returned a non-object payload")

        country = extract_country(data)
        if country is None:
            raise LocationLookupError(f"{provider_url} returned no country code")

        country_code, country_name = country
        timezone = data.get("timezone")
        signal = LocationSignal(
            country=country_name,
            country_code=country_code,
            currency=currency_for_country(country_code),
            timezone=timezone if isinstance(timezone, str) else "",
        )
        logger.debug(
            "ip_geolocation_resolved",
            provider=provider_url,
            country_code=country_code,
            currency=signal.currency,
        )
        return signal
