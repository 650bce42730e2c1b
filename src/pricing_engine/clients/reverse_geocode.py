"""Reverse geocoding client (coordinates -> country)."""

from __future__ import annotations

import httpx

from pricing_core.exceptions import LocationLookupError
from pricing_core.interfaces.geolocation import Coordinates


class ReverseGeocodeClient:
    """Client for BigDataCloud-style reverse geocoding (`countryCode`, `countryName`)."""

    def __init__(self, http: httpx.AsyncClient, url: str) -> None:
        """Initialize with a shared HTTP client and the endpoint URL."""
        self._http = http
        self._url = url

    async def lookup(self, coordinates: Coordinates) -> tuple[str, str]:
        """Return ``(country_code, country_name)`` for the given coordinates."""
        response = await self._http.get(
            self._url,
            params={
                "latitude": coordinates.latitude,
                "longitude": coordinates.longitude,
                "localityLanguage": "en",
            },
        )
        response.raise_for_status()
        data = response.json()
        code = data.get("countryCode") if isinstance(data, dict) else None
        if not isinstance(code, str) or not code.strip():
            raise LocationLookupError(
                f"no countryCode for ({coordinates.latitude}, {coordinates.longitude})"
            )
        return code.strip().upper(), str(data.get("countryName") or "")
