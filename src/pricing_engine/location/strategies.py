"""Currency detection strategies.

Each strategy is an async callable returning ``DetectionResult | None``.
``None`` means "no signal"; strategies may also raise, and the cascade in
``resolver`` treats any exception the same way.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

import httpx
import structlog

from pricing_core.exceptions import LocationLookupError
from pricing_core.interfaces.geolocation import PositionProvider
from pricing_core.models.location import (
    DetectionResult,
    DetectionSource,
    DeviceContext,
    LocationSignal,
)
from pricing_engine.clients.ip_geolocation import IPGeolocationClient
from pricing_engine.clients.reverse_geocode import ReverseGeocodeClient
from pricing_engine.location.mapping import (
    currency_for_country,
    currency_for_locale,
    currency_for_timezone,
)

logger = structlog.get_logger()


@runtime_checkable
class DetectionStrategy(Protocol):
    """One step of the detection cascade."""

    name: str

    async def __call__(self) -> DetectionResult | None:
        """Return a detection, or None when this source has no signal."""
        ...


class IPGeolocationStrategy:
    """Tries each IP geolocation provider in order; the first usable country wins."""

    name = "ip_geolocation"

    def __init__(self, client: IPGeolocationClient, providers: list[str]) -> None:
        """Initialize with a client and an ordered provider URL list."""
        self._client = client
        self._providers = providers

    async def __call__(self) -> DetectionResult | None:
        """Query providers sequentially until one reports a country."""
        for provider in self._providers:
            try:
                signal = await self._client.lookup(provider)
            except (httpx.HTTPError, LocationLookupError, ValueError) as e:
                logger.warning("ip_provider_failed", provider=provider, error=str(e))
                continue
            return DetectionResult(
                currency=signal.currency,
                source=DetectionSource.IP_GEOLOCATION,
                location=signal,
            )
        return None


class DeviceGeolocationStrategy:
    """Device coordinates (bounded wait) followed by a reverse lookup."""

    name = "device_geolocation"

    def __init__(
        self,
        positions: PositionProvider,
        geocoder: ReverseGeocodeClient,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize with a position source, reverse geocoder, and wait bound."""
        self._positions = positions
        self._geocoder = geocoder
        self._timeout = timeout_seconds

    async def __call__(self) -> DetectionResult | None:
        """Resolve a country from device coordinates; decline silently on any failure."""
        try:
            coordinates = await asyncio.wait_for(
                self._positions.get_position(), timeout=self._timeout
            )
        except PermissionError:
            logger.info("device_geolocation_denied")
            return None
        except TimeoutError:
            logger.info("device_geolocation_timeout", timeout_seconds=self._timeout)
            return None
        if coordinates is None:
            return None

        try:
            country_code, country_name = await self._geocoder.lookup(coordinates)
        except (httpx.HTTPError, LocationLookupError, ValueError) as e:
            logger.warning("reverse_geocode_failed", error=str(e))
            return None

        signal = LocationSignal(
            country=country_name,
            country_code=country_code,
            currency=currency_for_country(country_code),
        )
        return DetectionResult(
            currency=signal.currency,
            source=DetectionSource.DEVICE_GEOLOCATION,
            location=signal,
        )


class TimezoneStrategy:
    """Best-guess currency from the device's IANA timezone."""

    name = "timezone"

    def __init__(self, device: DeviceContext) -> None:
        """Initialize with the device context supplied by the host."""
        self._device = device

    async def __call__(self) -> DetectionResult | None:
        """Look the timezone up in the static table."""
        if not self._device.timezone:
            return None
        currency = currency_for_timezone(self._device.timezone)
        if currency is None:
            return None
        return DetectionResult(currency=currency, source=DetectionSource.TIMEZONE)


class LocaleStrategy:
    """Currency from the device locale: full tag first, then the bare language."""

    name = "locale"

    def __init__(self, device: DeviceContext) -> None:
        """Initialize with the device context supplied by the host."""
        self._device = device

    async def __call__(self) -> DetectionResult | None:
        """Look the locale up in the static table."""
        if not self._device.locale:
            return None
        currency = currency_for_locale(self._device.locale)
        if currency is None:
            return None
        return DetectionResult(currency=currency, source=DetectionSource.LOCALE)
