"""Fake detection strategies and position providers."""

from __future__ import annotations

import asyncio

from pricing_core.interfaces.geolocation import Coordinates
from pricing_core.models.location import DetectionResult, DetectionSource, LocationSignal


class FakeStrategy:
    """Strategy returning a fixed outcome and counting its calls.

    ``outcome`` may be a currency code, None for "no signal", or an exception.
    """

    def __init__(
        self,
        name: str,
        outcome: str | Exception | None,
        *,
        source: DetectionSource = DetectionSource.IP_GEOLOCATION,
        country_code: str | None = None,
        delay: float = 0.0,
    ) -> None:
        """Configure the outcome and an optional artificial delay."""
        self.name = name
        self.calls = 0
        self._outcome = outcome
        self._source = source
        self._country_code = country_code
        self._delay = delay

    async def __call__(self) -> DetectionResult | None:
        """Return the configured result."""
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if isinstance(self._outcome, Exception):
            raise self._outcome
        if self._outcome is None:
            return None
        location = None
        if self._country_code is not None:
            location = LocationSignal(
                country=self._country_code,
                country_code=self._country_code,
                currency=self._outcome,
            )
        return DetectionResult(currency=self._outcome, source=self._source, location=location)


class DeniedPositionProvider:
    """Visitor refused the location prompt."""

    async def get_position(self) -> Coordinates | None:
        """Raise as a browser would on denial."""
        raise PermissionError("geolocation denied")


class HangingPositionProvider:
    """Device never answers."""

    async def get_position(self) -> Coordinates | None:
        """Sleep far longer than any test timeout."""
        await asyncio.sleep(60)
        return None
