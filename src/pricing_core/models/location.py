"""Visitor location and currency-detection models."""

from __future__ import annotations

import locale as _locale
import os
from enum import StrEnum

from pydantic import BaseModel, Field

from pricing_core.interfaces.geolocation import Coordinates


class DetectionSource(StrEnum):
    """Where a detected currency came from."""

    USER_PREFERENCE = "user_preference"
    CACHED_LOCATION = "cached_location"
    IP_GEOLOCATION = "ip_geolocation"
    DEVICE_GEOLOCATION = "device_geolocation"
    TIMEZONE = "timezone"  # low confidence
    LOCALE = "locale"  # low confidence
    FALLBACK = "fallback"


class LocationSignal(BaseModel):
    """Location inferred from a network strategy; cached for the session."""

    country: str = Field(default="", description="Country name as reported by the provider")
    country_code: str = Field(description="ISO-3166 alpha-2 code (uppercase)")
    currency: str = Field(description="Currency mapped from the country")
    timezone: str = Field(default="", description="IANA timezone if the provider reported one")


class DeviceContext(BaseModel):
    """Ambient signals about the visitor's device, supplied by the host."""

    timezone: str | None = Field(default=None, description="IANA timezone (e.g. 'Africa/Lagos')")
    locale: str | None = Field(default=None, description="Locale tag (e.g. 'en-NG' or 'en_NG')")
    coordinates: Coordinates | None = Field(
        default=None, description="Device coordinates, if the visitor shared them"
    )

    @classmethod
    def from_environment(cls) -> DeviceContext:
        """Build a context from the host process environment (TZ, system locale)."""
        try:
            language, _encoding = _locale.getlocale()
        except ValueError:
            language = None
        return cls(timezone=os.environ.get("TZ") or None, locale=language)


class DetectionResult(BaseModel):
    """Outcome of a currency detection: the currency and its provenance."""

    currency: str
    source: DetectionSource
    location: LocationSignal | None = None
