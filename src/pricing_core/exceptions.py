"""Custom exception hierarchy for job-hunter-pricing."""

from __future__ import annotations


class PricingEngineError(Exception):
    """Base exception for all job-hunter-pricing errors."""


class RateFetchError(PricingEngineError):
    """Raised when the FX rate API returns no usable rate table."""


class LocationLookupError(PricingEngineError):
    """Raised when a geolocation or reverse-geocoding provider gives no usable answer."""


class CatalogFetchError(PricingEngineError):
    """Raised when the remote tier catalog cannot be fetched or parsed."""


class EmptyCatalogError(CatalogFetchError):
    """Raised when a tier catalog replacement contains no tiers."""
