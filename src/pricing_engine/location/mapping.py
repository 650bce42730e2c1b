"""Static lookups from location signals to currency codes."""

from __future__ import annotations

from pricing_core.constants import (
    COUNTRY_TO_CURRENCY,
    FALLBACK_CURRENCY,
    LOCALE_TO_CURRENCY,
    TIMEZONE_TO_CURRENCY,
)


def currency_for_country(country: str) -> str:
    """Map an ISO code or country name to a currency; unknown countries get USD."""
    return COUNTRY_TO_CURRENCY.get(country.strip().upper(), FALLBACK_CURRENCY)


def currency_for_timezone(timezone: str) -> str | None:
    """Map an IANA timezone to a currency, or None if the zone is not tabled."""
    return TIMEZONE_TO_CURRENCY.get(timezone.strip())


def normalize_locale_tag(tag: str) -> str:
    """Turn 'en_NG', 'en-ng', or 'en_NG.UTF-8' into 'en-NG'."""
    base = tag.split(".")[0].split("@")[0].replace("_", "-")
    parts = base.split("-")
    if len(parts) == 1:
        return parts[0].lower()
    return f"{parts[0].lower()}-{parts[1].upper()}"


def currency_for_locale(tag: str) -> str | None:
    """Map a locale tag to a currency: full tag first, then the bare language."""
    normalized = normalize_locale_tag(tag)
    if not normalized:
        return None
    return LOCALE_TO_CURRENCY.get(normalized) or LOCALE_TO_CURRENCY.get(
        normalized.split("-")[0]
    )
