"""Shared constants and lookup tables for job-hunter-pricing."""

from __future__ import annotations

BASE_CURRENCY = "USD"
FALLBACK_CURRENCY = "USD"

# Approximate units per 1 USD, used until a live snapshot is available
BOOTSTRAP_CURRENCIES: dict[str, dict[str, str | float]] = {
    "USD": {"symbol": "$", "name": "US Dollar", "rate": 1.0, "locale": "en-US"},
    "EUR": {"symbol": "€", "name": "Euro", "rate": 0.85, "locale": "en-GB"},
    "GBP": {"symbol": "£", "name": "British Pound", "rate": 0.73, "locale": "en-GB"},
    "NGN": {"symbol": "₦", "name": "Nigerian Naira", "rate": 750.0, "locale": "en-NG"},
    "CAD": {"symbol": "C$", "name": "Canadian Dollar", "rate": 1.25, "locale": "en-CA"},
    "AUD": {"symbol": "A$", "name": "Australian Dollar", "rate": 1.35, "locale": "en-AU"},
    "ZAR": {"symbol": "R", "name": "South African Rand", "rate": 18.5, "locale": "en-ZA"},
    "KES": {"symbol": "KSh", "name": "Kenyan Shilling", "rate": 130.0, "locale": "en-KE"},
    "GHS": {"symbol": "₵", "name": "Ghana Cedi", "rate": 12.0, "locale": "en-GH"},
    "INR": {"symbol": "₹", "name": "Indian Rupee", "rate": 83.0, "locale": "en-IN"},
    "JPY": {"symbol": "¥", "name": "Japanese Yen", "rate": 110.0, "locale": "ja-JP"},
    "CNY": {"symbol": "¥", "name": "Chinese Yuan", "rate": 7.2, "locale": "zh-CN"},
}

SUPPORTED_CURRENCIES: frozenset[str] = frozenset(BOOTSTRAP_CURRENCIES)

# ISO-3166 alpha-2 codes and common country names -> currency
COUNTRY_TO_CURRENCY: dict[str, str] = {
    "US": "USD", "USA": "USD", "UNITED STATES": "USD",
    "GB": "GBP", "UK": "GBP", "UNITED KINGDOM": "GBP",
    "NG": "NGN", "NIGERIA": "NGN",
    "CA": "CAD", "CANADA": "CAD",
    "AU": "AUD", "AUSTRALIA": "AUD",
    "ZA": "ZAR", "SOUTH AFRICA": "ZAR",
    "KE": "KES", "KENYA": "KES",
    "GH": "GHS", "GHANA": "GHS",
    "IN": "INR", "INDIA": "INR",
    "JP": "JPY", "JAPAN": "JPY",
    "CN": "CNY", "CHINA": "CNY",
    "DE": "EUR", "GERMANY": "EUR",
    "FR": "EUR", "FRANCE": "EUR",
    "IT": "EUR", "ITALY": "EUR",
    "ES": "EUR", "SPAIN": "EUR",
    "NL": "EUR", "NETHERLANDS": "EUR",
    "AT": "EUR", "AUSTRIA": "EUR",
    "BE": "EUR", "BELGIUM": "EUR",
    "FI": "EUR", "FINLAND": "EUR",
    "IE": "EUR", "IRELAND": "EUR",
    "PT": "EUR", "PORTUGAL": "EUR",
    "GR": "EUR", "GREECE": "EUR",
}  # fmt: skip

# Approximate: a timezone can span several currencies
TIMEZONE_TO_CURRENCY: dict[str, str] = {
    "America/New_York": "USD",
    "America/Los_Angeles": "USD",
    "America/Chicago": "USD",
    "America/Denver": "USD",
    "America/Toronto": "CAD",
    "America/Vancouver": "CAD",
    "Europe/London": "GBP",
    "Europe/Paris": "EUR",
    "Europe/Berlin": "EUR",
    "Europe/Rome": "EUR",
    "Europe/Madrid": "EUR",
    "Europe/Amsterdam": "EUR",
    "Africa/Lagos": "NGN",
    "Africa/Johannesburg": "ZAR",
    "Africa/Nairobi": "KES",
    "Africa/Accra": "GHS",
    "Asia/Tokyo": "JPY",
    "Asia/Shanghai": "CNY",
    "Asia/Hong_Kong": "USD",
    "Asia/Singapore": "USD",
    "Asia/Kolkata": "INR",
    "Australia/Sydney": "AUD",
    "Australia/Melbourne": "AUD",
}

# Full BCP-47 tags first; bare language codes only where unambiguous
LOCALE_TO_CURRENCY: dict[str, str] = {
    "en-US": "USD",
    "en-CA": "CAD",
    "en-GB": "GBP",
    "en-AU": "AUD",
    "en-ZA": "ZAR",
    "en-NG": "NGN",
    "en-KE": "KES",
    "en-GH": "GHS",
    "en-IN": "INR",
    "fr-CA": "CAD",
    "fr-FR": "EUR",
    "de-DE": "EUR",
    "es-ES": "EUR",
    "it-IT": "EUR",
    "ja-JP": "JPY",
    "zh-CN": "CNY",
    "hi-IN": "INR",
    "ja": "JPY",
    "zh": "CNY",
    "hi": "INR",
    "de": "EUR",
    "it": "EUR",
}

# Key/value storage keys
USER_LOCATION_KEY = "pricing:user_location"
USER_CURRENCY_KEY = "pricing:user_currency"
EXCHANGE_RATES_KEY = "pricing:exchange_rates"
EXCHANGE_RATES_UPDATED_KEY = "pricing:exchange_rates_updated"

# Tracked features, in display order
FEATURE_LABELS: dict[str, str] = {
    "job_applications": "Job Applications",
    "cv_uploads": "CV Uploads",
    "email_accounts": "Email Accounts",
    "ai_requests": "AI Requests",
    "priority_support": "Priority Support",
    "advanced_analytics": "Advanced Analytics",
    "custom_templates": "Custom Templates",
    "api_access": "API Access",
    "white_label": "White Label",
}

METERED_FEATURES: tuple[str, ...] = (
    "job_applications",
    "cv_uploads",
    "email_accounts",
    "ai_requests",
)

FEATURE_INCLUDED = "✓"
FEATURE_EXCLUDED = "✗"

# Usage thresholds for tier recommendations
UPGRADE_USAGE_THRESHOLD = 0.8
DOWNGRADE_USAGE_THRESHOLD = 0.3

DEFAULT_COMPARISON_CURRENCIES: tuple[str, ...] = ("USD", "EUR", "GBP", "NGN")
