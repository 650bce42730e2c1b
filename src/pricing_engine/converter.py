"""CurrencyConverter: USD arithmetic and locale-aware price formatting.

Conversions to and from non-USD currencies round to whole units, which is
what price displays show. USD is the base and is passed through untouched so
cent prices such as 29.99 keep their cents. A currency the engine does not
know is treated as already converted (identity) rather than raising.
"""

from __future__ import annotations

import re

import structlog
from babel.core import Locale, UnknownLocaleError
from babel.numbers import UnknownCurrencyError, format_currency

from pricing_core.constants import BASE_CURRENCY, BOOTSTRAP_CURRENCIES
from pricing_core.models.currency import CurrencyInfo
from pricing_core.money import round_units
from pricing_engine.rates.rate_store import RateStore

logger = structlog.get_logger()

_FRACTION_PATTERN = re.compile(r"\.[0#]+")


def _fallback_format(amount: float, symbol: str) -> str:
    """Symbol followed by a comma-grouped number."""
    if float(amount).is_integer():
        return f"{symbol}{int(amount):,}"
    return f"{symbol}{amount:,.2f}"


class CurrencyConverter:
    """Pure conversion and formatting on top of a RateStore."""

    def __init__(self, rates: RateStore) -> None:
        """Initialize with the session's RateStore."""
        self._rates = rates

    def currency_info(self, code: str) -> CurrencyInfo | None:
        """Return display metadata and the live rate for ``code``."""
        code = code.upper()
        meta = BOOTSTRAP_CURRENCIES.get(code)
        rate = self._rates.get_rate(code)
        if meta is None or rate is None:
            return None
        return CurrencyInfo(
            code=code,
            symbol=str(meta["symbol"]),
            name=str(meta["name"]),
            rate=rate,
            locale=str(meta["locale"]),
        )

    def supported_currencies(self) -> list[CurrencyInfo]:
        """All supported currencies with their current rates."""
        infos = (self.currency_info(code) for code in BOOTSTRAP_CURRENCIES)
        return [info for info in infos if info is not None]

    def from_usd(self, amount_usd: float, target: str) -> float:
        """Convert a USD amount into ``target``."""
        target = target.upper()
        rate = self._rates.get_rate(target)
        if rate is None or target == BASE_CURRENCY:
            return amount_usd
        return round_units(amount_usd * rate)

    def to_usd(self, amount: float, source: str) -> float:
        """Convert an amount in ``source`` back into USD."""
        source = source.upper()
        rate = self._rates.get_rate(source)
        if rate is None or source == BASE_CURRENCY:
            return amount
        return round_units(amount / rate)

    def format(self, amount: float, currency: str = BASE_CURRENCY) -> str:
        """Render ``amount`` in the currency's locale; whole amounts drop the decimals."""
        currency = currency.upper()
        info = self.currency_info(currency)
        if info is None:
            return _fallback_format(amount, f"{currency} ")

        babel_locale = info.locale.replace("-", "_")
        try:
            pattern = None
            if float(amount).is_integer():
                pattern = self._whole_unit_pattern(babel_locale)
            return format_currency(
                amount,
                currency,
                format=pattern,
                locale=babel_locale,
                currency_digits=pattern is None,
            )
        except (UnknownLocaleError, UnknownCurrencyError, ValueError) as e:
            logger.debug("currency_format_fallback", currency=currency, error=str(e))
            return _fallback_format(amount, info.symbol)

    @staticmethod
    def _whole_unit_pattern(babel_locale: str) -> str:
        """The locale's standard currency pattern with the fraction digits removed."""
        standard = Locale.parse(babel_locale).currency_formats["standard"]
        return _FRACTION_PATTERN.sub("", standard.pattern)
