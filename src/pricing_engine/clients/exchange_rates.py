"""FX rate API client (USD base)."""

from __future__ import annotations

import httpx
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from pricing_core.exceptions import RateFetchError

logger = structlog.get_logger()


class ExchangeRateClient:
    """Fetches `{rates: {CODE: float}}` for base USD, retrying transient HTTP failures."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str,
        *,
        max_attempts: int = 3,
        wait_min: float = 1.0,
        wait_max: float = 10.0,
    ) -> None:
        """Initialize with a shared HTTP client and retry policy."""
        self._http = http
        self._url = url
        self._max_attempts = max_attempts
        self._wait_min = wait_min
        self._wait_max = wait_max

    async def fetch_rates(self) -> dict[str, float]:
        """Return every positive numeric rate in the response, keyed by uppercase code."""

        @retry(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=1, min=self._wait_min, max=self._wait_max),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async def _do_fetch() -> object:
            response = await self._http.get(self._url)
            response.raise_for_status()
            return response.json()

        try:
            data = await _do_fetch()
        except ValueError as e:
            raise RateFetchError(f"FX response from {self._url} is not JSON") from e

        raw_rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(raw_rates, dict):
            raise RateFetchError(f"FX response from {self._url} has no 'rates' table")

        rates: dict[str, float] = {}
        for code, value in raw_rates.items():
            if isinstance(value, int | float) and not isinstance(value, bool) and value > 0:
                rates[str(code).upper()] = float(value)
        if not rates:
            raise RateFetchError(f"FX response from {self._url} contained no usable rates")

        logger.debug("fx_rates_fetched", url=self._url, count=len(rates))
        return rates
