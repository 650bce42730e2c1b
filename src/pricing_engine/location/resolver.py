"""LocationResolver: the ordered, short-circuiting detection cascade."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from pricing_core.constants import FALLBACK_CURRENCY
from pricing_core.models.location import DetectionResult, DetectionSource
from pricing_engine.location.strategies import DetectionStrategy

logger = structlog.get_logger()


async def first_success(strategies: Sequence[DetectionStrategy]) -> DetectionResult | None:
    """Await strategies one at a time and return the first non-None result.

    An exception from a strategy counts as "no signal"; later strategies are
    never started once one succeeds.
    """
    for strategy in strategies:
        try:
            result = await strategy()
        except Exception as e:
            logger.warning(
                "detection_strategy_failed",
                strategy=strategy.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            continue
        if result is not None:
            logger.debug("detection_strategy_succeeded", strategy=strategy.name)
            return result
        logger.debug("detection_strategy_no_signal", strategy=strategy.name)
    return None


class LocationResolver:
    """Runs the cascade; USD is the terminal fallback, so ``resolve`` always answers."""

    def __init__(
        self,
        strategies: Sequence[DetectionStrategy],
        fallback_currency: str = FALLBACK_CURRENCY,
    ) -> None:
        """Initialize with strategies in priority order."""
        self._strategies = list(strategies)
        self._fallback = fallback_currency

    @property
    def strategy_names(self) -> list[str]:
        """Strategy names in the order they are tried."""
        return [s.name for s in self._strategies]

    async def resolve(self) -> DetectionResult:
        """Return the first strategy's detection, or the fallback currency."""
        result = await first_success(self._strategies)
        if result is None:
            result = DetectionResult(currency=self._fallback, source=DetectionSource.FALLBACK)
        logger.info("currency_detected", currency=result.currency, source=result.source)
        return result
