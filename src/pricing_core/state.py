"""Engine state: the mutable session state owned by a PricingService."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime

from pricing_core.constants import BOOTSTRAP_CURRENCIES
from pricing_core.models.currency import RateSnapshot
from pricing_core.models.location import DetectionResult, LocationSignal


def _bootstrap_rates() -> dict[str, float]:
    """Return a fresh copy of the compiled-in approximate rates."""
    return {code: float(info["rate"]) for code, info in BOOTSTRAP_CURRENCIES.items()}


@dataclass
class EngineState:
    """Mutable state for one session. Created with the service, discarded with it.

    Only RateStore writes the rate fields and only PricingService writes the
    location fields; updates are last-writer-wins.
    """

    rates: dict[str, float] = field(default_factory=_bootstrap_rates)
    rates_fetched_at: datetime | None = None
    rates_loaded: bool = False
    last_refresh_attempt_at: datetime | None = None

    location: LocationSignal | None = None
    detection_task: asyncio.Task[DetectionResult] | None = None

    def snapshot(self) -> RateSnapshot:
        """Return an immutable copy of the current rate table."""
        return RateSnapshot(rates=dict(self.rates), fetched_at=self.rates_fetched_at)
