"""Currency and exchange-rate models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CurrencyInfo(BaseModel):
    """A supported currency with its current rate against USD."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(description="ISO-4217 currency code")
    symbol: str = Field(description="Display symbol (e.g. '₦')")
    name: str = Field(description="Human-readable currency name")
    rate: float = Field(gt=0, description="Units of this currency per 1 USD")
    locale: str = Field(description="BCP-47 locale used for formatting (e.g. 'en-NG')")


class RateSnapshot(BaseModel):
    """USD-based rate table and the moment it was fetched."""

    rates: dict[str, float] = Field(description="Currency code -> units per 1 USD")
    fetched_at: datetime | None = Field(
        default=None, description="When the table was fetched; None for bootstrap rates"
    )

    def is_stale(self, now: datetime, max_age_hours: int) -> bool:
        """Return True if the snapshot has never been fetched or is too old."""
        if self.fetched_at is None:
            return True
        return (now - self.fetched_at).total_seconds() > max_age_hours * 3600
