"""Tests for core pricing models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from pricing_core.data.default_tiers import DEFAULT_TIERS
from pricing_core.models.currency import CurrencyInfo, RateSnapshot
from pricing_core.models.location import DeviceContext
from pricing_core.models.plan import FeatureUsage
from pricing_core.models.tier import BasePrice, BillingCycle, SubscriptionTier, TierFeatures


@pytest.mark.unit
class TestBasePrice:
    """Test BasePrice cycle selection."""

    def test_for_cycle(self) -> None:
        """Defined cycles return their own price."""
        price = BasePrice(monthly=10, yearly=100, quarterly=27)
        assert price.for_cycle(BillingCycle.MONTHLY) == 10
        assert price.for_cycle(BillingCycle.YEARLY) == 100
        assert price.for_cycle(BillingCycle.QUARTERLY) == 27

    def test_missing_quarterly_falls_back_to_monthly(self) -> None:
        """An unpriced cycle uses the monthly price."""
        assert BasePrice(monthly=10, yearly=100).for_cycle(BillingCycle.QUARTERLY) == 10

    def test_yearly_markup(self) -> None:
        """Yearly above twelve monthly payments is flagged."""
        assert BasePrice(monthly=10, yearly=130).has_yearly_markup is True
        assert BasePrice(monthly=10, yearly=100).has_yearly_markup is False

    def test_negative_price_rejected(self) -> None:
        """Prices cannot be negative."""
        with pytest.raises(ValidationError):
            BasePrice(monthly=-1, yearly=0)


@pytest.mark.unit
class TestSubscriptionTier:
    """Test SubscriptionTier validation and wire format."""

    def test_camel_case_wire_format(self) -> None:
        """Backend payloads use camelCase keys."""
        tier = SubscriptionTier.model_validate(
            {
                "id": "team",
                "name": "Team",
                "basePrice": {"monthly": 49, "yearly": 490},
                "features": {
                    "job_applications": 200,
                    "cv_uploads": 10,
                    "email_accounts": 10,
                    "ai_requests": 500,
                    "api_access": True,
                },
                "isPopular": True,
                "yearlyDiscount": 15,
            }
        )
        assert tier.base_price.yearly == 490
        assert tier.is_popular is True
        assert tier.features.api_access is True
        assert tier.model_dump(by_alias=True)["yearlyDiscount"] == 15

    def test_populate_by_name(self) -> None:
        """Python field names are accepted too."""
        tier = SubscriptionTier(
            id="x",
            name="X",
            base_price=BasePrice(monthly=1, yearly=10),
            features=TierFeatures(
                job_applications=1, cv_uploads=1, email_accounts=1, ai_requests=1
            ),
        )
        assert tier.is_free is False

    def test_empty_id_rejected(self) -> None:
        """Tier ids must be non-empty."""
        with pytest.raises(ValidationError):
            SubscriptionTier(
                id="",
                name="X",
                base_price=BasePrice(monthly=0, yearly=0),
                features=TierFeatures(
                    job_applications=1, cv_uploads=1, email_accounts=1, ai_requests=1
                ),
            )

    def test_default_tiers(self) -> None:
        """The compiled-in catalog has four unique tiers, only 'free' is free."""
        ids = [t.id for t in DEFAULT_TIERS]
        assert ids == ["free", "basic", "professional", "enterprise"]
        assert [t.is_free for t in DEFAULT_TIERS] == [True, False, False, False]
        assert not any(t.base_price.has_yearly_markup for t in DEFAULT_TIERS)


@pytest.mark.unit
class TestRateSnapshot:
    """Test RateSnapshot staleness."""

    def test_never_fetched_is_stale(self) -> None:
        """Bootstrap rates always count as stale."""
        snap = RateSnapshot(rates={"USD": 1.0})
        assert snap.is_stale(datetime.now(UTC), 24) is True

    def test_fresh_and_stale(self) -> None:
        """Snapshots older than the window are stale."""
        now = datetime(2026, 3, 1, tzinfo=UTC)
        fresh = RateSnapshot(rates={}, fetched_at=now - timedelta(hours=23))
        stale = RateSnapshot(rates={}, fetched_at=now - timedelta(hours=25))
        assert fresh.is_stale(now, 24) is False
        assert stale.is_stale(now, 24) is True

    def test_currency_info_rate_positive(self) -> None:
        """Zero rates are rejected."""
        with pytest.raises(ValidationError):
            CurrencyInfo(code="XXX", symbol="X", name="X", rate=0, locale="en-US")


@pytest.mark.unit
class TestDeviceContext:
    """Test DeviceContext construction."""

    def test_from_environment_reads_tz(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The TZ variable becomes the device timezone."""
        monkeypatch.setenv("TZ", "Africa/Lagos")
        assert DeviceContext.from_environment().timezone == "Africa/Lagos"

    def test_from_environment_without_tz(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Missing TZ leaves the timezone unset."""
        monkeypatch.delenv("TZ", raising=False)
        assert DeviceContext.from_environment().timezone is None


@pytest.mark.unit
class TestFeatureUsage:
    """Test FeatureUsage validation."""

    def test_negative_usage_rejected(self) -> None:
        """Usage counts cannot be negative."""
        with pytest.raises(ValidationError):
            FeatureUsage(used=-1)
