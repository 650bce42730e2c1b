"""Derived pricing models: localized plans, quotes, savings, recommendations."""

from __future__ import annotations

from pydantic import BaseModel, Field

from pricing_core.models.tier import BillingCycle, SubscriptionTier


class LocalizedPlan(BaseModel):
    """A tier projected into a currency and billing cycle. Never persisted."""

    id: str
    name: str
    description: str
    price: float = Field(description="Price in the target currency")
    currency: str
    billing_cycle: BillingCycle
    price_display: str = Field(description="Locale-formatted price")
    base_price_usd: float = Field(description="Source USD price for audit/display")
    yearly_discount: int = Field(ge=0, description="Effective yearly discount percent")
    features: dict[str, bool] = Field(description="Feature key -> included")
    max_job_applications: int
    max_cv_uploads: int
    max_email_accounts: int
    ai_requests_limit: int
    is_popular: bool = False
    is_enterprise: bool = False


class CurrencyQuote(BaseModel):
    """One row of a 'price in other currencies' comparison."""

    currency: str
    price: float
    formatted: str
    savings_label: str | None = None


class AnnualSavings(BaseModel):
    """Yearly vs. twelve monthly payments, in the target currency."""

    currency: str
    monthly_total: float
    yearly_price: float
    savings: float = Field(ge=0.0, description="Clamped at zero; never negative")
    savings_percentage: int = Field(ge=0)
    has_savings: bool = Field(description="False when the caller should hide the badge")
    formatted: dict[str, str] = Field(default_factory=dict)


class CostBreakdown(BaseModel):
    """Base price, tax, and total for a tier in the target currency."""

    currency: str
    base_price: float
    tax_amount: float
    total_price: float
    formatted: dict[str, str] = Field(default_factory=dict)


class FeatureRow(BaseModel):
    """One feature across every tier; values are numbers or tick/cross markers."""

    feature: str
    label: str
    tiers: dict[str, int | str]


class FeatureUsage(BaseModel):
    """Consumption of one metered feature; limit defaults to the tier's limit."""

    used: int = Field(ge=0)
    limit: int | None = Field(default=None, ge=0)


class TierRecommendation(BaseModel):
    """Upgrade/downgrade signal derived from usage."""

    should_upgrade: bool = False
    should_downgrade: bool = False
    recommended_tier: SubscriptionTier | None = None
    reasons: list[str] = Field(default_factory=list)
