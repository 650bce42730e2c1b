"""Subscription tier models (canonical, USD-denominated)."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BillingCycle(StrEnum):
    """Billing cycles a tier can be priced for."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class BasePrice(BaseModel):
    """USD prices per billing cycle."""

    model_config = ConfigDict(frozen=True)

    monthly: float = Field(ge=0.0, description="Monthly price in USD")
    yearly: float = Field(ge=0.0, description="Yearly price in USD")
    quarterly: float | None = Field(default=None, ge=0.0, description="Quarterly price in USD")

    def for_cycle(self, cycle: BillingCycle) -> float:
        """Return the price for ``cycle``, falling back to monthly when undefined."""
        price = getattr(self, cycle.value)
        return price if price else self.monthly

    @property
    def has_yearly_markup(self) -> bool:
        """True if the yearly price exceeds twelve monthly payments (a data-entry bug)."""
        return self.yearly > self.monthly * 12


class TierFeatures(BaseModel):
    """Feature limits and flags for a tier."""

    model_config = ConfigDict(frozen=True)

    job_applications: int = Field(ge=0)
    cv_uploads: int = Field(ge=0)
    email_accounts: int = Field(ge=0)
    ai_requests: int = Field(ge=0)
    priority_support: bool = False
    advanced_analytics: bool = False
    custom_templates: bool = False
    api_access: bool = False
    white_label: bool = False


class SubscriptionTier(BaseModel):
    """A named subscription plan with USD base pricing and feature limits.

    Wire format uses camelCase (``basePrice``, ``isPopular``, ``yearlyDiscount``)
    to match the backend tier endpoint; feature keys stay snake_case.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1, description="Stable tier identifier (e.g. 'basic')")
    name: str = Field(description="Display name")
    description: str = Field(default="", description="Marketing description")
    base_price: BasePrice
    features: TierFeatures
    is_popular: bool = False
    is_enterprise: bool = False
    yearly_discount: float | None = Field(
        default=None, ge=0.0, le=100.0, description="Advertised yearly discount percent"
    )

    @property
    def is_free(self) -> bool:
        """True if the tier costs nothing on any cycle."""
        return self.base_price.monthly == 0 and self.base_price.yearly == 0
