"""Domain models for job-hunter-pricing."""

from pricing_core.models.currency import CurrencyInfo, RateSnapshot
from pricing_core.models.location import (
    DetectionResult,
    DetectionSource,
    DeviceContext,
    LocationSignal,
)
from pricing_core.models.plan import (
    AnnualSavings,
    CostBreakdown,
    CurrencyQuote,
    FeatureRow,
    FeatureUsage,
    LocalizedPlan,
    TierRecommendation,
)
from pricing_core.models.tier import BasePrice, BillingCycle, SubscriptionTier, TierFeatures

__all__ = [
    "AnnualSavings",
    "BasePrice",
    "BillingCycle",
    "CostBreakdown",
    "CurrencyInfo",
    "CurrencyQuote",
    "DetectionResult",
    "DetectionSource",
    "DeviceContext",
    "FeatureRow",
    "FeatureUsage",
    "LocalizedPlan",
    "LocationSignal",
    "RateSnapshot",
    "SubscriptionTier",
    "TierFeatures",
    "TierRecommendation",
]
