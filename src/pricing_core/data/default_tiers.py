"""Compiled-in subscription tiers, priced in USD.

Used until (or unless) the backend supplies an authoritative catalog.
"""

from __future__ import annotations

from pricing_core.models.tier import BasePrice, SubscriptionTier, TierFeatures

DEFAULT_TIERS: tuple[SubscriptionTier, ...] = (
    SubscriptionTier(
        id="free",
        name="Free",
        description="Perfect for getting started with job searching",
        base_price=BasePrice(monthly=0, yearly=0),
        features=TierFeatures(
            job_applications=10,
            cv_uploads=1,
            email_accounts=1,
            ai_requests=20,
        ),
    ),
    SubscriptionTier(
        id="basic",
        name="Basic",
        description="Ideal for active job seekers",
        base_price=BasePrice(monthly=9.99, yearly=99.99),
        features=TierFeatures(
            job_applications=50,
            cv_uploads=3,
            email_accounts=2,
            ai_requests=100,
            custom_templates=True,
        ),
        yearly_discount=17,
    ),
    SubscriptionTier(
        id="professional",
        name="Professional",
        description="For serious professionals and career changers",
        base_price=BasePrice(monthly=29.99, yearly=299.99),
        features=TierFeatures(
            job_applications=150,
            cv_uploads=5,
            email_accounts=5,
            ai_requests=300,
            priority_support=True,
            advanced_analytics=True,
            custom_templates=True,
            api_access=True,
        ),
        is_popular=True,
        yearly_discount=17,
    ),
    SubscriptionTier(
        id="enterprise",
        name="Enterprise",
        description="For teams, recruiters, and high-volume users",
        base_price=BasePrice(monthly=99.99, yearly=999.99),
        features=TierFeatures(
            job_applications=500,
            cv_uploads=20,
            email_accounts=20,
            ai_requests=1000,
            priority_support=True,
            advanced_analytics=True,
            custom_templates=True,
            api_access=True,
            white_label=True,
        ),
        is_enterprise=True,
        yearly_discount=17,
    ),
)
