"""PricingCalculator: localized quotes, savings, feature matrix, tier advice.

Nothing here is cached: every call reads the live catalog and rate table,
so results follow rate refreshes and catalog replacements immediately.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from pricing_core.constants import (
    DEFAULT_COMPARISON_CURRENCIES,
    DOWNGRADE_USAGE_THRESHOLD,
    FEATURE_EXCLUDED,
    FEATURE_INCLUDED,
    FEATURE_LABELS,
    METERED_FEATURES,
    UPGRADE_USAGE_THRESHOLD,
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
from pricing_core.models.tier import BillingCycle, SubscriptionTier
from pricing_core.money import round2
from pricing_engine.catalog import TierCatalog
from pricing_engine.converter import CurrencyConverter

logger = structlog.get_logger()


def effective_yearly_discount(tier: SubscriptionTier) -> int:
    """Displayed yearly discount: the larger of the advertised and the actual one."""
    monthly_total = tier.base_price.monthly * 12
    computed = 0
    if monthly_total > 0 and tier.base_price.yearly > 0:
        computed = round((monthly_total - tier.base_price.yearly) / monthly_total * 100)
    explicit = round(tier.yearly_discount or 0)
    return max(explicit, computed, 0)


class PricingCalculator:
    """Composes TierCatalog and CurrencyConverter into display-ready pricing."""

    def __init__(self, catalog: TierCatalog, converter: CurrencyConverter) -> None:
        """Initialize with the session catalog and converter."""
        self._catalog = catalog
        self._converter = converter

    def to_localized_plan(
        self,
        tier: SubscriptionTier,
        currency: str = "USD",
        cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> LocalizedPlan:
        """Project ``tier`` into ``currency`` for ``cycle`` (monthly if the cycle is unpriced)."""
        currency = currency.upper()
        base_price = tier.base_price.for_cycle(cycle)
        price = self._converter.from_usd(base_price, currency)
        features = tier.features
        return LocalizedPlan(
            id=tier.id,
            name=tier.name,
            description=tier.description,
            price=price,
            currency=currency,
            billing_cycle=cycle,
            price_display=self._converter.format(price, currency),
            base_price_usd=base_price,
            yearly_discount=effective_yearly_discount(tier),
            features={
                "job_applications": features.job_applications > 0,
                "cv_uploads": features.cv_uploads > 0,
                "email_accounts": features.email_accounts > 0,
                "ai_requests": features.ai_requests > 0,
                "priority_support": features.priority_support,
                "advanced_analytics": features.advanced_analytics,
                "custom_templates": features.custom_templates,
                "api_access": features.api_access,
                "white_label": features.white_label,
            },
            max_job_applications=features.job_applications,
            max_cv_uploads=features.cv_uploads,
            max_email_accounts=features.email_accounts,
            ai_requests_limit=features.ai_requests,
            is_popular=tier.is_popular,
            is_enterprise=tier.is_enterprise,
        )

    def localize_all(
        self, currency: str = "USD", cycle: BillingCycle = BillingCycle.MONTHLY
    ) -> list[LocalizedPlan]:
        """Every catalog tier, localized."""
        return [self.to_localized_plan(t, currency, cycle) for t in self._catalog.get_all()]

    def get_tier_pricing(
        self,
        tier_id: str,
        currency: str = "USD",
        cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> LocalizedPlan | None:
        """Localized plan for ``tier_id``, or None if the tier is unknown."""
        tier = self._catalog.get_by_id(tier_id)
        if tier is None:
            return None
        return self.to_localized_plan(tier, currency, cycle)

    def compare_across_currencies(
        self,
        tier_id: str,
        currencies: Iterable[str] = DEFAULT_COMPARISON_CURRENCIES,
        cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> list[CurrencyQuote]:
        """The same tier priced in each currency; empty for an unknown tier."""
        tier = self._catalog.get_by_id(tier_id)
        if tier is None:
            return []

        base_price = tier.base_price.for_cycle(cycle)
        discount = effective_yearly_discount(tier)
        label = f"Save {discount}%" if cycle == BillingCycle.YEARLY and discount > 0 else None

        quotes: list[CurrencyQuote] = []
        for currency in currencies:
            code = currency.upper()
            price = self._converter.from_usd(base_price, code)
            quotes.append(
                CurrencyQuote(
                    currency=code,
                    price=price,
                    formatted=self._converter.format(price, code),
                    savings_label=label,
                )
            )
        return quotes

    def annual_savings(self, tier_id: str, currency: str = "USD") -> AnnualSavings | None:
        """Yearly price vs. twelve monthly payments in ``currency``.

        Negative savings (a yearly markup) are clamped to zero with
        ``has_savings=False`` so no "save" badge is ever shown for them.
        """
        tier = self._catalog.get_by_id(tier_id)
        if tier is None:
            return None

        currency = currency.upper()
        monthly = self._converter.from_usd(tier.base_price.monthly, currency)
        yearly = self._converter.from_usd(tier.base_price.yearly, currency)
        monthly_total = round2(monthly * 12)
        savings = round2(monthly_total - yearly)
        percentage = round(savings / monthly_total * 100) if monthly_total > 0 else 0

        has_savings = savings > 0
        if not has_savings:
            savings, percentage = 0.0, 0

        fmt = self._converter.format
        return AnnualSavings(
            currency=currency,
            monthly_total=monthly_total,
            yearly_price=yearly,
            savings=savings,
            savings_percentage=max(percentage, 0),
            has_savings=has_savings,
            formatted={
                "monthly_total": fmt(monthly_total, currency),
                "yearly_price": fmt(yearly, currency),
                "savings": fmt(savings, currency),
            },
        )

    def total_cost(
        self,
        tier_id: str,
        currency: str = "USD",
        cycle: BillingCycle = BillingCycle.MONTHLY,
        tax_rate: float = 0.0,
    ) -> CostBreakdown | None:
        """Base price plus tax (``tax_rate`` as a fraction, e.g. 0.075)."""
        plan = self.get_tier_pricing(tier_id, currency, cycle)
        if plan is None:
            return None
        tax_amount = round2(plan.price * max(tax_rate, 0.0))
        total = round2(plan.price + tax_amount)
        fmt = self._converter.format
        return CostBreakdown(
            currency=plan.currency,
            base_price=plan.price,
            tax_amount=tax_amount,
            total_price=total,
            formatted={
                "base_price": fmt(plan.price, plan.currency),
                "tax_amount": fmt(tax_amount, plan.currency),
                "total_price": fmt(total, plan.currency),
            },
        )

    def feature_matrix(self) -> list[FeatureRow]:
        """One row per tracked feature, one value per tier. Currency-independent."""
        tiers = self._catalog.get_all()
        rows: list[FeatureRow] = []
        for feature, label in FEATURE_LABELS.items():
            values: dict[str, int | str] = {}
            for tier in tiers:
                value = getattr(tier.features, feature)
                if isinstance(value, bool):
                    values[tier.id] = FEATURE_INCLUDED if value else FEATURE_EXCLUDED
                else:
                    values[tier.id] = value
            rows.append(FeatureRow(feature=feature, label=label, tiers=values))
        return rows

    def recommend_tier_change(
        self,
        current_tier_id: str,
        usage: Mapping[str, FeatureUsage | Mapping[str, int | None] | int],
    ) -> TierRecommendation:
        """Suggest an upgrade when any metered feature reaches 80% of its limit,
        or a downgrade when mean utilization is under 30% on a paid tier.

        Upgrade signals suppress the downgrade signal.
        """
        current = self._catalog.get_by_id(current_tier_id)
        if current is None:
            return TierRecommendation(reasons=["Current tier not found"])

        reasons: list[str] = []
        ratios: list[float] = []
        should_upgrade = False
        for feature, raw in usage.items():
            if feature not in METERED_FEATURES:
                continue
            if isinstance(raw, FeatureUsage):
                entry = raw
            elif isinstance(raw, Mapping):
                entry = FeatureUsage.model_validate(raw)
            else:
                entry = FeatureUsage(used=raw)
            limit = entry.limit if entry.limit is not None else getattr(current.features, feature)
            if limit <= 0:
                continue
            ratio = entry.used / limit
            ratios.append(ratio)
            if entry.used >= limit:
                should_upgrade = True
                reasons.append(f"Exceeded limit for {feature}")
            elif ratio >= UPGRADE_USAGE_THRESHOLD:
                should_upgrade = True
                reasons.append(f"Approaching limit for {feature}")

        should_downgrade = False
        if not should_upgrade and ratios and not current.is_free:
            average = sum(ratios) / len(ratios)
            if average < DOWNGRADE_USAGE_THRESHOLD:
                should_downgrade = True
                reasons.append("Low usage across features - consider downgrading")

        recommended = None
        if should_upgrade or should_downgrade:
            ladder = self._catalog.sorted_by_price()
            index = next(i for i, t in enumerate(ladder) if t.id == current.id)
            target = index + 1 if should_upgrade else index - 1
            if 0 <= target < len(ladder):
                recommended = ladder[target]

        logger.debug(
            "tier_recommendation",
            tier=current.id,
            upgrade=should_upgrade,
            downgrade=should_downgrade,
            recommended=recommended.id if recommended else None,
        )
        return TierRecommendation(
            should_upgrade=should_upgrade,
            should_downgrade=should_downgrade,
            recommended_tier=recommended,
            reasons=reasons,
        )
