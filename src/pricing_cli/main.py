"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import typer
from rich.console import Console
from rich.table import Table

from pricing_core.config.settings import Settings
from pricing_core.constants import METERED_FEATURES
from pricing_core.models.location import DeviceContext
from pricing_core.models.plan import FeatureUsage
from pricing_core.models.tier import BillingCycle
from pricing_engine.factories import build_pricing_service
from pricing_engine.observability import configure_logging
from pricing_engine.service import PricingService

app = typer.Typer(
    name="job-pricing",
    help="Localized subscription pricing for the job hunter platform",
)
console = Console()


def _load_settings(verbose: bool) -> Settings:
    settings = Settings()  # type: ignore[call-arg]
    if verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)
    return settings


@asynccontextmanager
async def _open_service(
    settings: Settings,
    *,
    device: DeviceContext | None = None,
    initialize: bool = True,
) -> AsyncIterator[PricingService]:
    """Build a service for one command and close it afterwards."""
    service = build_pricing_service(settings, device=device)
    try:
        if initialize:
            await service.initialize()
        yield service
    finally:
        await service.aclose()


async def _currency_or_detected(service: PricingService, currency: str | None) -> str:
    if currency:
        return currency.upper()
    return (await service.detect_user_currency()).currency


def parse_usage(values: list[str]) -> dict[str, FeatureUsage]:
    """Parse ``feature=used`` or ``feature=used/limit`` pairs."""
    usage: dict[str, FeatureUsage] = {}
    for value in values:
        feature, sep, amount = value.partition("=")
        feature = feature.strip()
        if not sep or feature not in METERED_FEATURES:
            known = ", ".join(METERED_FEATURES)
            msg = f"expected <feature>=<used>[/<limit>] with feature in {known}"
            raise typer.BadParameter(msg, param_hint="--usage")
        used, _, limit = amount.partition("/")
        try:
            usage[feature] = FeatureUsage(
                used=int(used),
                limit=int(limit) if limit else None,
            )
        except ValueError as e:
            raise typer.BadParameter(f"invalid usage for {feature}: {amount!r}") from e
    return usage


@app.command()
def detect(
    timezone: str | None = typer.Option(None, "--timezone", help="Override the device timezone"),
    locale: str | None = typer.Option(None, "--locale", help="Override the device locale"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Detect the visitor's currency."""
    settings = _load_settings(verbose)
    device = DeviceContext.from_environment()
    if timezone or locale:
        device = device.model_copy(
            update={"timezone": timezone or device.timezone, "locale": locale or device.locale}
        )

    async def _detect() -> None:
        async with _open_service(settings, device=device, initialize=False) as service:
            result = await service.detect_user_currency()
        console.print(f"[bold green]Currency:[/bold green] {result.currency}")
        console.print(f"  Source: {result.source}")
        if result.location is not None:
            console.print(
                f"  Country: {result.location.country or '-'} ({result.location.country_code})"
            )

    asyncio.run(_detect())


@app.command()
def plans(
    currency: str | None = typer.Option(None, "-c", "--currency", help="Currency code"),
    cycle: BillingCycle = typer.Option(BillingCycle.MONTHLY, "--cycle", help="Billing cycle"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """List every tier priced in a currency."""
    settings = _load_settings(verbose)

    async def _plans() -> None:
        async with _open_service(settings) as service:
            code = await _currency_or_detected(service, currency)
            localized = service.localize_all(code, cycle)

        table = Table(title=f"Plans ({code}, {cycle})")
        table.add_column("Tier", style="bold")
        table.add_column("Price", justify="right")
        table.add_column("Yearly discount", justify="right")
        table.add_column("Applications", justify="right")
        table.add_column("AI requests", justify="right")
        for plan in localized:
            name = f"{plan.name} *" if plan.is_popular else plan.name
            discount = f"{plan.yearly_discount}%" if plan.yearly_discount else "-"
            table.add_row(
                name,
                plan.price_display,
                discount,
                str(plan.max_job_applications),
                str(plan.ai_requests_limit),
            )
        console.print(table)

    asyncio.run(_plans())


@app.command()
def compare(
    tier_id: str = typer.Argument(..., help="Tier id, e.g. 'professional'"),
    currencies: str | None = typer.Option(
        None, "--currencies", help="Comma-separated currency codes"
    ),
    cycle: BillingCycle = typer.Option(BillingCycle.MONTHLY, "--cycle", help="Billing cycle"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show one tier priced in several currencies."""
    settings = _load_settings(verbose)
    codes = [c.strip() for c in currencies.split(",") if c.strip()] if currencies else None

    async def _compare() -> None:
        async with _open_service(settings) as service:
            quotes = service.compare_across_currencies(tier_id, codes, cycle)
        if not quotes:
            console.print(f"[red]Error:[/red] unknown tier '{tier_id}'")
            raise typer.Exit(code=1)

        table = Table(title=f"{tier_id} ({cycle})")
        table.add_column("Currency")
        table.add_column("Price", justify="right")
        table.add_column("")
        for quote in quotes:
            table.add_row(quote.currency, quote.formatted, quote.savings_label or "")
        console.print(table)

    asyncio.run(_compare())


@app.command()
def savings(
    tier_id: str = typer.Argument(..., help="Tier id"),
    currency: str | None = typer.Option(None, "-c", "--currency", help="Currency code"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show what yearly billing saves over twelve monthly payments."""
    settings = _load_settings(verbose)

    async def _savings() -> None:
        async with _open_service(settings) as service:
            code = await _currency_or_detected(service, currency)
            result = service.annual_savings(tier_id, code)
        if result is None:
            console.print(f"[red]Error:[/red] unknown tier '{tier_id}'")
            raise typer.Exit(code=1)

        console.print(f"[bold]{tier_id}[/bold] in {result.currency}")
        console.print(f"  12 x monthly: {result.formatted['monthly_total']}")
        console.print(f"  Yearly:       {result.formatted['yearly_price']}")
        if result.has_savings:
            console.print(
                f"  [green]Save {result.formatted['savings']} "
                f"({result.savings_percentage}%)[/green]"
            )
        else:
            console.print("  [yellow]No yearly savings[/yellow]")

    asyncio.run(_savings())


@app.command()
def features(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show the feature matrix across tiers."""
    settings = _load_settings(verbose)

    async def _features() -> None:
        async with _open_service(settings) as service:
            rows = service.feature_matrix()
            tier_ids = [t.id for t in service.catalog.get_all()]

        table = Table(title="Features")
        table.add_column("Feature", style="bold")
        for tier_id in tier_ids:
            table.add_column(tier_id, justify="center")
        for row in rows:
            table.add_row(row.label, *(str(row.tiers.get(t, "")) for t in tier_ids))
        console.print(table)

    asyncio.run(_features())


@app.command()
def recommend(
    tier_id: str = typer.Argument(..., help="Current tier id"),
    usage: list[str] = typer.Option(
        [], "--usage", "-u", help="Usage as feature=used or feature=used/limit (repeatable)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Suggest an upgrade or downgrade from current usage."""
    settings = _load_settings(verbose)
    parsed = parse_usage(usage)

    async def _recommend() -> None:
        async with _open_service(settings) as service:
            result = service.recommend_tier_change(tier_id, parsed)

        if result.should_upgrade:
            verdict = "[bold yellow]Upgrade[/bold yellow]"
        elif result.should_downgrade:
            verdict = "[bold cyan]Downgrade[/bold cyan]"
        else:
            verdict = "[bold green]Stay[/bold green]"
        target = f" -> {result.recommended_tier.name}" if result.recommended_tier else ""
        console.print(f"{verdict}{target}")
        for reason in result.reasons:
            console.print(f"  - {reason}")

    asyncio.run(_recommend())


@app.command()
def rates(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show the current exchange-rate table (refreshing it if stale)."""
    settings = _load_settings(verbose)

    async def _rates() -> None:
        async with _open_service(settings, initialize=False) as service:
            refreshed = await service.refresh_rates()
            snapshot = service.rate_snapshot()
            infos = service.supported_currencies()

        fetched = snapshot.fetched_at.isoformat() if snapshot.fetched_at else "never (built-in)"
        table = Table(title=f"Rates per 1 USD (updated {fetched})")
        table.add_column("Code", style="bold")
        table.add_column("Name")
        table.add_column("Symbol")
        table.add_column("Rate", justify="right")
        for info in infos:
            table.add_row(info.code, info.name, info.symbol, f"{info.rate:,.4f}")
        console.print(table)
        if refreshed:
            console.print("[green]Rates refreshed[/green]")

    asyncio.run(_rates())


@app.command("set-currency")
def set_currency(
    code: str = typer.Argument(..., help="Currency code, e.g. NGN"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Remember an explicit currency choice (needs a persistent cache backend)."""
    settings = _load_settings(verbose)

    async def _set() -> bool:
        async with _open_service(settings, initialize=False) as service:
            return await service.set_user_currency(code)

    if not asyncio.run(_set()):
        console.print(f"[red]Error:[/red] unsupported currency '{code.upper()}'")
        raise typer.Exit(code=1)
    console.print(f"[green]Currency set to {code.upper()}[/green]")
    if settings.cache_backend == "memory":
        console.print("[dim]cache_backend=memory: the choice lasts for this process only[/dim]")


@app.command()
def version() -> None:
    """Show version."""
    console.print("job-hunter-pricing v0.1.0")


if __name__ == "__main__":
    app()
