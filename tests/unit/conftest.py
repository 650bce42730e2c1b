"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from pricing_core.state import EngineState
from pricing_engine.calculator import PricingCalculator
from pricing_engine.catalog import TierCatalog
from pricing_engine.converter import CurrencyConverter
from pricing_engine.rates.rate_store import RateStore
from pricing_infra.cache.memory_cache import MemoryCacheClient
from pricing_infra.cache.pricing_storage import PricingStorage
from tests.mocks.mock_settings import make_settings

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def now() -> datetime:
    """Fixed 'current time' for rate freshness checks."""
    return NOW


@pytest.fixture
def memory_cache(now: datetime) -> MemoryCacheClient:
    """Empty in-memory cache pinned to the fixed clock."""
    return MemoryCacheClient(clock=lambda: now)


@pytest.fixture
def storage(memory_cache: MemoryCacheClient) -> PricingStorage:
    """PricingStorage over the in-memory cache."""
    return PricingStorage(memory_cache)


@pytest.fixture
def engine_state() -> EngineState:
    """Fresh session state with bootstrap rates."""
    return EngineState()


@pytest.fixture
def fx_client() -> MagicMock:
    """FX client whose fetch_rates returns a fixed table."""
    client = MagicMock()
    client.fetch_rates = AsyncMock(return_value={"USD": 1.0, "EUR": 0.9, "NGN": 1500.0})
    return client


@pytest.fixture
def rate_store(
    engine_state: EngineState,
    storage: PricingStorage,
    fx_client: MagicMock,
    now: datetime,
) -> RateStore:
    """RateStore over bootstrap rates with a mocked FX client."""
    return RateStore(engine_state, storage, fx_client, clock=lambda: now)


@pytest.fixture
def converter(rate_store: RateStore) -> CurrencyConverter:
    """Converter using the bootstrap rate table."""
    return CurrencyConverter(rate_store)


@pytest.fixture
def catalog() -> TierCatalog:
    """Default tier catalog with no backend client."""
    return TierCatalog()


@pytest.fixture
def calculator(catalog: TierCatalog, converter: CurrencyConverter) -> PricingCalculator:
    """Calculator over the default catalog and bootstrap rates."""
    return PricingCalculator(catalog, converter)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Restore root logger handlers after tests that call configure_logging()."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
