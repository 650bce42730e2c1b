"""Public interface re-exports for pricing_core."""

from pricing_core.interfaces.cache import CacheClient
from pricing_core.interfaces.geolocation import (
    Coordinates,
    PositionProvider,
    StaticPositionProvider,
)

__all__ = [
    "CacheClient",
    "Coordinates",
    "PositionProvider",
    "StaticPositionProvider",
]
