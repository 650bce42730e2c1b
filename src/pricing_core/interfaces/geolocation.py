"""Device position interface used by the device-geolocation strategy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair reported by the visitor's device."""

    latitude: float
    longitude: float


@runtime_checkable
class PositionProvider(Protocol):
    """Source of device coordinates (browser geolocation, mobile GPS, request hints).

    Implementations return None when the device has no position to offer and
    raise ``PermissionError`` when the visitor declines the prompt.
    """

    async def get_position(self) -> Coordinates | None:
        """Return the current device coordinates, or None."""
        ...


class StaticPositionProvider:
    """Position provider returning fixed coordinates supplied by the host."""

    def __init__(self, coordinates: Coordinates | None = None) -> None:
        """Initialize with optional coordinates."""
        self._coordinates = coordinates

    async def get_position(self) -> Coordinates | None:
        """Return the configured coordinates."""
        return self._coordinates
