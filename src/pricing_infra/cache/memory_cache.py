"""In-process implementation of CacheClient for single-session use and tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MemoryCacheClient:
    """Dictionary-backed store with lazy expiry; state lives as long as the instance."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        """Initialize an empty store with an injectable clock."""
        self._clock = clock
        self._entries: dict[str, tuple[str, datetime]] = {}

    def _live(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    async def get(self, key: str) -> str | None:
        """Return the value for ``key`` unless it has expired."""
        return self._live(key)

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        """Store ``value`` until ``ttl_seconds`` from now."""
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        self._entries[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        """Check whether ``key`` holds an unexpired value."""
        return self._live(key) is not None
