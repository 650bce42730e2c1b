"""Key/value storage contract for persisted pricing state.

Everything stored through this interface is regenerable (a rate snapshot can
be re-fetched, a location re-detected), so implementations need no schema,
transactions, or migrations. Values are plain strings; callers serialize.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheClient(Protocol):
    """String key/value store with per-key expiry."""

    async def get(self, key: str) -> str | None:
        """Return the stored string, or None if missing or expired."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        """Overwrite ``key`` with ``value`` for ``ttl_seconds``."""
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        ...

    async def exists(self, key: str) -> bool:
        """Return True if ``key`` holds an unexpired value."""
        ...
