"""diskcache-backed implementation of CacheClient.

Survives process restarts, so a visitor's currency override and the last
rate snapshot outlive a CLI invocation or a worker recycle.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import diskcache
import structlog

logger = structlog.get_logger()


class DiskCacheClient:
    """Persistent key/value store backed by diskcache (SQLite under the hood)."""

    def __init__(self, cache_dir: Path) -> None:
        """Open (creating if needed) the cache directory."""
        cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(str(cache_dir))
        logger.debug("disk_cache_opened", path=str(cache_dir))

    async def get(self, key: str) -> str | None:
        """Read ``key`` off the event loop thread."""
        value = await asyncio.to_thread(self._cache.get, key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        """Write ``key`` with an expiry of ``ttl_seconds``."""
        await asyncio.to_thread(self._cache.set, key, value, expire=ttl_seconds)

    async def delete(self, key: str) -> None:
        """Remove ``key``; diskcache ignores missing keys."""
        await asyncio.to_thread(self._cache.delete, key)

    async def exists(self, key: str) -> bool:
        """Check for an unexpired ``key``."""
        return bool(await asyncio.to_thread(self._cache.__contains__, key))

    def close(self) -> None:
        """Close the underlying SQLite handle."""
        self._cache.close()
