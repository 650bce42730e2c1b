"""Redis-backed implementation of CacheClient for multi-process deployments."""

from __future__ import annotations

from redis.asyncio import Redis


class RedisCacheClient:
    """Shared key/value store backed by Redis; values round-trip as UTF-8 strings."""

    def __init__(self, redis: Redis) -> None:  # type: ignore[type-arg]
        """Wrap an existing redis-py asyncio client."""
        self._redis = redis

    @classmethod
    def from_url(cls, url: str) -> RedisCacheClient:
        """Create a client for ``url`` (e.g. 'redis://localhost:6379/0')."""
        return cls(Redis.from_url(url))

    async def get(self, key: str) -> str | None:
        """Fetch ``key``, decoding bytes responses."""
        raw = await self._redis.get(key)
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    async def set(self, key: str, value: str, ttl_seconds: int = 86400) -> None:
        """Store ``key`` with Redis-side expiry."""
        await self._redis.set(name=key, value=value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        """Delete ``key``."""
        await self._redis.delete(key)

    async def exists(self, key: str) -> bool:
        """Return True when Redis reports ``key`` present."""
        return bool(await self._redis.exists(key))

    async def close(self) -> None:
        """Release the connection pool."""
        await self._redis.aclose()
