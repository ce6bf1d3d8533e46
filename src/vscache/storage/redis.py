"""
Redis Cache Store.

Keeps one Redis list per cache key with the newest snapshot at the head.
Requires the redis package (``pip install vscache[redis]``).
"""

from __future__ import annotations

import json
import os
import time
from typing import Callable

from vscache.core.logging import get_logger
from vscache.core.types import CacheEntry, CacheKey
from vscache.storage.base import CacheStore, register_cache_store

logger = get_logger("storage.redis")


class RedisCacheStore(CacheStore):
    """
    Redis cache store.

    ``put`` is an LPUSH and ``latest`` an LINDEX 0, so the store stays
    append-only and a read always sees the last committed push.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        prefix: str = "vscache",
        clock: Callable[[], float] = time.time,
        client=None,
    ) -> None:
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL (or from VSCACHE_REDIS_URL env)
            prefix: Key prefix for all cache lists
            clock: Time source for ``written_at``
            client: Pre-built ``redis.asyncio`` client (tests, shared pools)
        """
        self._redis_url = redis_url or os.environ.get(
            "VSCACHE_REDIS_URL",
            "redis://localhost:6379/0",
        )
        self._prefix = prefix
        self._clock = clock
        self._client = client

    def _get_client(self):
        """Lazy-load Redis client."""
        if self._client is None:
            try:
                import redis.asyncio as redis
            except ImportError:
                raise ImportError(
                    "redis package required for RedisCacheStore. Install with: pip install redis"
                ) from None
            self._client = redis.from_url(self._redis_url, decode_responses=True)
        return self._client

    def _make_key(self, key: CacheKey) -> str:
        return f"{self._prefix}:cache:{key.storage_key}"

    async def put(self, key: CacheKey, payload: str) -> None:
        client = self._get_client()
        record = json.dumps({"payload": payload, "written_at": self._clock()})
        await client.lpush(self._make_key(key), record)

    async def latest(self, key: CacheKey) -> CacheEntry | None:
        client = self._get_client()
        raw = await client.lindex(self._make_key(key), 0)
        if raw is None:
            return None
        record = json.loads(raw)
        return CacheEntry(key=key, payload=record["payload"], written_at=float(record["written_at"]))

    async def count(self, key: CacheKey) -> int:
        client = self._get_client()
        return int(await client.llen(self._make_key(key)))

    async def compact(self) -> int:
        client = self._get_client()
        removed = 0
        async for redis_key in client.scan_iter(match=f"{self._prefix}:cache:*"):
            length = int(await client.llen(redis_key))
            if length > 1:
                await client.ltrim(redis_key, 0, 0)
                removed += length - 1
        logger.info(f"Compacted cache lists, removed {removed} snapshots")
        return removed

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def health_check(self) -> bool:
        try:
            client = self._get_client()
            return bool(await client.ping())
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            return False


register_cache_store("redis", RedisCacheStore)
