"""
Read-through cache orchestration.

Wraps a fetch+normalize coroutine with the CacheStore and the freshness
policy. The same code path serves every resource kind.
"""

from __future__ import annotations

import json
import time
from typing import Any, Awaitable, Callable

from vscache.cache.freshness import is_fresh
from vscache.core.logging import get_logger
from vscache.core.types import CacheKey, CacheSource
from vscache.storage.base import CacheStore

logger = get_logger("cache")

FetchFn = Callable[[], Awaitable[Any]]


class CacheOrchestrator:
    """
    Read-through cache over a CacheStore.

    Contract:
    - A fresh hit returns the stored payload and never calls ``fetch_fn``.
    - A miss or stale hit awaits ``fetch_fn``; on success one snapshot is
      written, on failure the exception propagates and nothing is written.
    - Stale snapshots are never served as a fallback.
    """

    def __init__(self, store: CacheStore, clock: Callable[[], float] = time.time) -> None:
        self._store = store
        self._clock = clock

    @property
    def store(self) -> CacheStore:
        return self._store

    async def read_through(
        self,
        key: CacheKey,
        ttl: float,
        fetch_fn: FetchFn,
    ) -> tuple[Any, CacheSource]:
        """
        Get from cache or fetch and store.

        Args:
            key: Cache key of the query
            ttl: Max snapshot age in seconds for this resource kind
            fetch_fn: Coroutine factory returning the normalized payload

        Returns:
            Tuple of (payload, source)
        """
        entry = await self._store.latest(key)
        if entry is not None and is_fresh(entry.written_at, self._clock(), ttl):
            logger.debug(f"Cache hit for {key.storage_key}")
            return json.loads(entry.payload), CacheSource.CACHE

        logger.debug(f"Cache {'stale' if entry else 'miss'} for {key.storage_key}, fetching")
        payload = await fetch_fn()

        serialized = json.dumps(payload)
        await self._store.put(key, serialized)
        return json.loads(serialized), CacheSource.FRESH


__all__ = ["CacheOrchestrator", "FetchFn"]
