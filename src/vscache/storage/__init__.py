"""
Cache stores for vscache.

Configuration via environment:
    VSCACHE_STORAGE_BACKEND=memory  # or 'redis'
    VSCACHE_REDIS_URL=redis://localhost:6379/0

Example:
    >>> from vscache.storage import get_cache_store, InMemoryCacheStore
    >>>
    >>> store = get_cache_store()
    >>> store = InMemoryCacheStore()
"""

from __future__ import annotations

import os
from typing import Any

from vscache.storage.base import (
    CacheStore,
    get_cache_store_class,
    list_cache_stores,
    register_cache_store,
)
from vscache.storage.memory import InMemoryCacheStore
from vscache.storage.redis import RedisCacheStore


def get_cache_store(backend_name: str | None = None, **kwargs: Any) -> CacheStore:
    """
    Get cache store from environment or by name.

    Args:
        backend_name: Backend name, or None to read from VSCACHE_STORAGE_BACKEND env
        **kwargs: Passed to the store constructor

    Returns:
        CacheStore instance

    Raises:
        ValueError: If backend name is unknown
    """
    if backend_name is None:
        backend_name = os.environ.get("VSCACHE_STORAGE_BACKEND", "memory")

    store_class = get_cache_store_class(backend_name)

    if store_class is None:
        available = list_cache_stores()
        raise ValueError(
            f"Unknown cache store: '{backend_name}'. Available: {', '.join(available)}"
        )

    return store_class(**kwargs)


__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "get_cache_store",
    "get_cache_store_class",
    "list_cache_stores",
    "register_cache_store",
]
