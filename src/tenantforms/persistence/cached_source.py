"""Read-through cache in front of another IDataSource.

Only ``fetch_list`` is cached: lookup lists (item classes, countries,
salary structures) are fetched by every open form and change rarely.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from tenantforms.core.exceptions import CacheError
from tenantforms.core.protocols import ICacheBackend, IDataSource

logger = logging.getLogger(__name__)


class CachedDataSource:
    """IDataSource wrapper caching list responses as JSON with a TTL."""

    KEY_PREFIX = "tenantforms:list"

    def __init__(self, inner: IDataSource, cache: ICacheBackend, ttl_seconds: int = 300) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl = ttl_seconds

    def cache_key(self, kind: str, params: Mapping[str, Any] | None = None) -> str:
        suffix = json.dumps(dict(params or {}), sort_keys=True, default=str)
        return f"{self.KEY_PREFIX}:{kind}:{suffix}"

    async def fetch_list(self, kind: str, params: Mapping[str, Any] | None = None) -> Any:
        key = self.cache_key(kind, params)
        try:
            cached = self._cache.get(key)
        except CacheError:
            logger.warning("Cache read failed for %s; fetching directly", key, exc_info=True)
            cached = None
        if cached is not None:
            return json.loads(cached)

        result = await self._inner.fetch_list(kind, params)
        try:
            self._cache.setex(key, self._ttl, json.dumps(result, default=str))
        except CacheError:
            logger.warning("Cache write failed for %s", key, exc_info=True)
        return result

    async def fetch_by_id(self, kind: str, record_id: str) -> Any:
        return await self._inner.fetch_by_id(kind, record_id)

    async def create(self, kind: str, payload: dict[str, Any]) -> Any:
        result = await self._inner.create(kind, payload)
        self.invalidate(kind)
        return result

    async def update(self, kind: str, record_id: str, payload: dict[str, Any]) -> Any:
        result = await self._inner.update(kind, record_id, payload)
        self.invalidate(kind)
        return result

    def invalidate(self, kind: str) -> None:
        """Drop every cached list of ``kind``, whichever process cached it."""
        prefix = f"{self.KEY_PREFIX}:{kind}:"
        try:
            removed = self._cache.delete_prefix(prefix)
        except CacheError:
            logger.warning("Cache invalidation failed for %s", prefix, exc_info=True)
            return
        logger.debug("Invalidated %d cached %s list(s)", removed, kind)
