"""Redis store for cached lookup lists."""

from __future__ import annotations

import re

import redis

from tenantforms.core.config import RedisConfig
from tenantforms.core.exceptions import CacheError

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def glob_escape(prefix: str) -> str:
    """Escape ``prefix`` for use in a Redis MATCH pattern."""
    return _GLOB_SPECIAL.sub(r"\\\1", prefix)


class RedisCacheBackend:
    """ICacheBackend shared by every process serving the same tenant data.

    ``delete_prefix`` lets a write in one process drop the cached lists
    that all other processes would otherwise keep serving until expiry.
    """

    SCAN_BATCH = 500

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        *,
        client: redis.Redis | None = None,
    ) -> None:
        self._client = client or redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    @classmethod
    def from_settings(cls, config: RedisConfig) -> RedisCacheBackend:
        return cls(host=config.host, port=config.port, db=config.db)

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.RedisError as exc:
            raise CacheError(f"Reading cached list {key!r} failed: {exc}") from exc

    def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            self._client.setex(key, ttl, value)
        except redis.RedisError as exc:
            raise CacheError(f"Caching list {key!r} failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise CacheError(f"Dropping cached list {key!r} failed: {exc}") from exc

    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``; returns how many went."""
        removed = 0
        batch: list[str] = []
        try:
            for key in self._client.scan_iter(match=f"{glob_escape(prefix)}*", count=self.SCAN_BATCH):
                batch.append(key)
                if len(batch) >= self.SCAN_BATCH:
                    removed += self._client.delete(*batch)
                    batch.clear()
            if batch:
                removed += self._client.delete(*batch)
        except redis.RedisError as exc:
            raise CacheError(f"Dropping cached lists under {prefix!r} failed: {exc}") from exc
        return removed
