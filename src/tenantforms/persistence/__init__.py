"""Data-source and cache backends behind Protocol interfaces."""

from __future__ import annotations

from tenantforms.core.config import AppSettings
from tenantforms.core.protocols import ICacheBackend, IDataSource, IHttpTransport
from tenantforms.persistence.cached_source import CachedDataSource
from tenantforms.persistence.redis_backend import RedisCacheBackend
from tenantforms.persistence.transport_source import Route, TransportDataSource


def create_data_source(
    transport: IHttpTransport,
    settings: AppSettings | None = None,
    cache: ICacheBackend | None = None,
    routes: dict[str, Route] | None = None,
) -> IDataSource:
    """Create a wired-up data source from application settings.

    Lists are cached only when caching is enabled; a Redis backend is
    built from settings unless ``cache`` is given.
    """
    if settings is None:
        settings = AppSettings()

    source: IDataSource = TransportDataSource(transport, routes)
    if not settings.cache.enabled:
        return source

    if cache is None:
        cache = RedisCacheBackend.from_settings(settings.redis)
    return CachedDataSource(source, cache, ttl_seconds=settings.cache.list_ttl_seconds)
