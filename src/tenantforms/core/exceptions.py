"""tenantforms exception hierarchy."""

from __future__ import annotations

from typing import Any


class TenantFormsError(Exception):
    """Base exception for all tenantforms errors."""


class SchemaError(TenantFormsError):
    """A field schema or tenant bundle is malformed (raised at registry build time)."""


class DataSourceError(TenantFormsError):
    """The remote data source rejected or failed a request."""

    def __init__(self, message: str, body: Any = None, status_code: int | None = None) -> None:
        self.body = body
        self.status_code = status_code
        super().__init__(message)


class CacheError(TenantFormsError):
    """Redis cache operation failed."""
