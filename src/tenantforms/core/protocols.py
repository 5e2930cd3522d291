"""Protocol interfaces for the collaborators tenantforms talks to.

All boundary communication uses these Protocols — structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Data Source
# ---------------------------------------------------------------------------

@runtime_checkable
class IDataSource(Protocol):
    """Create/read/update capability handed to forms and pickers by the caller."""

    async def fetch_list(
        self, kind: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    async def fetch_by_id(self, kind: str, record_id: str) -> dict[str, Any]: ...

    async def create(self, kind: str, payload: dict[str, Any]) -> dict[str, Any]: ...

    async def update(
        self, kind: str, record_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# HTTP Transport
# ---------------------------------------------------------------------------

@runtime_checkable
class IHttpTransport(Protocol):
    """Async HTTP client returning decoded response bodies."""

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any: ...

    async def post(self, path: str, json: Any = None) -> Any: ...

    async def put(self, path: str, json: Any = None) -> Any: ...

    async def patch(self, path: str, json: Any = None) -> Any: ...

    async def delete(self, path: str) -> Any: ...


# ---------------------------------------------------------------------------
# Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def delete_prefix(self, prefix: str) -> int: ...
