"""IDataSource over an async HTTP transport.

The backend wraps most responses as ``{"status_code": ..., "data": ...}``;
a non-2xx status inside the envelope is treated the same as an HTTP error.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from pydantic import BaseModel

from tenantforms.core.exceptions import DataSourceError
from tenantforms.core.protocols import IHttpTransport

logger = logging.getLogger(__name__)


class Route(BaseModel):
    """Endpoint paths for one record kind. Unset paths are unsupported operations."""

    model_config = {"frozen": True}

    list_path: Optional[str] = None
    get_path: Optional[str] = None
    create_path: Optional[str] = None
    update_path: Optional[str] = None
    id_param: str = "id"


DEFAULT_ROUTES: dict[str, Route] = {
    "items": Route(
        list_path=".item.item.get_all_items_api",
        get_path=".item.item.get_item_by_id_api",
        create_path=".item.item.create_item_api",
        update_path=".item.item.update_item_api",
        id_param="item_code",
    ),
    "item_groups": Route(
        list_path=".item.item.get_all_item_groups_api",
        create_path=".item.item.create_item_group_api",
        update_path=".item.item.update_item_group_api",
    ),
    "item_classes": Route(list_path="/api/item-class-list"),
    "packaging_units": Route(list_path="/api/packaging-unit-codes"),
    "units_of_measure": Route(list_path="/api/unit-of-measure-list"),
    "countries": Route(list_path="/country-list/"),
    "rola_countries": Route(list_path="/country-list/"),
    "rola_units_of_measure": Route(list_path="/unit-of-measure-list/"),
    "employees": Route(
        list_path="/api/v1/employees",
        get_path="/api/v1/employees/detail",
        create_path="/api/v1/employees",
        update_path="/api/v1/employees/update",
    ),
    "employee_verification": Route(list_path="/api/v1/employees/verify"),
    "work_schedules": Route(list_path="/api/v1/work-schedules"),
    "salary_structures": Route(list_path="/api/v1/salary-structures"),
}


def unwrap_envelope(body: Any) -> Any:
    """Return the ``data`` of an enveloped response, raising on a failure status."""
    if not isinstance(body, Mapping) or "status_code" not in body:
        return body
    status = body.get("status_code")
    try:
        status = int(status)
    except (TypeError, ValueError):
        raise DataSourceError(f"Malformed status_code {status!r}", body=body) from None
    if not 200 <= status < 300:
        message = body.get("message") or body.get("error") or f"Request failed with status {status}"
        raise DataSourceError(str(message), body=body, status_code=status)
    return body.get("data")


class TransportDataSource:
    """Production IDataSource routing record kinds to HTTP endpoints."""

    def __init__(self, transport: IHttpTransport, routes: Mapping[str, Route] | None = None) -> None:
        self._transport = transport
        self._routes = dict(DEFAULT_ROUTES if routes is None else routes)

    def _path(self, kind: str, operation: str) -> str:
        route = self._routes.get(kind)
        path = getattr(route, f"{operation}_path", None) if route is not None else None
        if path is None:
            raise DataSourceError(f"No {operation} route configured for {kind!r}")
        return path

    def _with_id(self, kind: str, path: str, record_id: str) -> str:
        return f"{path}?{urlencode({self._routes[kind].id_param: record_id})}"

    async def fetch_list(self, kind: str, params: Mapping[str, Any] | None = None) -> Any:
        path = self._path(kind, "list")
        logger.debug("GET %s for %s params=%s", path, kind, params)
        return unwrap_envelope(await self._transport.get(path, params=params))

    async def fetch_by_id(self, kind: str, record_id: str) -> Any:
        path = self._with_id(kind, self._path(kind, "get"), record_id)
        return unwrap_envelope(await self._transport.get(path))

    async def create(self, kind: str, payload: dict[str, Any]) -> Any:
        path = self._path(kind, "create")
        logger.info("Creating %s via %s", kind, path)
        return unwrap_envelope(await self._transport.post(path, json=payload))

    async def update(self, kind: str, record_id: str, payload: dict[str, Any]) -> Any:
        path = self._with_id(kind, self._path(kind, "update"), record_id)
        logger.info("Updating %s %s via %s", kind, record_id, path)
        return unwrap_envelope(await self._transport.put(path, json=payload))
