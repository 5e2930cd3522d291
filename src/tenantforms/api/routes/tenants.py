"""Per-tenant configuration endpoints.

Unknown tenant keys resolve to the default tenant, same as in-process
callers; the response's ``tenant_key`` shows which bundle was used.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from tenantforms.resolver.registry import TenantRegistry

router = APIRouter(tags=["tenants"])


def _registry(request: Request) -> TenantRegistry:
    return request.app.state.registry


@router.get("")
async def list_tenants(request: Request) -> dict[str, Any]:
    registry = _registry(request)
    return {"tenants": list(registry.tenant_keys), "default": registry.default_tenant}


@router.get("/{tenant_key}/item-fields")
async def item_fields(tenant_key: str, request: Request) -> dict[str, Any]:
    bundle = _registry(request).resolve_bundle(tenant_key)
    return {"tenant_key": bundle.tenant_key, "fields": bundle.item_fields.model_dump(mode="json")["fields"]}


@router.get("/{tenant_key}/features")
async def features(tenant_key: str, request: Request) -> dict[str, Any]:
    return _registry(request).resolve_feature_profile(tenant_key).model_dump(mode="json")


@router.get("/{tenant_key}/tax-table")
async def tax_table(tenant_key: str, request: Request) -> dict[str, Any]:
    return _registry(request).resolve_tax_table(tenant_key).model_dump(mode="json")
