"""Tenant configuration resolution."""

from __future__ import annotations

from tenantforms.resolver.registry import TenantRegistry, build_default_registry, normalize_key

__all__ = ["TenantRegistry", "build_default_registry", "normalize_key"]
