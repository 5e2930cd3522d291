"""TenantRegistry — resolves per-tenant configuration from a tenant key.

The registry is built once at start-up and passed by reference to whatever
needs resolution. Every ``resolve_*`` call is total: an unknown key falls
back to the default tenant and logs a warning, it never raises.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from tenantforms.core.config import AppSettings
from tenantforms.core.exceptions import SchemaError
from tenantforms.models.fields import FieldSchema
from tenantforms.models.tenant import (
    TaxResolution,
    TaxRuleTable,
    TenantBundle,
    TenantFeatureProfile,
)
from tenantforms.resolver import tenants

logger = logging.getLogger(__name__)


def normalize_key(tenant_key: str | None) -> str:
    return (tenant_key or "").strip().upper()


class TenantRegistry:
    """Immutable lookup of tenant bundles and tax tables."""

    def __init__(
        self,
        *,
        bundles: Iterable[TenantBundle],
        default_tenant: str,
        aliases: Mapping[str, str] | None = None,
        baseline_tax: TaxResolution,
        alternate_tax: TaxResolution,
        alternate_tax_tenant: str,
    ) -> None:
        self._bundles: dict[str, TenantBundle] = {}
        for bundle in bundles:
            key = normalize_key(bundle.tenant_key)
            if key in self._bundles:
                raise SchemaError(f"tenant {bundle.tenant_key!r} registered twice")
            self._bundles[key] = bundle

        self._aliases = {normalize_key(k): normalize_key(v) for k, v in (aliases or {}).items()}
        for alias, target in self._aliases.items():
            if target not in self._bundles:
                raise SchemaError(f"alias {alias!r} points at unknown tenant {target!r}")

        default_key = normalize_key(default_tenant)
        if default_key not in self._bundles:
            raise SchemaError(f"default tenant {default_tenant!r} is not registered")
        self._default_key = default_key

        self._baseline_tax = baseline_tax
        self._alternate_tax = alternate_tax
        # Alternate tenant is compared after alias resolution, so "ROLA" and
        # "COMP-00004" select the same table.
        alt = normalize_key(alternate_tax_tenant)
        self._alternate_tax_key = self._aliases.get(alt, alt)

    # ---- lookup ----

    @property
    def tenant_keys(self) -> tuple[str, ...]:
        return tuple(self._bundles)

    @property
    def default_tenant(self) -> str:
        return self._default_key

    def canonical_key(self, tenant_key: str | None) -> str | None:
        """Registered key for ``tenant_key`` (aliases applied), or None."""
        key = normalize_key(tenant_key)
        key = self._aliases.get(key, key)
        return key if key in self._bundles else None

    def resolve_bundle(self, tenant_key: str | None) -> TenantBundle:
        key = self.canonical_key(tenant_key)
        if key is None:
            logger.warning(
                "Unknown tenant key %r, falling back to %s", tenant_key, self._default_key
            )
            key = self._default_key
        return self._bundles[key]

    # ---- public resolvers ----

    def resolve_field_schema(self, tenant_key: str | None) -> FieldSchema:
        return self.resolve_bundle(tenant_key).item_fields

    def resolve_feature_profile(self, tenant_key: str | None) -> TenantFeatureProfile:
        return self.resolve_bundle(tenant_key).features

    def resolve_tax_table(self, tenant_key: str | None) -> TaxResolution:
        key = normalize_key(tenant_key)
        key = self._aliases.get(key, key)
        if key and key == self._alternate_tax_key:
            return self._alternate_tax
        return self._baseline_tax

    def tax_table(self, tenant_key: str | None) -> TaxRuleTable:
        return self.resolve_tax_table(tenant_key).table


def build_default_registry(settings: AppSettings | None = None) -> TenantRegistry:
    """Create the registry of built-in tenants from application settings."""
    if settings is None:
        settings = AppSettings()

    return TenantRegistry(
        bundles=tenants.BUNDLES,
        default_tenant=settings.default_tenant,
        aliases=tenants.TENANT_ALIASES,
        baseline_tax=TaxResolution(
            table=tenants.BASELINE_TAX_TABLE, auto_populate=tenants.BASELINE_AUTO_POPULATE,
        ),
        alternate_tax=TaxResolution(
            table=tenants.ALTERNATE_TAX_TABLE, auto_populate=tenants.ALTERNATE_AUTO_POPULATE,
        ),
        alternate_tax_tenant=settings.tax.alternate_tenant,
    )
