"""Per-tenant configuration bundles: feature flags, tax tables, field schemas."""

from __future__ import annotations

from typing import Mapping

from pydantic import BaseModel, Field, field_validator

from tenantforms.models.fields import FieldSchema


class TenantFeatureProfile(BaseModel):
    """Employee-form behavior switches for one tenant."""

    model_config = {"frozen": True}

    tenant_key: str
    require_identity_verification: bool = False
    show_restricted_fields: bool = False  # NRC, social security, health insurance, TPIN
    show_ceiling_fields: bool = False
    restricted_fields_required: bool = False
    departments: tuple[str, ...] = ()

    @field_validator("departments")
    @classmethod
    def _dedupe_departments(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))


class TaxRule(BaseModel):
    """Tax values auto-filled when a tax category is picked."""

    model_config = {"frozen": True}

    tax_type: str
    tax_percent: str
    tax_code: str
    tax_description: str = ""


class TaxRuleTable(BaseModel):
    """Category name -> TaxRule."""

    model_config = {"frozen": True}

    name: str
    rules: Mapping[str, TaxRule] = Field(default_factory=dict)

    def get(self, category: str) -> TaxRule | None:
        return self.rules.get(category)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self.rules)


class TaxResolution(BaseModel):
    model_config = {"frozen": True}

    table: TaxRuleTable
    auto_populate: bool


class TenantBundle(BaseModel):
    """Everything a data-entry screen needs to know about one tenant."""

    model_config = {"frozen": True}

    tenant_key: str
    item_fields: FieldSchema
    features: TenantFeatureProfile
