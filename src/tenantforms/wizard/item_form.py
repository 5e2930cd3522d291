"""Inventory item form: details -> tax details -> inventory details.

Service items (item type ``3``) carry no stock, so they skip the inventory
tab and their payload has no ``batchInfo`` at all.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from tenantforms.models.fields import FieldSchema, RemoteChoiceField
from tenantforms.models.tenant import TaxResolution
from tenantforms.models.wizard import WizardMode
from tenantforms.resolver.registry import TenantRegistry
from tenantforms.resolver.tenants import SERVICE_ITEM_TYPE
from tenantforms.wizard.definition import Binding, FormDefinition, flatten_record
from tenantforms.wizard.values import is_blank, text, to_number

DETAILS = "details"
TAX_DETAILS = "tax_details"
INVENTORY_DETAILS = "inventory_details"

DEFAULT_SHELF_LIFE_DAYS = 52

Number = Union[int, float]
Scalar = Union[str, int, float]


# ---------------------------------------------------------------------------
# Wire payload
# ---------------------------------------------------------------------------

class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VendorInfo(_Wire):
    preferred_vendor: Scalar = ""
    sales_account: Scalar = ""
    purchase_account: Scalar = ""


class TaxInfo(_Wire):
    tax_category: Scalar = ""
    tax_preference: Scalar = ""
    tax_type: Scalar = ""
    tax_code: Scalar = ""
    tax_name: Scalar = ""
    tax_description: Scalar = ""
    tax_percent: Scalar = ""
    country_code: Scalar = ""


class InventoryInfo(_Wire):
    valuation_method: Scalar = ""
    tracking_method: Scalar = ""
    reorder_level: Scalar = ""
    min_stock_level: Scalar = ""
    max_stock_level: Scalar = ""


class BatchInfo(_Wire):
    has_batch_number: bool = False
    create_new_batch: bool = False
    # Dates and batch numbers are always strings; "" means not set.
    batch_number: Scalar = ""
    has_expiry_date: bool = False
    expiry_date: Scalar = ""
    manufacturing_date: Scalar = ""
    shelf_life_in_days: Number = DEFAULT_SHELF_LIFE_DAYS
    end_of_life: Scalar = ""


class ItemPayload(_Wire):
    item_name: Scalar = ""
    item_group: Scalar = ""
    item_class_code: Scalar = ""
    item_type_code: Number = 0
    origin_nation_code: Scalar = ""
    packaging_unit_code: Scalar = ""
    svc_charge: Scalar = ""
    ins: Scalar = ""
    selling_price: Number = 0
    buying_price: Number = 0
    unit_of_measure_cd: Scalar = ""
    description: Scalar = ""
    sku: Scalar = ""
    weight: Scalar = ""
    weight_unit: Scalar = ""
    dimension_length: Scalar = ""
    dimension_width: Scalar = ""
    dimension_height: Scalar = ""
    brand: Scalar = ""
    vendor_info: VendorInfo
    tax_info: TaxInfo
    inventory_info: InventoryInfo
    batch_info: Optional[BatchInfo] = None


_TOP_LEVEL = tuple(
    name for name in ItemPayload.model_fields
    if name not in ("vendor_info", "tax_info", "inventory_info", "batch_info")
)
_GROUPS: tuple[tuple[str, type[_Wire]], ...] = (
    ("vendorInfo", VendorInfo),
    ("taxInfo", TaxInfo),
    ("inventoryInfo", InventoryInfo),
    ("batchInfo", BatchInfo),
)

ITEM_BINDINGS: tuple[Binding, ...] = tuple(
    (name, (to_camel(name),)) for name in _TOP_LEVEL
) + tuple(
    (name, (group, to_camel(name)))
    for group, model in _GROUPS
    for name in model.model_fields
)

EMPTY_ITEM: dict[str, Any] = {
    **{name: "" for name, _ in ITEM_BINDINGS},
    "has_batch_number": False,
    "create_new_batch": False,
    "has_expiry_date": False,
    "track_inventory": False,
    "dimension_unit": "",
}

TAX_CLUSTER = ("tax_type", "tax_percent", "tax_code", "tax_description", "tax_name")

# Required regardless of tenant, checked after the tenant schema's own required fields.
COMMERCIAL_REQUIRED: tuple[tuple[str, str, bool], ...] = (
    ("selling_price", "Selling Price", True),
    ("sales_account", "Sales Account", False),
    ("buying_price", "Buying Price", True),
    ("purchase_account", "Purchase Account", False),
    ("tax_preference", "Tax Preference", False),
    ("preferred_vendor", "Preferred Vendor", False),
)


def is_service_item(values: Mapping[str, Any]) -> bool:
    return to_number(values.get("item_type_code")) == int(SERVICE_ITEM_TYPE)


def _missing_numeric(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class ItemFormDefinition(FormDefinition):
    """Item create/edit form bound to one tenant's schema and tax table."""

    kind = "items"
    tab_order = (DETAILS, TAX_DETAILS, INVENTORY_DETAILS)
    tab_labels = {
        DETAILS: "Details",
        TAX_DETAILS: "Tax Details",
        INVENTORY_DETAILS: "Inventory Details",
    }

    def __init__(self, schema: FieldSchema, tax: TaxResolution) -> None:
        self.schema = schema
        self.tax = tax

    @classmethod
    def for_tenant(cls, registry: TenantRegistry, tenant_key: str | None) -> ItemFormDefinition:
        return cls(registry.resolve_field_schema(tenant_key), registry.resolve_tax_table(tenant_key))

    def empty_defaults(self) -> dict[str, Any]:
        return dict(EMPTY_ITEM)

    def flatten(self, record: Mapping[str, Any]) -> dict[str, Any]:
        return flatten_record(record, ITEM_BINDINGS, EMPTY_ITEM)

    def visible_tabs(self, values: Mapping[str, Any]) -> tuple[str, ...]:
        if is_service_item(values):
            return (DETAILS, TAX_DETAILS)
        return self.tab_order

    # ---- validation ----

    def validate_tab(
        self, values: Mapping[str, Any], tab: str, *, mode: WizardMode, today: date
    ) -> str | None:
        if tab == DETAILS:
            return self._validate_details(values)
        if tab == TAX_DETAILS:
            if is_blank(values.get("tax_category")):
                return "Please select a Tax Category."
            return None
        if tab == INVENTORY_DETAILS:
            return self._validate_inventory(values)
        return None

    def _validate_details(self, values: Mapping[str, Any]) -> str | None:
        if is_blank(values.get("item_class_code")):
            return "Item Class Code is required."
        for spec in self.schema:
            if spec.required and is_blank(values.get(spec.field_name)):
                return f"{spec.label} is required. Please fill in all required fields."
        for name, label, numeric in COMMERCIAL_REQUIRED:
            value = values.get(name)
            missing = _missing_numeric(value) if numeric else is_blank(value)
            if missing:
                return f"{label} is required. Please fill in all required fields."
        return None

    def _validate_inventory(self, values: Mapping[str, Any]) -> str | None:
        if values.get("has_batch_number") and is_blank(values.get("batch_number")):
            return "Batch number is required when batch tracking is enabled."
        if values.get("has_expiry_date") and is_blank(values.get("expiry_date")):
            return "Expiry date is required when expiry tracking is enabled."
        low, high = values.get("min_stock_level"), values.get("max_stock_level")
        if not _missing_numeric(low) and not _missing_numeric(high):
            if to_number(low) > to_number(high):
                return "Minimum stock level cannot exceed maximum stock level."
        return None

    # ---- discriminants ----

    def on_field_change(self, values: dict[str, Any], name: str, value: Any) -> set[str]:
        if name == "item_type_code":
            values[name] = value
            values["item_group"] = ""
            return {"item_group"}
        if name == "tax_category":
            self._apply_tax_category(values, value)
            return set()
        values[name] = value
        return set()

    def _apply_tax_category(self, values: dict[str, Any], category: Any) -> None:
        if not self.tax.auto_populate:
            values["tax_category"] = category
            return
        rule = self.tax.table.get(str(category or ""))
        if rule is None:
            # Unknown category: clear everything so no stale tax values survive.
            values["tax_category"] = ""
            for key in TAX_CLUSTER:
                values[key] = ""
            return
        values.update(
            tax_category=category,
            tax_type=rule.tax_type,
            tax_percent=rule.tax_percent,
            tax_code=rule.tax_code,
            tax_description=rule.tax_description,
            tax_name=category,
        )

    def option_source(self, field_name: str) -> str | None:
        spec = self.schema.get(field_name)
        if isinstance(spec, RemoteChoiceField):
            return spec.source
        return None

    def option_scope(self, field_name: str, values: Mapping[str, Any]) -> dict[str, Any] | None:
        if field_name == "item_group" and not is_blank(values.get("item_type_code")):
            return {"itemTypeCode": values["item_type_code"]}
        return None

    # ---- payload ----

    def build_payload(self, values: Mapping[str, Any], mode: WizardMode) -> dict[str, Any]:
        top = {name: text(values, name) for name in _TOP_LEVEL}
        for name in ("item_type_code", "selling_price", "buying_price"):
            top[name] = to_number(values.get(name))

        tax = {name: text(values, name) for name in TaxInfo.model_fields}
        tax["country_code"] = values.get("country_code") or values.get("origin_nation_code") or ""

        payload = ItemPayload(
            **top,
            vendor_info=VendorInfo(**{n: text(values, n) for n in VendorInfo.model_fields}),
            tax_info=TaxInfo(**tax),
            inventory_info=InventoryInfo(**{n: text(values, n) for n in InventoryInfo.model_fields}),
            batch_info=None if is_service_item(values) else self._batch_info(values),
        )
        return payload.model_dump(by_alias=True, exclude_none=True)

    @staticmethod
    def _batch_info(values: Mapping[str, Any]) -> BatchInfo:
        has_batch = bool(values.get("has_batch_number"))
        has_expiry = bool(values.get("has_expiry_date"))
        return BatchInfo(
            has_batch_number=has_batch,
            create_new_batch=False,
            batch_number=text(values, "batch_number") if has_batch else "",
            has_expiry_date=has_expiry,
            expiry_date=text(values, "expiry_date") if has_expiry else "",
            manufacturing_date=text(values, "manufacturing_date") if has_expiry else "",
            shelf_life_in_days=to_number(values.get("shelf_life_in_days")) or DEFAULT_SHELF_LIFE_DAYS,
            end_of_life=values.get("end_of_life") or "",
        )
