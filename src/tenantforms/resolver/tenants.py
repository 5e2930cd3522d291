"""Registered tenant bundles.

ZRA is the default tenant; ROLA is registered under its company code
``COMP-00004`` with ``ROLA`` as an alias.
"""

from __future__ import annotations

from tenantforms.models.fields import (
    ChoiceOption,
    FieldSchema,
    RemoteChoiceField,
    RenderComponent,
    StaticChoiceField,
    TextareaField,
    TextField,
)
from tenantforms.models.tenant import TaxRule, TaxRuleTable, TenantBundle, TenantFeatureProfile

ZRA = "ZRA"
ROLA = "COMP-00004"

TENANT_ALIASES: dict[str, str] = {"ROLA": ROLA}

SERVICE_ITEM_TYPE = "3"

ITEM_TYPE_OPTIONS = (
    ChoiceOption(value="1", label="Raw Material"),
    ChoiceOption(value="2", label="Finished Product"),
    ChoiceOption(value=SERVICE_ITEM_TYPE, label="Service"),
)


def _yes_no(labels: tuple[str, str]) -> tuple[ChoiceOption, ...]:
    return (ChoiceOption(value="Y", label=labels[0]), ChoiceOption(value="N", label=labels[1]))


# ---------------------------------------------------------------------------
# Item field schemas
# ---------------------------------------------------------------------------

ZRA_ITEM_FIELDS = FieldSchema(fields=(
    StaticChoiceField(field_name="item_type_code", label="Item Type", required=True,
                      options=ITEM_TYPE_OPTIONS),
    RemoteChoiceField(field_name="item_group", label="Item Category", required=True,
                      source="item_groups", render_component=RenderComponent.CATEGORY_SPECIAL),
    TextField(field_name="item_name", label="Items Name", required=True, layout_span=3),
    TextareaField(field_name="description", label="Description", layout_span=3),
    RemoteChoiceField(field_name="item_class_code", label="Item Class",
                      source="item_classes", render_component=RenderComponent.TREE),
    RemoteChoiceField(field_name="packaging_unit_code", label="Packaging Unit",
                      source="packaging_units"),
    RemoteChoiceField(field_name="origin_nation_code", label="Country Code",
                      source="countries"),
    RemoteChoiceField(field_name="unit_of_measure_cd", label="Unit of Measurement",
                      source="units_of_measure"),
    StaticChoiceField(field_name="svc_charge", label="Service Charge", required=True,
                      options=_yes_no(("Y", "N"))),
    StaticChoiceField(field_name="ins", label="INSURANCE", required=True,
                      options=_yes_no(("Y", "N"))),
    TextField(field_name="sku", label="SKU", layout_span=3),
))

# Packaging unit is not picked in the UI for ROLA; it is sent from form defaults.
ROLA_ITEM_FIELDS = FieldSchema(fields=(
    StaticChoiceField(field_name="item_type_code", label="Item Type", required=True,
                      options=ITEM_TYPE_OPTIONS),
    RemoteChoiceField(field_name="item_group", label="Item Category", required=True,
                      source="item_groups", render_component=RenderComponent.CATEGORY_SPECIAL),
    TextField(field_name="item_name", label="Item Name", required=True),
    TextareaField(field_name="description", label="Description"),
    TextField(field_name="item_class_code", label="HSN Code", required=True,
              placeholder="Enter HSN / item class code"),
    RemoteChoiceField(field_name="origin_nation_code", label="Country", required=True,
                      source="rola_countries", display_field="name"),
    RemoteChoiceField(field_name="unit_of_measure_cd", label="UOM", required=True,
                      source="rola_units_of_measure"),
    StaticChoiceField(field_name="svc_charge", label="Service Charge", required=True,
                      options=_yes_no(("Yes", "No"))),
    StaticChoiceField(field_name="ins", label="Insurance", required=True,
                      options=_yes_no(("Yes", "No"))),
    TextField(field_name="sku", label="SKU", required=True),
))


# ---------------------------------------------------------------------------
# Employee feature profiles
# ---------------------------------------------------------------------------

ZRA_FEATURES = TenantFeatureProfile(
    tenant_key=ZRA,
    require_identity_verification=True,
    show_restricted_fields=True,
    show_ceiling_fields=True,
    restricted_fields_required=True,
    departments=(
        "Customs Services",
        "Domestic Taxes",
        "Corporate Services",
        "Strategy & Innovation",
        "ICT",
        "Human Resources",
        "Finance",
        "Legal Services",
        "Internal Audit",
        "Investigations",
        "Tax Appeals",
        "Large Taxpayers Office",
    ),
)

ROLA_FEATURES = TenantFeatureProfile(
    tenant_key=ROLA,
    departments=(
        "Sales",
        "Marketing",
        "Operations",
        "Finance",
        "Human Resources",
        "IT",
        "Customer Service",
        "Product Development",
        "Quality Assurance",
        "Logistics",
    ),
)


# ---------------------------------------------------------------------------
# Tax tables
# ---------------------------------------------------------------------------

BASELINE_TAX_TABLE = TaxRuleTable(name="zra-vat", rules={
    "Non-Export": TaxRule(
        tax_type="Standard Rated", tax_percent="16", tax_code="A",
        tax_description="Applies to products and services subject to VAT at 16% by default.",
    ),
    "LPO": TaxRule(
        tax_type="Zero-Rated", tax_percent="0", tax_code="C2",
        tax_description=(
            "Applies to transactions involving customers or projects granted "
            "exemption from paying taxes."
        ),
    ),
    "Export": TaxRule(
        tax_type="Export", tax_percent="0", tax_code="C1",
        tax_description=(
            "Applies to goods or services exported outside the country and exempt from VAT."
        ),
    ),
})
BASELINE_AUTO_POPULATE = True

ALTERNATE_TAX_TABLE = TaxRuleTable(name="gst", rules={
    "GST Exempt": TaxRule(tax_type="GST", tax_percent="0", tax_code="GST0",
                          tax_description="Nil rated"),
    "GST 5%": TaxRule(tax_type="GST", tax_percent="5", tax_code="GST5",
                      tax_description="Goods and Services Tax 5%"),
    "GST 12%": TaxRule(tax_type="GST", tax_percent="12", tax_code="GST12",
                       tax_description="Goods and Services Tax 12%"),
    "GST 18%": TaxRule(tax_type="GST", tax_percent="18", tax_code="GST18",
                       tax_description="Goods and Services Tax 18%"),
    "GST 28%": TaxRule(tax_type="GST", tax_percent="28", tax_code="GST28",
                       tax_description="Goods and Services Tax 28%"),
})
ALTERNATE_AUTO_POPULATE = False


BUNDLES: tuple[TenantBundle, ...] = (
    TenantBundle(tenant_key=ZRA, item_fields=ZRA_ITEM_FIELDS, features=ZRA_FEATURES),
    TenantBundle(tenant_key=ROLA, item_fields=ROLA_ITEM_FIELDS, features=ROLA_FEATURES),
)
