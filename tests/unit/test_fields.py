"""Tests for the field-spec tagged union and FieldSchema invariants."""

from __future__ import annotations

import pytest

from tenantforms.core.exceptions import SchemaError
from tenantforms.models.fields import (
    ChoiceOption,
    FieldKind,
    FieldSchema,
    RemoteChoiceField,
    StaticChoiceField,
    TextField,
)


class TestFieldSchema:
    def test_preserves_order(self):
        schema = FieldSchema(fields=(
            TextField(field_name="b", label="B"),
            TextField(field_name="a", label="A", required=True),
        ))
        assert schema.field_names == ("b", "a")
        assert schema.required_field_names == ("a",)

    def test_duplicate_names_rejected(self):
        with pytest.raises(SchemaError):
            FieldSchema(fields=(
                TextField(field_name="sku", label="SKU"),
                TextField(field_name="sku", label="Stock code"),
            ))

    def test_get_missing_returns_none(self):
        assert FieldSchema(fields=()).get("nope") is None

    def test_discriminator_dispatches_on_kind(self):
        schema = FieldSchema.model_validate({"fields": [
            {"kind": "remote_choice", "field_name": "item_class_code", "label": "Class",
             "source": "item_classes", "render_component": "tree"},
            {"kind": "number", "field_name": "price", "label": "Price"},
        ]})
        first, second = schema
        assert isinstance(first, RemoteChoiceField)
        assert second.kind is FieldKind.NUMBER


class TestStaticChoiceField:
    def test_duplicate_option_values_rejected(self):
        with pytest.raises(SchemaError):
            StaticChoiceField(
                field_name="ins", label="Insurance",
                options=(ChoiceOption(value="Y", label="Yes"), ChoiceOption(value="Y", label="No")),
            )

    def test_values(self):
        field = StaticChoiceField(
            field_name="ins", label="Insurance",
            options=(ChoiceOption(value="Y", label="Yes"), ChoiceOption(value="N", label="No")),
        )
        assert field.values == ("Y", "N")
