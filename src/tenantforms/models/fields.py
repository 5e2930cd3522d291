"""Form field specifications — a tagged union over the field kind.

A tenant's form layout is an ordered ``FieldSchema``; renderers dispatch on
``FieldSpec.kind`` and never inspect attributes to guess the variant.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from tenantforms.core.exceptions import SchemaError


class FieldKind(StrEnum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    DATE = "date"
    STATIC_CHOICE = "static_choice"
    REMOTE_CHOICE = "remote_choice"


class RenderComponent(StrEnum):
    """Picker variants available for remote choices."""

    FLAT_LIST = "flat-list"
    TREE = "tree"
    CATEGORY_SPECIAL = "category-special"


class _BaseField(BaseModel):
    model_config = {"frozen": True}

    field_name: str
    label: str
    required: bool = False
    placeholder: str = ""
    layout_span: int = Field(default=1, ge=1, le=4)


class TextField(_BaseField):
    kind: Literal[FieldKind.TEXT] = FieldKind.TEXT


class TextareaField(_BaseField):
    kind: Literal[FieldKind.TEXTAREA] = FieldKind.TEXTAREA


class NumberField(_BaseField):
    kind: Literal[FieldKind.NUMBER] = FieldKind.NUMBER


class DateField(_BaseField):
    kind: Literal[FieldKind.DATE] = FieldKind.DATE


class ChoiceOption(BaseModel):
    model_config = {"frozen": True}

    value: str
    label: str


class StaticChoiceField(_BaseField):
    kind: Literal[FieldKind.STATIC_CHOICE] = FieldKind.STATIC_CHOICE
    options: tuple[ChoiceOption, ...] = ()

    @model_validator(mode="after")
    def _unique_values(self) -> StaticChoiceField:
        values = [opt.value for opt in self.options]
        if len(values) != len(set(values)):
            raise SchemaError(f"duplicate option values in {self.field_name!r}")
        return self

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(opt.value for opt in self.options)


class RemoteChoiceField(_BaseField):
    kind: Literal[FieldKind.REMOTE_CHOICE] = FieldKind.REMOTE_CHOICE
    source: str  # data-source kind the options are fetched from
    render_component: RenderComponent = RenderComponent.FLAT_LIST
    display_field: Optional[Literal["code", "name"]] = None


FieldSpec = Annotated[
    Union[TextField, TextareaField, NumberField, DateField, StaticChoiceField, RemoteChoiceField],
    Field(discriminator="kind"),
]


class FieldSchema(BaseModel):
    """Ordered, immutable sequence of field specs with unique names."""

    model_config = {"frozen": True}

    fields: tuple[FieldSpec, ...]

    @model_validator(mode="after")
    def _unique_names(self) -> FieldSchema:
        seen: set[str] = set()
        for spec in self.fields:
            if spec.field_name in seen:
                raise SchemaError(f"duplicate field name {spec.field_name!r}")
            seen.add(spec.field_name)
        return self

    def __iter__(self) -> Iterator[FieldSpec]:  # type: ignore[override]
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, field_name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.field_name == field_name:
                return spec
        return None

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.field_name for spec in self.fields)

    @property
    def required_field_names(self) -> tuple[str, ...]:
        return tuple(spec.field_name for spec in self.fields if spec.required)
