"""FormDefinition — the per-form rules a FormWizard runs.

A definition owns everything form-specific: tab order, empty defaults,
how a nested record flattens into form values, per-tab validation,
discriminant side effects and payload assembly. The wizard owns state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Mapping

from tenantforms.models.wizard import WizardMode
from tenantforms.wizard.values import dig, first_defined

# (form key, path into the nested record)
Binding = tuple[str, tuple[str, ...]]


def flatten_record(
    record: Mapping[str, Any],
    bindings: tuple[Binding, ...],
    defaults: Mapping[str, Any],
) -> dict[str, Any]:
    """Flatten ``record`` into form values, first defined value winning.

    For each binding: the nested value, else a flat value under the same
    wire name, else a flat value under the form key, else the default.
    """
    values = dict(defaults)
    for key, path in bindings:
        values[key] = first_defined(
            dig(record, *path),
            record.get(path[-1]),
            record.get(key),
            default=defaults.get(key, ""),
        )
    return values


def nest_values(values: Mapping[str, Any], bindings: tuple[Binding, ...]) -> dict[str, Any]:
    """Inverse of ``flatten_record``: place each form value at its record path."""
    nested: dict[str, Any] = {}
    for key, path in bindings:
        node = nested
        for step in path[:-1]:
            node = node.setdefault(step, {})
        node[path[-1]] = values.get(key)
    return nested


class FormDefinition(ABC):
    """Base class for a wizard-driven form."""

    kind: str
    tab_order: tuple[str, ...]
    tab_labels: Mapping[str, str] = {}

    @abstractmethod
    def empty_defaults(self) -> dict[str, Any]: ...

    @abstractmethod
    def flatten(self, record: Mapping[str, Any]) -> dict[str, Any]: ...

    @abstractmethod
    def validate_tab(
        self, values: Mapping[str, Any], tab: str, *, mode: WizardMode, today: date
    ) -> str | None:
        """Blocking message for ``tab``, or None when it may be left."""

    @abstractmethod
    def build_payload(self, values: Mapping[str, Any], mode: WizardMode) -> dict[str, Any]: ...

    def on_field_change(self, values: dict[str, Any], name: str, value: Any) -> set[str]:
        """Apply a field write to ``values``; return fields needing an options re-fetch."""
        values[name] = value
        return set()

    def visible_tabs(self, values: Mapping[str, Any]) -> tuple[str, ...]:
        return self.tab_order

    def record_id(self, record: Mapping[str, Any] | None) -> str | None:
        if not record or record.get("id") in (None, ""):
            return None
        return str(record["id"])

    def option_source(self, field_name: str) -> str | None:
        """Data-source kind feeding a remote-choice field."""
        return None

    def option_scope(self, field_name: str, values: Mapping[str, Any]) -> dict[str, Any] | None:
        return None
