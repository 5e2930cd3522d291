"""Multi-step form wizard and the item/employee form definitions."""

from __future__ import annotations

from tenantforms.wizard.definition import FormDefinition, flatten_record, nest_values
from tenantforms.wizard.employee_form import EmployeeFormDefinition, verification_values
from tenantforms.wizard.engine import FormWizard
from tenantforms.wizard.errors import extract_error_message
from tenantforms.wizard.item_form import ItemFormDefinition

__all__ = [
    "EmployeeFormDefinition",
    "FormDefinition",
    "FormWizard",
    "ItemFormDefinition",
    "extract_error_message",
    "flatten_record",
    "nest_values",
    "verification_values",
]
