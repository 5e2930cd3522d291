"""Wizard state and transition outcome models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field


class WizardMode(StrEnum):
    CREATE = "create"
    EDIT = "edit"


class StepOutcome(StrEnum):
    BLOCKED = "BLOCKED"
    ADVANCED = "ADVANCED"
    SUBMITTED = "SUBMITTED"
    SUBMIT_FAILED = "SUBMIT_FAILED"
    IGNORED = "IGNORED"  # wizard closed or a submit is already outstanding


class WizardState(BaseModel):
    """Mutable state of one open form; discarded on close or successful submit."""

    mode: WizardMode = WizardMode.CREATE
    active_tab_index: int = 0
    tab_order: tuple[str, ...] = ()
    form_values: dict[str, Any] = Field(default_factory=dict)
    locked_fields: set[str] = Field(default_factory=set)
    validation_error: Optional[str] = None
    submission_error: Optional[str] = None
    submitting: bool = False
    source_record: Optional[dict[str, Any]] = None

    @property
    def active_tab(self) -> str:
        return self.tab_order[self.active_tab_index]


class SubmitOutcome(BaseModel):
    """Result of a submit attempt; failures carry a user-displayable message."""

    ok: bool
    result: Any = None
    error: Optional[str] = None
