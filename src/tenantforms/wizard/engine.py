"""FormWizard — gated multi-step form state machine.

Transitions never raise: blocked tabs and failed submissions are recorded
on ``WizardState`` (``validation_error`` / ``submission_error``) so any UI
layer can render them the same way.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Mapping

from tenantforms.classification.normalize import unwrap_list
from tenantforms.core.lifecycle import ScreenLifetime
from tenantforms.core.protocols import IDataSource
from tenantforms.models.wizard import StepOutcome, SubmitOutcome, WizardMode, WizardState
from tenantforms.wizard.definition import FormDefinition
from tenantforms.wizard.errors import extract_error_message

logger = logging.getLogger(__name__)

CLOSED_MESSAGE = "This form is no longer open."
BUSY_MESSAGE = "A submission is already in progress."


class FormWizard:
    """Drives one open form: tabs, validation, option loading and submission."""

    def __init__(
        self,
        definition: FormDefinition,
        data_source: IDataSource,
        *,
        lifetime: ScreenLifetime | None = None,
        on_success: Callable[[Any], None] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._definition = definition
        self._data_source = data_source
        self._lifetime = lifetime or ScreenLifetime(f"{definition.kind} form")
        self._on_success = on_success
        self._today = today
        self._option_generation: dict[str, int] = {}
        self.options: dict[str, list[Any]] = {}
        self.state = WizardState(
            tab_order=definition.tab_order, form_values=definition.empty_defaults(),
        )

    # ---- properties ----

    @property
    def definition(self) -> FormDefinition:
        return self._definition

    @property
    def is_open(self) -> bool:
        return self._lifetime.alive

    @property
    def values(self) -> dict[str, Any]:
        return self.state.form_values

    @property
    def active_tab(self) -> str:
        return self.state.active_tab

    @property
    def visible_tabs(self) -> tuple[str, ...]:
        return self._definition.visible_tabs(self.state.form_values)

    @property
    def is_terminal_tab(self) -> bool:
        visible = self.visible_tabs
        return not visible or self.active_tab == visible[-1]

    # ---- transitions ----

    def initialize(self, mode: WizardMode | str, source_record: Mapping[str, Any] | None = None) -> None:
        if not self.is_open:
            logger.debug("initialize() on closed %s wizard ignored", self._definition.kind)
            return
        mode = WizardMode(mode)
        if mode is WizardMode.EDIT and source_record is not None:
            values = self._definition.flatten(source_record)
            record = dict(source_record)
        else:
            values = self._definition.empty_defaults()
            record = None
        self.state = WizardState(
            mode=mode,
            tab_order=self._definition.tab_order,
            form_values=values,
            source_record=record,
        )
        self.options.clear()

    def set_field(self, name: str, value: Any) -> set[str]:
        """Write one field. Returns the fields whose options must be re-fetched."""
        if not self.is_open:
            return set()
        if name in self.state.locked_fields:
            logger.info("Ignoring write to locked field %r", name)
            return set()
        values = dict(self.state.form_values)
        refetch = self._definition.on_field_change(values, name, value)
        self.state.form_values = values
        for field_name in refetch:
            # Outstanding fetches for the old scope are now stale.
            self._option_generation[field_name] = self._option_generation.get(field_name, 0) + 1
            self.options.pop(field_name, None)
        return refetch

    def apply_verification(self, verified: Mapping[str, Any]) -> None:
        """Write values from an identity lookup and make them read-only."""
        if not self.is_open:
            return
        values = dict(self.state.form_values)
        for name, value in verified.items():
            if value is None:
                continue
            values[name] = value
            self.state.locked_fields.add(name)
        self.state.form_values = values

    def validate_current_tab(self) -> str | None:
        return self._definition.validate_tab(
            self.state.form_values,
            self.active_tab,
            mode=self.state.mode,
            today=self._today(),
        )

    async def next(self) -> StepOutcome:
        if not self.is_open or self.state.submitting:
            return StepOutcome.IGNORED
        error = self.validate_current_tab()
        if error:
            self.state.validation_error = error
            return StepOutcome.BLOCKED
        self.state.validation_error = None

        if self.is_terminal_tab:
            outcome = await self.submit()
            return StepOutcome.SUBMITTED if outcome.ok else StepOutcome.SUBMIT_FAILED

        visible = self.visible_tabs
        if self.active_tab in visible:
            following = visible[visible.index(self.active_tab) + 1]
        else:
            following = visible[-1]
        self.state.active_tab_index = self.state.tab_order.index(following)
        return StepOutcome.ADVANCED

    def previous(self) -> None:
        if not self.is_open or self.state.submitting:
            return
        self.state.validation_error = None
        visible = self.visible_tabs
        if self.active_tab in visible:
            position = max(visible.index(self.active_tab) - 1, 0)
        else:
            position = 0
        self.state.active_tab_index = self.state.tab_order.index(visible[position])

    def go_to_tab(self, tab: str) -> bool:
        """Jump to a tab: any visible tab when editing, only back when creating."""
        if not self.is_open or self.state.submitting or tab not in self.visible_tabs:
            return False
        index = self.state.tab_order.index(tab)
        if self.state.mode is WizardMode.CREATE and index > self.state.active_tab_index:
            return False
        self.state.active_tab_index = index
        self.state.validation_error = None
        return True

    async def submit(self) -> SubmitOutcome:
        if not self.is_open:
            return SubmitOutcome(ok=False, error=CLOSED_MESSAGE)
        if self.state.submitting:
            logger.warning("Submit of %s refused: previous submit outstanding", self._definition.kind)
            return SubmitOutcome(ok=False, error=BUSY_MESSAGE)

        self.state.submitting = True
        self.state.submission_error = None
        kind = self._definition.kind
        record_id = self._definition.record_id(self.state.source_record)
        try:
            payload = self._definition.build_payload(self.state.form_values, self.state.mode)
            if self.state.mode is WizardMode.EDIT and record_id is not None:
                result = await self._data_source.update(kind, record_id, payload)
            else:
                result = await self._data_source.create(kind, payload)
        except Exception as exc:
            message = extract_error_message(exc)
            logger.warning("Saving %s failed: %s", kind, message)
            if self.is_open:
                self.state.submitting = False
                self.state.submission_error = message
            return SubmitOutcome(ok=False, error=message)

        logger.info("Saved %s (%s)", kind, self.state.mode)
        outcome = SubmitOutcome(ok=True, result=result)
        was_open = self.is_open
        self.close()
        if was_open and self._on_success is not None:
            try:
                self._on_success(result)
            except Exception:
                # Already saved; listener errors are only logged.
                logger.exception("on_success callback for %s failed", kind)
        return outcome

    # ---- remote options ----

    async def load_options(self, field_name: str) -> list[Any] | None:
        """Fetch options for a remote-choice field scoped to current values.

        Returns None, leaving state untouched, if the wizard closed or the
        field's scope changed while the fetch was in flight.
        """
        source = self._definition.option_source(field_name)
        if source is None or not self.is_open:
            return None
        generation = self._option_generation.get(field_name, 0) + 1
        self._option_generation[field_name] = generation
        scope = self._definition.option_scope(field_name, self.state.form_values)
        try:
            response = await self._lifetime.guard(self._data_source.fetch_list(source, scope))
        except Exception:
            logger.exception("Failed to load options for %r from %r", field_name, source)
            return None
        if not self.is_open or self._option_generation.get(field_name) != generation:
            return None
        options = unwrap_list(response)
        self.options[field_name] = options
        return options

    def close(self) -> None:
        """Discard state; async completions arriving later are dropped."""
        self._lifetime.close()
        self.options.clear()
        self.state = WizardState(
            tab_order=self._definition.tab_order,
            form_values=self._definition.empty_defaults(),
        )
