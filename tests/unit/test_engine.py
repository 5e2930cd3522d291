"""Tests for FormWizard transitions, submission and option loading."""

from __future__ import annotations

import asyncio
from datetime import date, datetime

import pytest

from tenantforms.core.exceptions import DataSourceError
from tenantforms.models.wizard import StepOutcome, WizardMode
from tenantforms.wizard.employee_form import EmployeeFormDefinition
from tenantforms.wizard.engine import BUSY_MESSAGE, CLOSED_MESSAGE, FormWizard
from tenantforms.wizard.item_form import ItemFormDefinition
from tests.fakes import GatedDataSource, MemoryDataSource

TODAY = date(2025, 6, 1)

DETAILS = {
    "item_type_code": "1",
    "item_group": "Dairy",
    "item_name": "Milk",
    "item_class_code": "10101001",
    "svc_charge": "N",
    "ins": "N",
    "selling_price": "25",
    "sales_account": "4000",
    "buying_price": "18",
    "purchase_account": "5000",
    "tax_preference": "Taxable",
    "preferred_vendor": "Zambeef",
}


@pytest.fixture
def item_definition(registry):
    return ItemFormDefinition.for_tenant(registry, "ZRA")


@pytest.fixture
def employee_wizard(registry, data_source):
    definition = EmployeeFormDefinition.for_tenant(registry, "ZRA")
    wizard = FormWizard(definition, data_source, today=lambda: TODAY)
    wizard.initialize(WizardMode.CREATE)
    return wizard


def _item_wizard(definition, data_source, **kwargs):
    wizard = FormWizard(definition, data_source, today=lambda: TODAY, **kwargs)
    wizard.initialize(WizardMode.CREATE)
    for name, value in DETAILS.items():
        wizard.set_field(name, value)
    return wizard


class TestInitialize:
    def test_create_uses_empty_defaults(self, employee_wizard):
        assert employee_wizard.values["nationality"] == "Zambian"
        assert employee_wizard.active_tab == "personal"
        assert employee_wizard.state.mode is WizardMode.CREATE

    def test_edit_flattens_record(self, item_definition, data_source):
        wizard = FormWizard(item_definition, data_source)
        wizard.initialize("edit", {"id": "ITEM-1", "itemName": "Milk", "batchInfo": {"hasBatchNumber": False}})
        assert wizard.values["item_name"] == "Milk"
        assert wizard.values["has_batch_number"] is False
        assert wizard.state.source_record["id"] == "ITEM-1"

    def test_edit_without_record_starts_empty(self, item_definition, data_source):
        wizard = FormWizard(item_definition, data_source)
        wizard.initialize(WizardMode.EDIT)
        assert wizard.values == item_definition.empty_defaults()


class TestNavigation:
    async def test_blocked_next_keeps_tab(self, employee_wizard):
        outcome = await employee_wizard.next()
        assert outcome is StepOutcome.BLOCKED
        assert employee_wizard.state.active_tab_index == 0
        assert employee_wizard.state.validation_error == "First name and last name are required"

    @pytest.mark.parametrize(
        ("born", "expected"),
        [(datetime(1990, 1, 1, 8, 30), StepOutcome.ADVANCED), (datetime(2025, 6, 1, 0, 0), StepOutcome.BLOCKED)],
    )
    async def test_datetime_date_of_birth(self, employee_wizard, born, expected):
        for name, value in {
            "first_name": "Mwila", "last_name": "Banda", "gender": "Female",
            "nrc_id": "123456/10/1", "social_security_napsa": "NAP-9",
            "nhima_health_insurance": "NH-9", "tpin_id": "1000000001",
        }.items():
            employee_wizard.set_field(name, value)
        employee_wizard.set_field("date_of_birth", born)
        assert await employee_wizard.next() is expected

    async def test_next_advances_and_clears_error(self, item_definition, data_source):
        wizard = FormWizard(item_definition, data_source, today=lambda: TODAY)
        wizard.initialize(WizardMode.CREATE)
        assert await wizard.next() is StepOutcome.BLOCKED
        for name, value in DETAILS.items():
            wizard.set_field(name, value)
        assert await wizard.next() is StepOutcome.ADVANCED
        assert wizard.active_tab == "tax_details"
        assert wizard.state.validation_error is None

    async def test_previous_clamps_at_zero(self, item_definition, data_source):
        wizard = _item_wizard(item_definition, data_source)
        wizard.state.validation_error = "stale"
        wizard.previous()
        assert wizard.state.active_tab_index == 0
        assert wizard.state.validation_error is None

    async def test_previous_does_not_validate(self, item_definition, data_source):
        wizard = _item_wizard(item_definition, data_source)
        await wizard.next()
        wizard.set_field("item_name", "")
        wizard.previous()
        assert wizard.active_tab == "details"

    async def test_service_item_submits_from_tax_tab(self, item_definition, data_source):
        wizard = _item_wizard(item_definition, data_source)
        wizard.set_field("item_type_code", "3")
        wizard.set_field("item_group", "Services")
        await wizard.next()
        wizard.set_field("tax_category", "LPO")
        assert wizard.is_terminal_tab
        assert await wizard.next() is StepOutcome.SUBMITTED
        _, kind, payload = data_source.calls[-1]
        assert kind == "items"
        assert "batchInfo" not in payload

    async def test_go_to_tab_rules(self, item_definition, data_source):
        wizard = _item_wizard(item_definition, data_source)
        assert wizard.go_to_tab("inventory_details") is False
        await wizard.next()
        assert wizard.go_to_tab("details") is True

        wizard.initialize(WizardMode.EDIT, {"id": "ITEM-1", "itemTypeCode": 1})
        assert wizard.go_to_tab("inventory_details") is True
        assert wizard.go_to_tab("unknown") is False


class TestSetField:
    def test_locked_fields_refuse_writes(self, employee_wizard):
        employee_wizard.apply_verification({"first_name": "Mwila", "nrc_id": "1/1/1", "gender": None})
        employee_wizard.set_field("first_name", "Changed")
        assert employee_wizard.values["first_name"] == "Mwila"
        assert employee_wizard.state.locked_fields == {"first_name", "nrc_id"}

    def test_locked_fields_stay_in_payload(self, employee_wizard):
        employee_wizard.apply_verification({"nrc_id": "1/1/1"})
        payload = employee_wizard.definition.build_payload(employee_wizard.values, WizardMode.CREATE)
        assert payload["identityInfo"]["NrcId"] == "1/1/1"

    def test_returns_fields_to_refetch(self, item_definition, data_source):
        wizard = _item_wizard(item_definition, data_source)
        assert wizard.set_field("item_type_code", "2") == {"item_group"}
        assert wizard.values["item_group"] == ""


class TestSubmit:
    async def test_create_success_closes_and_notifies(self, item_definition, data_source):
        results = []
        wizard = _item_wizard(item_definition, data_source, on_success=results.append)
        wizard.set_field("tax_category", "Non-Export")
        outcome = await wizard.submit()
        assert outcome.ok
        assert results == [outcome.result]
        assert not wizard.is_open
        assert wizard.values == item_definition.empty_defaults()
        assert data_source.calls[-1][0] == "create"

    async def test_opaque_create_result_is_passed_through(self, item_definition):
        class IdOnlyCreate(MemoryDataSource):
            async def create(self, kind, payload):
                await super().create(kind, payload)
                return "ITEM-0001"

        results = []
        wizard = _item_wizard(item_definition, IdOnlyCreate(), on_success=results.append)
        wizard.set_field("tax_category", "Non-Export")
        outcome = await wizard.submit()
        assert outcome.ok
        assert outcome.result == "ITEM-0001"
        assert results == ["ITEM-0001"]
        assert not wizard.is_open

    async def test_failing_success_callback_still_reports_saved(self, item_definition, data_source):
        def explode(result):
            raise RuntimeError("listener broke")

        wizard = _item_wizard(item_definition, data_source, on_success=explode)
        outcome = await wizard.submit()
        assert outcome.ok
        assert outcome.result["itemName"] == "Milk"
        assert not wizard.is_open

    async def test_edit_calls_update_with_record_id(self, item_definition, data_source):
        wizard = FormWizard(item_definition, data_source)
        wizard.initialize(WizardMode.EDIT, {"id": "ITEM-9", "itemName": "Milk"})
        outcome = await wizard.submit()
        assert outcome.ok
        operation, kind, (record_id, payload) = data_source.calls[-1]
        assert (operation, kind, record_id) == ("update", "items", "ITEM-9")
        assert payload["itemName"] == "Milk"

    async def test_edit_without_id_creates(self, item_definition, data_source):
        wizard = FormWizard(item_definition, data_source)
        wizard.initialize(WizardMode.EDIT, {"itemName": "Milk"})
        await wizard.submit()
        assert data_source.calls[-1][0] == "create"

    async def test_failure_keeps_values_and_reports_message(self, item_definition, data_source):
        data_source.fail_with = DataSourceError(
            "rejected", body={"_server_messages": '["{\\"message\\": \\"SKU exists\\"}"]'},
        )
        wizard = _item_wizard(item_definition, data_source)
        assert await wizard.next() is StepOutcome.ADVANCED
        assert await wizard.next() is StepOutcome.BLOCKED  # tax category missing
        wizard.set_field("tax_category", "LPO")
        assert await wizard.next() is StepOutcome.ADVANCED
        assert wizard.is_terminal_tab
        assert await wizard.next() is StepOutcome.SUBMIT_FAILED
        assert wizard.state.submission_error == "SKU exists"
        assert wizard.state.submitting is False
        assert wizard.active_tab == "inventory_details"
        assert wizard.values["item_name"] == "Milk"
        assert wizard.is_open

    async def test_second_submit_refused_while_outstanding(self, item_definition):
        gate = asyncio.Event()

        class SlowCreate(MemoryDataSource):
            async def create(self, kind, payload):
                await gate.wait()
                return await super().create(kind, payload)

        source = SlowCreate()
        wizard = _item_wizard(item_definition, source)
        first = asyncio.create_task(wizard.submit())
        await asyncio.sleep(0)
        second = await wizard.submit()
        assert second.error == BUSY_MESSAGE
        assert await wizard.next() is StepOutcome.IGNORED
        gate.set()
        assert (await first).ok
        assert [c[0] for c in source.calls] == ["create"]

    async def test_submit_on_closed_wizard(self, item_definition, data_source):
        wizard = _item_wizard(item_definition, data_source)
        wizard.close()
        outcome = await wizard.submit()
        assert outcome.error == CLOSED_MESSAGE
        assert data_source.calls == []


class TestLoadOptions:
    async def test_loads_scoped_options(self, item_definition):
        source = MemoryDataSource({"item_groups": {"data": {"data": [{"code": "G1"}]}}})
        wizard = _item_wizard(item_definition, source)
        options = await wizard.load_options("item_group")
        assert options == [{"code": "G1"}]
        assert wizard.options["item_group"] == options
        assert source.calls[-1] == ("fetch_list", "item_groups", {"itemTypeCode": "1"})

    async def test_non_remote_field(self, item_definition, data_source):
        wizard = _item_wizard(item_definition, data_source)
        assert await wizard.load_options("item_name") is None

    async def test_stale_scope_discarded(self, item_definition):
        source = GatedDataSource({"item_groups": [{"code": "G1"}]})
        wizard = _item_wizard(item_definition, source)
        pending = asyncio.create_task(wizard.load_options("item_group"))
        await asyncio.sleep(0)
        wizard.set_field("item_type_code", "2")
        source.release()
        assert await pending is None
        assert "item_group" not in wizard.options

    async def test_closed_wizard_discards_result(self, item_definition):
        source = GatedDataSource({"item_groups": [{"code": "G1"}]})
        wizard = _item_wizard(item_definition, source)
        pending = asyncio.create_task(wizard.load_options("item_group"))
        await asyncio.sleep(0)
        wizard.close()
        source.release()
        assert await pending is None
        assert wizard.options == {}
