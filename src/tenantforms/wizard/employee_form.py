"""Employee onboarding form.

Six tabs: personal -> contact -> employment -> leave setup -> compensation
-> work schedule. The wire record nests values under ``personalInfo``,
``contactInfo``, ``employmentInfo``, ``payrollInfo`` and ``leaveInfo``;
the statutory ``identityInfo`` block is only sent when creating, and
``ceilingInfo`` only for tenants that show ceiling fields.
"""

from __future__ import annotations

import copy
from datetime import date, datetime
from typing import Annotated, Any, Mapping, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tenantforms.models.tenant import TenantFeatureProfile
from tenantforms.models.wizard import WizardMode
from tenantforms.resolver.registry import TenantRegistry
from tenantforms.wizard.definition import Binding, FormDefinition, flatten_record, nest_values
from tenantforms.wizard.values import dig, is_blank, to_number

PERSONAL = "personal"
CONTACT = "contact"
EMPLOYMENT = "employment"
LEAVE_SETUP = "leave_setup"
COMPENSATION = "compensation"
SCHEDULE = "schedule"

AUTO_SOURCE = "AUTO"
BANK_PAYMENT = "BANK"

Text = Annotated[Union[str, int, float], BeforeValidator(lambda v: "" if v is None else v)]
Numeric = Annotated[Union[int, float], BeforeValidator(to_number)]
Components = Annotated[list[dict[str, Any]], BeforeValidator(lambda v: v or [])]


# ---------------------------------------------------------------------------
# Salary structure defaults
# ---------------------------------------------------------------------------

class SalaryStructureDefault(BaseModel):
    """A salary structure picked automatically from a level or job title."""

    model_config = {"frozen": True}

    structure_id: str
    level: str
    designations: tuple[str, ...] = ()
    default_gross: int = 0


DEFAULT_SALARY_STRUCTURES: tuple[SalaryStructureDefault, ...] = (
    SalaryStructureDefault(
        structure_id="exec", level="Senior",
        designations=("Software Developer", "Senior Developer"), default_gross=25000,
    ),
    SalaryStructureDefault(
        structure_id="mid", level="Mid", designations=("Accountant",), default_gross=15000,
    ),
    SalaryStructureDefault(
        structure_id="entry", level="Junior", designations=("Intern",), default_gross=8000,
    ),
)


# ---------------------------------------------------------------------------
# Wire payload
# ---------------------------------------------------------------------------

class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(_Wire):
    first_name: Text = Field("", alias="FirstName")
    other_names: Text = Field("", alias="OtherNames")
    last_name: Text = Field("", alias="LastName")
    dob: Text = Field("", alias="Dob")
    gender: Text = Field("", alias="Gender")
    nationality: Text = Field("", alias="Nationality")
    marital_status: Text = ""


class Address(_Wire):
    street: Text = ""
    city: Text = ""
    province: Text = ""
    postal_code: Text = ""
    country: Text = ""


class EmergencyContact(_Wire):
    name: Text = ""
    phone: Text = ""
    relationship: Text = ""


class ContactInfo(_Wire):
    email: Text = Field("", alias="Email")
    work_email: Text = ""
    phone_number: Text = ""
    alternate_phone: Text = ""
    address: Address = Field(default_factory=Address)
    emergency_contact: EmergencyContact = Field(default_factory=EmergencyContact)


class EmploymentInfo(_Wire):
    employee_id: Text = ""
    department: Text = Field("", alias="Department")
    job_title: Text = Field("", alias="JobTitle")
    level: Text = Field("", alias="Level")
    reporting_manager: Text = ""
    employee_type: Text = Field("", alias="EmployeeType")
    joining_date: Text = ""
    probation_period: Text = ""
    contract_end_date: Text = ""
    work_location: Text = ""
    work_address: Text = ""
    shift: Text = ""
    work_schedule_id: Text = ""


class BankAccount(_Wire):
    account_number: Text = Field("", alias="AccountNumber")
    account_name: Text = Field("", alias="AccountName")
    bank_name: Text = Field("", alias="BankName")
    branch_code: Text = ""
    account_type: Text = Field("", alias="AccountType")


class PayrollInfo(_Wire):
    gross_salary: Numeric = 0
    currency: Text = ""
    payment_frequency: Text = ""
    payment_method: Text = ""
    salary_structure: Text = ""
    salary_structure_source: Text = ""
    custom_salary_components: Components = Field(default_factory=list)
    bank_account: BankAccount = Field(default_factory=BankAccount)


class LeaveInfo(_Wire):
    opening_leave_balance: Text = ""
    initial_leave_rate_monthly: Numeric = 0


class IdentityInfo(_Wire):
    nrc_id: Text = Field("", alias="NrcId")
    social_security_napsa: Text = Field("", alias="SocialSecurityNapsa")
    nhima_health_insurance: Text = Field("", alias="NhimaHealthInsurance")
    tpin_id: Text = Field("", alias="TpinId")


class CeilingInfo(_Wire):
    ceiling_year: Numeric = 0
    ceiling_amount: Numeric = 0


class EmployeePayload(_Wire):
    status: Text = ""
    notes: Text = ""
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    employment_info: EmploymentInfo = Field(default_factory=EmploymentInfo)
    payroll_info: PayrollInfo = Field(default_factory=PayrollInfo)
    leave_info: LeaveInfo = Field(default_factory=LeaveInfo)
    identity_info: Optional[IdentityInfo] = None
    ceiling_info: Optional[CeilingInfo] = None


# ---------------------------------------------------------------------------
# Form <-> record mapping
# ---------------------------------------------------------------------------

EMPLOYEE_BINDINGS: tuple[Binding, ...] = (
    ("employment_status", ("status",)),
    ("notes", ("notes",)),
    # personal
    ("first_name", ("personalInfo", "FirstName")),
    ("other_names", ("personalInfo", "OtherNames")),
    ("last_name", ("personalInfo", "LastName")),
    ("date_of_birth", ("personalInfo", "Dob")),
    ("gender", ("personalInfo", "Gender")),
    ("nationality", ("personalInfo", "Nationality")),
    ("marital_status", ("personalInfo", "maritalStatus")),
    # contact
    ("email", ("contactInfo", "Email")),
    ("company_email", ("contactInfo", "workEmail")),
    ("phone_number", ("contactInfo", "phoneNumber")),
    ("alternate_phone", ("contactInfo", "alternatePhone")),
    ("street", ("contactInfo", "address", "street")),
    ("city", ("contactInfo", "address", "city")),
    ("province", ("contactInfo", "address", "province")),
    ("postal_code", ("contactInfo", "address", "postalCode")),
    ("country", ("contactInfo", "address", "country")),
    ("emergency_contact_name", ("contactInfo", "emergencyContact", "name")),
    ("emergency_contact_phone", ("contactInfo", "emergencyContact", "phone")),
    ("emergency_contact_relationship", ("contactInfo", "emergencyContact", "relationship")),
    # employment
    ("employee_id", ("employmentInfo", "employeeId")),
    ("department", ("employmentInfo", "Department")),
    ("job_title", ("employmentInfo", "JobTitle")),
    ("level", ("employmentInfo", "Level")),
    ("reporting_manager", ("employmentInfo", "reportingManager")),
    ("employee_type", ("employmentInfo", "EmployeeType")),
    ("engagement_date", ("employmentInfo", "joiningDate")),
    ("probation_period", ("employmentInfo", "probationPeriod")),
    ("contract_end_date", ("employmentInfo", "contractEndDate")),
    ("work_location", ("employmentInfo", "workLocation")),
    ("work_address", ("employmentInfo", "workAddress")),
    ("shift", ("employmentInfo", "shift")),
    ("work_schedule", ("employmentInfo", "workScheduleId")),
    # payroll
    ("gross_salary_starting", ("payrollInfo", "grossSalary")),
    ("currency", ("payrollInfo", "currency")),
    ("payment_frequency", ("payrollInfo", "paymentFrequency")),
    ("payment_method", ("payrollInfo", "paymentMethod")),
    ("salary_structure", ("payrollInfo", "salaryStructure")),
    ("salary_structure_source", ("payrollInfo", "salaryStructureSource")),
    ("custom_salary_components", ("payrollInfo", "customSalaryComponents")),
    ("account_number", ("payrollInfo", "bankAccount", "AccountNumber")),
    ("account_name", ("payrollInfo", "bankAccount", "AccountName")),
    ("bank_name", ("payrollInfo", "bankAccount", "BankName")),
    ("branch_code", ("payrollInfo", "bankAccount", "branchCode")),
    ("account_type", ("payrollInfo", "bankAccount", "AccountType")),
    # leave
    ("opening_leave_balance", ("leaveInfo", "openingLeaveBalance")),
    ("initial_leave_rate_monthly", ("leaveInfo", "initialLeaveRateMonthly")),
    # statutory
    ("nrc_id", ("identityInfo", "NrcId")),
    ("social_security_napsa", ("identityInfo", "SocialSecurityNapsa")),
    ("nhima_health_insurance", ("identityInfo", "NhimaHealthInsurance")),
    ("tpin_id", ("identityInfo", "TpinId")),
    ("ceiling_year", ("ceilingInfo", "ceilingYear")),
    ("ceiling_amount", ("ceilingInfo", "ceilingAmount")),
)

EMPTY_EMPLOYEE: dict[str, Any] = {
    **{key: "" for key, _ in EMPLOYEE_BINDINGS},
    "employment_status": "Active",
    "nationality": "Zambian",
    "country": "Zambia",
    "employee_type": "Permanent",
    "shift": "Day Shift",
    "currency": "ZMW",
    "payment_frequency": "Monthly",
    "payment_method": BANK_PAYMENT,
    "account_type": "Savings",
    "opening_leave_balance": "Incremental two (2) days per month of service",
    "initial_leave_rate_monthly": "2",
    "ceiling_year": "2025",
    "custom_salary_components": [],
}

RESTRICTED_FIELDS: tuple[tuple[str, str], ...] = (
    ("nrc_id", "NRC ID"),
    ("social_security_napsa", "Social Security (NAPSA)"),
    ("nhima_health_insurance", "NHIMA Health Insurance"),
    ("tpin_id", "TPIN"),
)

OPTION_SOURCES = {
    "reporting_manager": "employees",
    "work_schedule": "work_schedules",
    "salary_structure": "salary_structures",
}


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def verification_values(record: Mapping[str, Any]) -> dict[str, Any]:
    """Form values carried by an identity lookup result.

    Keys the lookup did not return are left out so they stay editable.
    """
    found = {
        "nrc_id": dig(record, "identityInfo", "nrc"),
        "social_security_napsa": dig(record, "identityInfo", "ssn"),
        "first_name": dig(record, "personalInfo", "firstName"),
        "last_name": dig(record, "personalInfo", "lastName"),
        "gender": dig(record, "personalInfo", "gender"),
    }
    return {key: value for key, value in found.items() if value is not None}


class EmployeeFormDefinition(FormDefinition):
    """Employee create/edit form bound to one tenant's feature profile."""

    kind = "employees"
    tab_order = (PERSONAL, CONTACT, EMPLOYMENT, LEAVE_SETUP, COMPENSATION, SCHEDULE)
    tab_labels = {
        PERSONAL: "Personal",
        CONTACT: "Contact",
        EMPLOYMENT: "Employment",
        LEAVE_SETUP: "Leave Setup",
        COMPENSATION: "Compensation & Payroll",
        SCHEDULE: "Work Schedule",
    }

    def __init__(
        self,
        profile: TenantFeatureProfile,
        salary_structures: tuple[SalaryStructureDefault, ...] = DEFAULT_SALARY_STRUCTURES,
    ) -> None:
        self.profile = profile
        self.salary_structures = salary_structures

    @classmethod
    def for_tenant(cls, registry: TenantRegistry, tenant_key: str | None) -> EmployeeFormDefinition:
        return cls(registry.resolve_feature_profile(tenant_key))

    def empty_defaults(self) -> dict[str, Any]:
        return copy.deepcopy(EMPTY_EMPLOYEE)

    def flatten(self, record: Mapping[str, Any]) -> dict[str, Any]:
        return flatten_record(record, EMPLOYEE_BINDINGS, self.empty_defaults())

    @property
    def department_options(self) -> tuple[str, ...]:
        return self.profile.departments

    # ---- validation ----

    def validate_tab(
        self, values: Mapping[str, Any], tab: str, *, mode: WizardMode, today: date
    ) -> str | None:
        if tab == PERSONAL:
            return self._validate_personal(values, mode, today)
        if tab == CONTACT:
            if is_blank(values.get("email")) or is_blank(values.get("phone_number")):
                return "Email and phone number are required"
            return None
        if tab == EMPLOYMENT:
            return self._validate_employment(values)
        if tab == COMPENSATION:
            return self._validate_compensation(values)
        return None

    def _validate_personal(self, values: Mapping[str, Any], mode: WizardMode, today: date) -> str | None:
        if is_blank(values.get("first_name")) or is_blank(values.get("last_name")):
            return "First name and last name are required"
        if is_blank(values.get("date_of_birth")) or is_blank(values.get("gender")):
            return "Date of birth and gender are required"
        born = _parse_date(values["date_of_birth"])
        if born is None:
            return "Date of birth must be a valid date"
        if born >= today:
            return "Date of birth must be in the past"
        if mode is WizardMode.CREATE and self._restricted_required:
            for name, label in RESTRICTED_FIELDS:
                if is_blank(values.get(name)):
                    return f"{label} is required"
        return None

    @property
    def _restricted_required(self) -> bool:
        return self.profile.show_restricted_fields and self.profile.restricted_fields_required

    def _validate_employment(self, values: Mapping[str, Any]) -> str | None:
        if any(is_blank(values.get(n)) for n in ("department", "job_title", "engagement_date")):
            return "Department, job title and engagement date are required"
        if self.profile.departments and values["department"] not in self.profile.departments:
            return "Please select a valid department"
        if not is_blank(values.get("contract_end_date")):
            start = _parse_date(values["engagement_date"])
            end = _parse_date(values["contract_end_date"])
            if start is not None and end is not None and end <= start:
                return "Contract end date must be after the engagement date"
        return None

    def _validate_compensation(self, values: Mapping[str, Any]) -> str | None:
        if is_blank(values.get("salary_structure")) or is_blank(values.get("gross_salary_starting")):
            return "Salary structure and gross salary are required"
        if values.get("payment_method") == BANK_PAYMENT:
            if any(is_blank(values.get(n)) for n in ("bank_name", "account_name", "account_number")):
                return "Bank name, account name and account number are required for bank payments"
        return None

    # ---- discriminants ----

    def on_field_change(self, values: dict[str, Any], name: str, value: Any) -> set[str]:
        values[name] = value
        if name == "level":
            self._apply_structure(values, self.structure_for_level(value))
        elif name == "job_title":
            self._apply_structure(values, self.structure_for_designation(value))
        elif name == "salary_structure":
            values["salary_structure_source"] = ""
        return set()

    def structure_for_level(self, level: Any) -> SalaryStructureDefault | None:
        for structure in self.salary_structures:
            if level and structure.level == level:
                return structure
        return None

    def structure_for_designation(self, job_title: Any) -> SalaryStructureDefault | None:
        for structure in self.salary_structures:
            if job_title and job_title in structure.designations:
                return structure
        return None

    @staticmethod
    def _apply_structure(values: dict[str, Any], structure: SalaryStructureDefault | None) -> None:
        if structure is None:
            return
        values["salary_structure"] = structure.structure_id
        values["salary_structure_source"] = AUTO_SOURCE
        if structure.default_gross:
            values["gross_salary_starting"] = str(structure.default_gross)

    def option_source(self, field_name: str) -> str | None:
        return OPTION_SOURCES.get(field_name)

    # ---- payload ----

    def build_payload(self, values: Mapping[str, Any], mode: WizardMode) -> dict[str, Any]:
        nested = nest_values(values, EMPLOYEE_BINDINGS)
        if mode is not WizardMode.CREATE:
            nested.pop("identityInfo")
        if not self.profile.show_ceiling_fields:
            nested.pop("ceilingInfo")
        payload = EmployeePayload.model_validate(nested)
        return payload.model_dump(by_alias=True, exclude_none=True)
