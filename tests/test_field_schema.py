"""Tests for the enumerated field schema."""

from __future__ import annotations

from loanform.forms import EnumSelectField, FreeTextField, NumericRangeField, build_field_schema, option_label
from loanform.forms.fields import humanize_field_name
from loanform.schemas.eligibility import ProductCatalog
from loanform.schemas.validation import RuleStore

RULES = RuleStore.from_payload({
    "personalInfo": {
        "age": {"required": True, "min": 18, "max": 100, "errorMessage": "Invalid age"},
        "employmentStatus": {
            "required": True,
            "options": ["employed", "self_employed"],
            "errorMessage": "Pick a status",
        },
        "idNumber": {"required": True, "errorMessage": "ID number is required"},
    },
    "financialInfo": {
        "dependants": {"min": 0, "max": 10, "errorMessage": "0 to 10"},
    },
})

CATALOG = ProductCatalog.model_validate({
    "products": [
        {"purposes": ["debt_consolidation", "education"]},
        {"purposes": ["vehicle_purchase", "debt_consolidation"]},
    ]
})


def _field(schema, section: str, name: str):
    for s in schema:
        if s.section == section:
            for f in s.fields:
                if f.name == name:
                    return f
    raise AssertionError(f"{section}.{name} not in schema")


class TestBuildFieldSchema:
    def test_section_order(self):
        schema = build_field_schema(RULES, CATALOG)
        assert [s.section for s in schema] == ["personalInfo", "financialInfo", "loanDetails"]

    def test_section_titles(self):
        schema = build_field_schema(RULES, CATALOG)
        assert schema[0].title == "Personal Information"

    def test_numeric_field_carries_rule_bounds(self):
        age = _field(build_field_schema(RULES, CATALOG), "personalInfo", "age")
        assert isinstance(age, NumericRangeField)
        assert (age.min, age.max) == (18, 100)
        assert age.input_name == "personalInfo.age"

    def test_numeric_field_without_rule(self):
        debt = _field(build_field_schema(RULES, CATALOG), "financialInfo", "existingDebt")
        assert isinstance(debt, NumericRangeField)
        assert debt.min is None
        assert debt.max is None

    def test_employment_status_options_from_rule(self):
        status = _field(build_field_schema(RULES, CATALOG), "personalInfo", "employmentStatus")
        assert isinstance(status, EnumSelectField)
        assert status.options == ("employed", "self_employed")
        assert status.placeholder == "Select status"

    def test_loan_purpose_options_from_catalog(self):
        purpose = _field(build_field_schema(RULES, CATALOG), "loanDetails", "loanPurpose")
        assert isinstance(purpose, EnumSelectField)
        assert purpose.options == ("debt_consolidation", "education", "vehicle_purchase")

    def test_rule_only_free_text_field_appended(self):
        schema = build_field_schema(RULES, CATALOG)
        id_number = _field(schema, "personalInfo", "idNumber")
        assert isinstance(id_number, FreeTextField)
        assert id_number.label == "Id Number"
        assert schema[0].fields[-1] is id_number

    def test_rule_only_numeric_field_inferred(self):
        dependants = _field(build_field_schema(RULES, CATALOG), "financialInfo", "dependants")
        assert isinstance(dependants, NumericRangeField)
        assert dependants.max == 10

    def test_empty_rules_and_catalog(self):
        schema = build_field_schema(RuleStore(), ProductCatalog())
        status = _field(schema, "personalInfo", "employmentStatus")
        assert status.options == ()
        assert sum(len(s.fields) for s in schema) == 10


class TestLabels:
    def test_option_label(self):
        assert option_label("self_employed") == "self employed"

    def test_option_label_replaces_every_underscore(self):
        assert option_label("home_loan_top_up") == "home loan top up"

    def test_humanize(self):
        assert humanize_field_name("monthlyIncome") == "Monthly Income"
        assert humanize_field_name("age") == "Age"


class TestCatalogPurposes:
    def test_deduplicated_in_order(self):
        assert CATALOG.purposes() == ["debt_consolidation", "education", "vehicle_purchase"]
