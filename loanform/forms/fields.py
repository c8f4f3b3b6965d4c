"""Field schema — the explicit, enumerated layout of the application form.

Each field is one of three variants (numeric range, enum select, free text).
The template renders them with a single loop dispatching on ``kind``, so no
field gets ad-hoc markup.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar

from loanform.models.enums import FieldKind, FormSection
from loanform.schemas.eligibility import ProductCatalog
from loanform.schemas.validation import RuleStore, ValidationRule

SECTION_TITLES: dict[FormSection, str] = {
    FormSection.PERSONAL_INFO: "Personal Information",
    FormSection.FINANCIAL_INFO: "Financial Information",
    FormSection.LOAN_DETAILS: "Loan Details",
}

# Where an enum-select field takes its options from
OPTIONS_FROM_RULE = "rule"
OPTIONS_FROM_CATALOG = "catalog"


@dataclass(frozen=True)
class FieldLayout:
    """Static description of one form field."""

    section: FormSection
    name: str
    label: str
    kind: FieldKind
    placeholder: str = ""
    options_source: str = OPTIONS_FROM_RULE


FIELD_LAYOUT: tuple[FieldLayout, ...] = (
    FieldLayout(FormSection.PERSONAL_INFO, "age", "Age", FieldKind.NUMERIC_RANGE),
    FieldLayout(
        FormSection.PERSONAL_INFO, "employmentStatus", "Employment Status", FieldKind.ENUM_SELECT,
        placeholder="Select status",
    ),
    FieldLayout(
        FormSection.PERSONAL_INFO, "employmentDuration", "Employment Duration (Months)", FieldKind.NUMERIC_RANGE,
    ),
    FieldLayout(FormSection.FINANCIAL_INFO, "monthlyIncome", "Monthly Income (R)", FieldKind.NUMERIC_RANGE),
    FieldLayout(FormSection.FINANCIAL_INFO, "monthlyExpenses", "Monthly Expenses (R)", FieldKind.NUMERIC_RANGE),
    FieldLayout(FormSection.FINANCIAL_INFO, "existingDebt", "Existing Debt (R)", FieldKind.NUMERIC_RANGE),
    FieldLayout(FormSection.FINANCIAL_INFO, "creditScore", "Credit Score", FieldKind.NUMERIC_RANGE),
    FieldLayout(FormSection.LOAN_DETAILS, "requestedAmount", "Requested Loan Amount (R)", FieldKind.NUMERIC_RANGE),
    FieldLayout(FormSection.LOAN_DETAILS, "loanTerm", "Loan Term (Months)", FieldKind.NUMERIC_RANGE),
    FieldLayout(
        FormSection.LOAN_DETAILS, "loanPurpose", "Loan Purpose", FieldKind.ENUM_SELECT,
        placeholder="Select purpose", options_source=OPTIONS_FROM_CATALOG,
    ),
)


# ── Rendered field variants ──────────────────────────────────────────


@dataclass(frozen=True)
class NumericRangeField:
    kind: ClassVar[FieldKind] = FieldKind.NUMERIC_RANGE

    section: str
    name: str
    label: str
    min: float | None = None
    max: float | None = None

    @property
    def input_name(self) -> str:
        return f"{self.section}.{self.name}"


@dataclass(frozen=True)
class EnumSelectField:
    kind: ClassVar[FieldKind] = FieldKind.ENUM_SELECT

    section: str
    name: str
    label: str
    options: tuple[str, ...] = ()
    placeholder: str = ""

    @property
    def input_name(self) -> str:
        return f"{self.section}.{self.name}"


@dataclass(frozen=True)
class FreeTextField:
    kind: ClassVar[FieldKind] = FieldKind.FREE_TEXT

    section: str
    name: str
    label: str

    @property
    def input_name(self) -> str:
        return f"{self.section}.{self.name}"


FormField = NumericRangeField | EnumSelectField | FreeTextField


@dataclass(frozen=True)
class SectionSchema:
    """One rendered section of the form."""

    section: str
    title: str
    fields: list[FormField] = field(default_factory=list)


# ── Builders ─────────────────────────────────────────────────────────


def option_label(option: str) -> str:
    """Display text for an option value: "self_employed" -> "self employed"."""
    return option.replace("_", " ")


def humanize_field_name(name: str) -> str:
    """"monthlyIncome" -> "Monthly Income"."""
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", name)
    return words[:1].upper() + words[1:]


def _from_layout(layout: FieldLayout, rule: ValidationRule | None, catalog: ProductCatalog) -> FormField:
    section = layout.section.value
    if layout.kind == FieldKind.ENUM_SELECT:
        if layout.options_source == OPTIONS_FROM_CATALOG:
            options = tuple(catalog.purposes())
        else:
            options = rule.options if rule and rule.options else ()
        return EnumSelectField(section, layout.name, layout.label, options, layout.placeholder)
    if layout.kind == FieldKind.NUMERIC_RANGE:
        return NumericRangeField(
            section,
            layout.name,
            layout.label,
            min=rule.min if rule else None,
            max=rule.max if rule else None,
        )
    return FreeTextField(section, layout.name, layout.label)


def _from_rule(section: str, name: str, rule: ValidationRule) -> FormField:
    """Infer a field variant for a rule the static layout does not list."""
    label = humanize_field_name(name)
    if rule.options:
        return EnumSelectField(section, name, label, rule.options, "Select")
    if rule.has_bounds:
        return NumericRangeField(section, name, label, min=rule.min, max=rule.max)
    return FreeTextField(section, name, label)


def build_field_schema(rules: RuleStore, catalog: ProductCatalog) -> list[SectionSchema]:
    """Build the ordered sections to render.

    Layout fields come first in declared order; fields that only appear in
    the Rule Store are appended to their section with an inferred variant.
    """
    sections: dict[str, SectionSchema] = {
        s.value: SectionSchema(section=s.value, title=SECTION_TITLES[s]) for s in FormSection
    }
    known: set[tuple[str, str]] = set()

    for layout in FIELD_LAYOUT:
        section = layout.section.value
        rule = rules.get(section, layout.name)
        sections[section].fields.append(_from_layout(layout, rule, catalog))
        known.add((section, layout.name))

    for section, fields in rules.sections.items():
        for name, rule in fields.items():
            if (section, name) in known:
                continue
            if section not in sections:
                sections[section] = SectionSchema(section=section, title=humanize_field_name(section))
            sections[section].fields.append(_from_rule(section, name, rule))

    return list(sections.values())
