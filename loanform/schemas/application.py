"""Application form and validation error schemas.

Both are immutable snapshots. An edit produces a new ApplicationForm
(copy-on-write); a submit attempt produces a fresh ValidationErrors.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from loanform.models.enums import FormSection

# Fields captured by the form, per section, in display order.
DEFAULT_FIELDS: dict[FormSection, tuple[str, ...]] = {
    FormSection.PERSONAL_INFO: ("age", "employmentStatus", "employmentDuration"),
    FormSection.FINANCIAL_INFO: ("monthlyIncome", "monthlyExpenses", "existingDebt", "creditScore"),
    FormSection.LOAN_DETAILS: ("requestedAmount", "loanTerm", "loanPurpose"),
}


class ApplicationForm(BaseModel):
    """Nested section -> field -> raw string value."""

    model_config = ConfigDict(frozen=True)

    sections: dict[str, dict[str, str]] = Field(default_factory=dict)

    @classmethod
    def blank(cls) -> ApplicationForm:
        """A form with every known field present and empty."""
        return cls(sections={
            section.value: {field: "" for field in fields}
            for section, fields in DEFAULT_FIELDS.items()
        })

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ApplicationForm:
        """Build from a nested JSON object, stringifying scalar values."""
        sections: dict[str, dict[str, str]] = {}
        for section, fields in payload.items():
            if not isinstance(fields, dict):
                msg = f"Section {section!r} must be an object, got {type(fields).__name__}"
                raise ValueError(msg)
            sections[section] = {
                field: "" if value is None else str(value)
                for field, value in fields.items()
            }
        return cls(sections=sections)

    def value(self, section: str, field: str) -> str:
        """Current value of a field. Raises KeyError for unknown fields."""
        return self.sections[section][field]

    def with_value(self, section: str, field: str, value: str) -> ApplicationForm:
        """Return a new form with one field replaced.

        Raises KeyError if the section or field is not part of the form.
        """
        if field not in self.sections[section]:
            raise KeyError(f"{section}.{field}")
        sections = {name: dict(fields) for name, fields in self.sections.items()}
        sections[section][field] = value
        return ApplicationForm(sections=sections)

    def items(self) -> Iterator[tuple[str, str, str]]:
        """Yield (section, field, value) for every field present."""
        for section, fields in self.sections.items():
            for field, value in fields.items():
                yield section, field, value

    def to_payload(self) -> dict[str, dict[str, str]]:
        """Request body for the eligibility call."""
        return {name: dict(fields) for name, fields in self.sections.items()}


class ValidationErrors(BaseModel):
    """Per-field error messages mirroring the form's shape.

    A field appears only when invalid; a section only when it has an invalid field.
    """

    model_config = ConfigDict(frozen=True)

    sections: dict[str, dict[str, str]] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.sections

    def get(self, section: str, field: str) -> str | None:
        """Error message for a field, or None if it is valid."""
        return self.sections.get(section, {}).get(field)

    def count(self) -> int:
        return sum(len(fields) for fields in self.sections.values())

    def to_payload(self) -> dict[str, dict[str, str]]:
        return {name: dict(fields) for name, fields in self.sections.items()}
