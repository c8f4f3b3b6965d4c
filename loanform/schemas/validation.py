"""Validation rule schemas: the Rule Store and its per-field rules.

The Rule Store is supplied by the loan API as JSON keyed by
section -> field -> rule. It is loaded once and never mutated.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ValidationRule(BaseModel):
    """How a single field (``section.field``) is validated.

    JSON uses camelCase (``errorMessage``); attributes are snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    required: bool = False
    min: float | None = None
    max: float | None = None
    options: tuple[str, ...] | None = None
    error_message: str

    @property
    def has_bounds(self) -> bool:
        """True if the rule carries a numeric min or max."""
        return self.min is not None or self.max is not None


class RuleStore(BaseModel):
    """Read-only mapping of section -> field -> ValidationRule."""

    model_config = ConfigDict(frozen=True)

    sections: dict[str, dict[str, ValidationRule]] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> RuleStore:
        """Build a store from the API's nested JSON object."""
        return cls.model_validate({"sections": payload})

    def get(self, section: str, field: str) -> ValidationRule | None:
        """Return the rule for a field, or None if the field has no rule."""
        return self.sections.get(section, {}).get(field)

    def to_payload(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Serialize back to the API's camelCase JSON shape."""
        return {
            section: {
                field: rule.model_dump(by_alias=True, exclude_none=True)
                for field, rule in fields.items()
            }
            for section, fields in self.sections.items()
        }

    def __len__(self) -> int:
        return sum(len(fields) for fields in self.sections.values())
