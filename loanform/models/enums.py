"""Domain enums used across Pydantic schemas and templates.

All enums use str mixin for JSON serialization.
"""

from __future__ import annotations

from enum import Enum


class FormSection(str, Enum):
    """Top-level sections of the application form, in display order."""

    PERSONAL_INFO = "personalInfo"
    FINANCIAL_INFO = "financialInfo"
    LOAN_DETAILS = "loanDetails"


class FieldKind(str, Enum):
    """How a field is captured and rendered."""

    NUMERIC_RANGE = "numeric_range"
    ENUM_SELECT = "enum_select"
    FREE_TEXT = "free_text"


class RiskCategory(str, Enum):
    """Risk band returned by the eligibility evaluator."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
