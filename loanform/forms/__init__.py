"""Form layer: explicit field schema and the immutable form-state reducer."""

from loanform.forms.fields import (
    EnumSelectField,
    FreeTextField,
    NumericRangeField,
    SectionSchema,
    build_field_schema,
    option_label,
)
from loanform.forms.state import (
    EligibilityFailed,
    EligibilityReceived,
    FieldChanged,
    FormReset,
    FormState,
    SubmitRequested,
    ValidationCompleted,
    reduce,
)

__all__ = [
    "build_field_schema",
    "option_label",
    "EnumSelectField",
    "FreeTextField",
    "NumericRangeField",
    "SectionSchema",
    "FormState",
    "FieldChanged",
    "SubmitRequested",
    "ValidationCompleted",
    "EligibilityReceived",
    "EligibilityFailed",
    "FormReset",
    "reduce",
]
