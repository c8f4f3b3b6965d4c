"""Form state reducer.

The whole UI state is one frozen FormState. Every user interaction is an
action; ``reduce`` returns a new state and never mutates the old one.

Lifecycle of a submit:
    SubmitRequested → ValidationCompleted → EligibilityReceived | EligibilityFailed

FormReset returns a blank form with no errors and no verdict.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from loanform.schemas.application import ApplicationForm, ValidationErrors
from loanform.schemas.eligibility import EligibilityResponse


class FormState(BaseModel):
    """Snapshot of the form, its errors, the last verdict and the loading flag."""

    model_config = ConfigDict(frozen=True)

    form: ApplicationForm = Field(default_factory=ApplicationForm.blank)
    errors: ValidationErrors = Field(default_factory=ValidationErrors)
    result: EligibilityResponse | None = None
    loading: bool = False


# ── Actions ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FieldChanged:
    section: str
    field: str
    value: str


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class ValidationCompleted:
    errors: ValidationErrors


@dataclass(frozen=True)
class EligibilityReceived:
    result: EligibilityResponse


@dataclass(frozen=True)
class EligibilityFailed:
    pass


@dataclass(frozen=True)
class FormReset:
    pass


FormAction = (
    FieldChanged
    | SubmitRequested
    | ValidationCompleted
    | EligibilityReceived
    | EligibilityFailed
    | FormReset
)


def reduce(state: FormState, action: FormAction) -> FormState:
    """Apply one action to a state, returning the next state.

    Raises:
        KeyError: FieldChanged names a section/field that is not on the form.
        TypeError: Unknown action type.
    """
    if isinstance(action, FieldChanged):
        form = state.form.with_value(action.section, action.field, action.value)
        return state.model_copy(update={"form": form})

    if isinstance(action, SubmitRequested):
        # Submitting clears the previous verdict and errors before revalidating
        return state.model_copy(update={"result": None, "errors": ValidationErrors()})

    if isinstance(action, ValidationCompleted):
        return state.model_copy(update={"errors": action.errors, "loading": action.errors.is_empty})

    if isinstance(action, EligibilityReceived):
        return state.model_copy(update={"result": action.result, "loading": False})

    if isinstance(action, EligibilityFailed):
        return state.model_copy(update={"loading": False})

    if isinstance(action, FormReset):
        return FormState()

    msg = f"Unknown form action: {type(action).__name__}"
    raise TypeError(msg)
