"""Submission service — validate an application, then ask for a verdict.

The eligibility call is made only when the validation pass finds no errors,
and then exactly once with the full form payload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from loanform.api.client import LoanApiClient, loan_api
from loanform.events import emit
from loanform.forms.state import (
    EligibilityFailed,
    EligibilityReceived,
    FormState,
    SubmitRequested,
    ValidationCompleted,
    reduce,
)
from loanform.schemas.application import ApplicationForm, ValidationErrors
from loanform.schemas.eligibility import EligibilityResponse
from loanform.schemas.events import EventType, SystemEvent
from loanform.schemas.validation import RuleStore
from loanform.validation import validate_form

logger = logging.getLogger(__name__)

_SOURCE = "services.submission"


class EligibilityUnavailableError(Exception):
    """The eligibility evaluator failed (network, HTTP status, malformed response)."""


@dataclass(frozen=True)
class SubmissionOutcome:
    """Errors of the validation pass and, if it passed, the evaluator's verdict."""

    errors: ValidationErrors
    response: EligibilityResponse | None = None

    @property
    def submitted(self) -> bool:
        return self.errors.is_empty


async def evaluate_application(
    form: ApplicationForm,
    rules: RuleStore,
    client: LoanApiClient | None = None,
) -> SubmissionOutcome:
    """Validate the form and, if valid, request an eligibility verdict.

    Raises:
        EligibilityUnavailableError: The form was valid but the evaluator failed.
    """
    client = client or loan_api
    errors = validate_form(form, rules)

    if not errors.is_empty:
        await emit(SystemEvent(
            event_type=EventType.VALIDATION_FAILED,
            data={"invalid_fields": errors.count()},
            source_module=_SOURCE,
        ))
        return SubmissionOutcome(errors=errors)

    await emit(SystemEvent(
        event_type=EventType.APPLICATION_SUBMITTED,
        data={"sections": list(form.sections)},
        source_module=_SOURCE,
    ))

    try:
        response = await client.check_eligibility(form)
    except (httpx.HTTPError, OSError, ValueError) as exc:
        logger.exception("Eligibility check failed")
        await emit(SystemEvent(
            event_type=EventType.ELIGIBILITY_FAILED,
            data={"error": type(exc).__name__},
            source_module=_SOURCE,
        ))
        raise EligibilityUnavailableError(str(exc)) from exc

    verdict = response.eligibility_result
    await emit(SystemEvent(
        event_type=EventType.ELIGIBILITY_CHECKED,
        data={
            "is_eligible": verdict.is_eligible,
            "risk_category": verdict.risk_category.value,
            "approval_likelihood": verdict.approval_likelihood,
        },
        source_module=_SOURCE,
    ))
    return SubmissionOutcome(errors=errors, response=response)


async def submit_application(
    state: FormState,
    rules: RuleStore,
    client: LoanApiClient | None = None,
) -> FormState:
    """Run a full submit on a form state and return the resulting state.

    Evaluator failures are logged and swallowed: the state comes back with
    loading cleared and no result.
    """
    state = reduce(state, SubmitRequested())

    try:
        outcome = await evaluate_application(state.form, rules, client)
    except EligibilityUnavailableError:
        state = reduce(state, ValidationCompleted(ValidationErrors()))
        return reduce(state, EligibilityFailed())

    state = reduce(state, ValidationCompleted(outcome.errors))
    if outcome.response is None:
        return state
    return reduce(state, EligibilityReceived(outcome.response))
