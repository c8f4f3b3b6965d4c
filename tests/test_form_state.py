"""Tests for the immutable form state and its reducer."""

from __future__ import annotations

import pytest

from loanform.forms import (
    EligibilityFailed,
    EligibilityReceived,
    FieldChanged,
    FormReset,
    FormState,
    SubmitRequested,
    ValidationCompleted,
    reduce,
)
from loanform.models.enums import RiskCategory
from loanform.schemas.application import ApplicationForm, ValidationErrors
from loanform.schemas.eligibility import EligibilityResponse, EligibilityResult


def _response() -> EligibilityResponse:
    return EligibilityResponse(
        eligibility_result=EligibilityResult(
            is_eligible=True,
            risk_category=RiskCategory.LOW,
            approval_likelihood=85,
        )
    )


class TestBlankForm:
    def test_all_sections_present(self):
        form = ApplicationForm.blank()
        assert list(form.sections) == ["personalInfo", "financialInfo", "loanDetails"]

    def test_all_values_empty(self):
        assert all(value == "" for _, _, value in ApplicationForm.blank().items())

    def test_field_count(self):
        assert len(list(ApplicationForm.blank().items())) == 10


class TestFieldChanged:
    def test_returns_new_state(self):
        state = FormState()
        new = reduce(state, FieldChanged("personalInfo", "age", "30"))
        assert new is not state
        assert new.form.value("personalInfo", "age") == "30"

    def test_previous_state_untouched(self):
        state = FormState()
        reduce(state, FieldChanged("personalInfo", "age", "30"))
        assert state.form.value("personalInfo", "age") == ""

    def test_other_sections_preserved(self):
        state = reduce(FormState(), FieldChanged("loanDetails", "loanTerm", "24"))
        state = reduce(state, FieldChanged("personalInfo", "age", "30"))
        assert state.form.value("loanDetails", "loanTerm") == "24"
        assert state.form.value("personalInfo", "age") == "30"

    def test_unknown_field_rejected(self):
        with pytest.raises(KeyError):
            reduce(FormState(), FieldChanged("personalInfo", "favouriteColour", "blue"))

    def test_unknown_section_rejected(self):
        with pytest.raises(KeyError):
            reduce(FormState(), FieldChanged("hobbies", "age", "30"))


class TestSubmitLifecycle:
    def test_submit_clears_result_and_errors(self):
        errors = ValidationErrors(sections={"personalInfo": {"age": "Invalid age"}})
        state = FormState(errors=errors, result=_response())
        state = reduce(state, SubmitRequested())
        assert state.result is None
        assert state.errors.is_empty

    def test_validation_errors_do_not_start_loading(self):
        errors = ValidationErrors(sections={"personalInfo": {"age": "Invalid age"}})
        state = reduce(FormState(), ValidationCompleted(errors))
        assert state.loading is False
        assert state.errors.get("personalInfo", "age") == "Invalid age"

    def test_clean_validation_starts_loading(self):
        state = reduce(FormState(), ValidationCompleted(ValidationErrors()))
        assert state.loading is True

    def test_result_received(self):
        state = reduce(FormState(loading=True), EligibilityReceived(_response()))
        assert state.loading is False
        assert state.result is not None
        assert state.result.eligibility_result.approval_likelihood == 85

    def test_failure_clears_loading_without_result(self):
        state = reduce(FormState(loading=True), EligibilityFailed())
        assert state.loading is False
        assert state.result is None

    def test_reset_clears_everything(self):
        errors = ValidationErrors(sections={"personalInfo": {"age": "Invalid age"}})
        state = reduce(FormState(), FieldChanged("personalInfo", "age", "15"))
        state = state.model_copy(update={"errors": errors, "result": _response(), "loading": True})

        reset = reduce(state, FormReset())

        assert reset.form == ApplicationForm.blank()
        assert reset.errors.is_empty
        assert reset.result is None
        assert reset.loading is False
        assert state.form.value("personalInfo", "age") == "15"

    def test_unknown_action(self):
        with pytest.raises(TypeError):
            reduce(FormState(), object())  # type: ignore[arg-type]
