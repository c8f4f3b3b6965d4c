"""Whole-form validation pass against the Rule Store."""

from __future__ import annotations

import logging

from loanform.schemas.application import ApplicationForm, ValidationErrors
from loanform.schemas.validation import RuleStore
from loanform.validation.validators import validate_field

logger = logging.getLogger(__name__)


def validate_form(form: ApplicationForm, rules: RuleStore) -> ValidationErrors:
    """Validate every (section, field) present in the form.

    Fields without a rule always pass. The result is computed from scratch
    on each call; nothing carries over from a previous pass.
    """
    errors: dict[str, dict[str, str]] = {}

    for section, field, value in form.items():
        message = validate_field(value, rules.get(section, field))
        if message is not None:
            errors.setdefault(section, {})[field] = message

    result = ValidationErrors(sections=errors)
    if not result.is_empty:
        logger.debug("Validation failed for %d field(s): %s", result.count(), result.to_payload())
    return result
