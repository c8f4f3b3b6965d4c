"""Field validator and whole-form validation pass."""

from loanform.validation.form import validate_form
from loanform.validation.validators import validate_field

__all__ = [
    "validate_field",
    "validate_form",
]
