"""Field validator: one raw form value checked against its rule.

Pure Python, deterministic. Returns the rule's preconfigured message on the
first failed check, or None when the value passes.

Check order:
  1. no rule            → pass
  2. required + empty   → fail
  3. min + blank        → fail
  4. value < min        → fail
  5. value > max        → fail
  6. value not in options → fail
"""

from __future__ import annotations

import math
import re

from loanform.schemas.validation import ValidationRule

# Plain ASCII decimal, as accepted by an HTML number input
_NUMBER_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _to_number(value: str) -> float | None:
    """Coerce a raw input to a finite number.

    Blank input coerces to 0. Returns None when the value is not a finite number.
    """
    stripped = value.strip()
    if not stripped:
        return 0.0
    if not _NUMBER_RE.fullmatch(stripped):
        return None
    number = float(stripped)
    if not math.isfinite(number):
        return None
    return number


def validate_field(value: str, rule: ValidationRule | None) -> str | None:
    """Validate one field value.

    Args:
        value: Raw string captured from the form.
        rule: Rule for the field, or None if the field is unconstrained.

    Returns:
        ``rule.error_message`` if the value fails any check, else None.
    """
    if rule is None:
        return None

    if rule.required and not value:
        return rule.error_message

    if rule.min is not None and not value.strip():
        return rule.error_message

    if rule.has_bounds:
        number = _to_number(value)
        if number is None:
            return rule.error_message
        if rule.min is not None and number < rule.min:
            return rule.error_message
        if rule.max is not None and number > rule.max:
            return rule.error_message

    if rule.options is not None and value not in rule.options:
        return rule.error_message

    return None
