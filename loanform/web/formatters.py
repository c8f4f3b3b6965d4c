"""Jinja2 custom filters for South African (en-ZA) display formatting.

All filters are registered on the Jinja2 environment in routes.py.
"""

from __future__ import annotations

from decimal import Decimal

from loanform.config import settings
from loanform.forms.fields import option_label


def format_currency(value: Decimal | float | int | None) -> str:
    """Format as ZAR: 1234.5 -> "R 1 234,50"."""
    if value is None:
        return "-"
    d = Decimal(str(value))
    formatted = f"{d:,.2f}"
    # US: 1,234.50 -> en-ZA: 1 234,50
    formatted = formatted.replace(",", " ").replace(".", ",")
    return f"{settings.branding.currency_symbol} {formatted}"


def format_likelihood(value: int | float | None) -> str:
    """Approval likelihood on a 0-100 scale: 85 -> "85%"."""
    if value is None:
        return "-"
    return f"{round(value)}%"


def format_rate(value: Decimal | float | None) -> str:
    """Annual interest rate: 14.5 -> "14,50%"."""
    if value is None:
        return "-"
    return f"{Decimal(str(value)):.2f}%".replace(".", ",")


def format_option(value: str) -> str:
    return option_label(value)


def format_verdict(is_eligible: bool) -> str:
    return "Approved" if is_eligible else "Declined"
