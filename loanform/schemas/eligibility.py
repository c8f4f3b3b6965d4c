"""Pydantic schemas for the loan API responses.

Product catalogue, eligibility verdict and rate quote. JSON payloads use
camelCase; attributes are snake_case.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from loanform.models.enums import RiskCategory

_API_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# Product catalogue
# ---------------------------------------------------------------------------


class LoanProduct(BaseModel):
    """A single product offered by the lender."""

    model_config = _API_CONFIG

    id: str | None = None
    name: str | None = None
    purposes: tuple[str, ...] = ()
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    min_term: int | None = None       # months
    max_term: int | None = None       # months


class ProductCatalog(BaseModel):
    """Response of the product catalogue call."""

    model_config = _API_CONFIG

    products: tuple[LoanProduct, ...] = ()

    def purposes(self) -> list[str]:
        """All loan purposes across products, de-duplicated, in catalogue order."""
        seen: list[str] = []
        for product in self.products:
            for purpose in product.purposes:
                if purpose not in seen:
                    seen.append(purpose)
        return seen


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------


class EligibilityResult(BaseModel):
    """Approval verdict for one submission."""

    model_config = _API_CONFIG

    is_eligible: bool
    risk_category: RiskCategory
    approval_likelihood: int = Field(ge=0, le=100)


class RecommendedLoan(BaseModel):
    """Loan the evaluator suggests for the applicant."""

    model_config = _API_CONFIG

    amount: Decimal | None = None
    term: int | None = None               # months
    interest_rate: Decimal | None = None  # annual %, e.g. Decimal("14.5")
    monthly_payment: Decimal | None = None


class EligibilityResponse(BaseModel):
    """Full response of the eligibility call."""

    model_config = _API_CONFIG

    eligibility_result: EligibilityResult
    recommended_loan: RecommendedLoan | None = None


# ---------------------------------------------------------------------------
# Rate calculation
# ---------------------------------------------------------------------------


class RateRequest(BaseModel):
    """Input of the rate calculation call."""

    model_config = _API_CONFIG

    amount: Decimal = Field(gt=0)
    term: int = Field(gt=0)
    credit_score: int | None = None


class RateQuote(BaseModel):
    """Rate offered for an amount and term."""

    model_config = _API_CONFIG

    interest_rate: Decimal
    monthly_payment: Decimal
    total_repayable: Decimal
    term: int
