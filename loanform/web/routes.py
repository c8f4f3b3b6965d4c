"""Loan application web routes — HTML form (Jinja2) and JSON API.

HTML:
    GET  /                 empty form
    POST /                 validate + submit, re-render with errors or verdict
JSON:
    GET  /api/rules        Rule Store
    GET  /api/products     product catalogue
    POST /api/eligibility  validate + submit (422 on invalid, 502 on evaluator failure)
    POST /api/rates        rate quote
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from loanform.api.client import LoanApiClient, loan_api
from loanform.config import settings
from loanform.events import emit
from loanform.forms.fields import SectionSchema, build_field_schema
from loanform.forms.state import FormState
from loanform.schemas.application import ApplicationForm
from loanform.schemas.eligibility import ProductCatalog, RateRequest
from loanform.schemas.events import EventType, SystemEvent
from loanform.schemas.validation import RuleStore
from loanform.services.submission import (
    EligibilityUnavailableError,
    evaluate_application,
    submit_application,
)
from loanform.web.formatters import (
    format_currency,
    format_likelihood,
    format_option,
    format_rate,
    format_verdict,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["loan-form"])

# Jinja2 templates
_template_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(_template_dir))

# Register custom filters
templates.env.filters["currency"] = format_currency
templates.env.filters["likelihood"] = format_likelihood
templates.env.filters["rate"] = format_rate
templates.env.filters["option"] = format_option
templates.env.filters["verdict"] = format_verdict


# ── Dependencies ─────────────────────────────────────────────────────


def get_loan_api() -> LoanApiClient:
    return loan_api


async def get_rule_store(
    request: Request,
    client: LoanApiClient = Depends(get_loan_api),
) -> RuleStore:
    """Rule Store, fetched once and cached on the application state."""
    rules: RuleStore | None = getattr(request.app.state, "rule_store", None)
    if rules is None:
        rules = await client.get_validation_rules()
        request.app.state.rule_store = rules
        logger.info("Loaded %d validation rules", len(rules))
        await emit(SystemEvent(
            event_type=EventType.RULES_LOADED,
            data={"rules": len(rules)},
            source_module="web.routes",
        ))
    return rules


async def get_product_catalog(
    request: Request,
    client: LoanApiClient = Depends(get_loan_api),
) -> ProductCatalog:
    """Product catalogue, fetched once and cached on the application state.

    A failed fetch yields an empty catalogue for this request only; the next
    request retries.
    """
    catalog: ProductCatalog | None = getattr(request.app.state, "product_catalog", None)
    if catalog is None:
        try:
            catalog = await client.get_loan_products()
        except (httpx.HTTPError, OSError, ValueError):
            logger.exception("Could not load product catalogue")
            return ProductCatalog()
        request.app.state.product_catalog = catalog
        await emit(SystemEvent(
            event_type=EventType.PRODUCTS_LOADED,
            data={"products": len(catalog.products)},
            source_module="web.routes",
        ))
    return catalog


# ── Helpers ──────────────────────────────────────────────────────────


def _form_from_schema(schema: list[SectionSchema], data: Mapping[str, Any]) -> ApplicationForm:
    """Collect one value per rendered field from ``section.field`` keyed input."""
    sections: dict[str, dict[str, str]] = {}
    for section in schema:
        sections[section.section] = {
            f.name: str(data.get(f.input_name, "")) for f in section.fields
        }
    return ApplicationForm(sections=sections)


def _form_from_json(schema: list[SectionSchema], payload: dict[str, Any]) -> ApplicationForm:
    """Overlay a nested JSON payload on the rendered schema.

    Known fields missing from the payload are present and empty; extra
    sections/fields in the payload are kept.
    """
    sections = _form_from_schema(schema, {}).to_payload()
    for section, field, value in ApplicationForm.from_payload(payload).items():
        sections.setdefault(section, {})[field] = value
    return ApplicationForm(sections=sections)


def _render(request: Request, schema: list[SectionSchema], state: FormState) -> HTMLResponse:
    return templates.TemplateResponse(request, "form.html", {
        "sections": schema,
        "state": state,
        "branding": settings.branding,
    })


# ── HTML ─────────────────────────────────────────────────────────────


@router.get("/", response_class=HTMLResponse)
async def show_form(
    request: Request,
    rules: RuleStore = Depends(get_rule_store),
    catalog: ProductCatalog = Depends(get_product_catalog),
) -> HTMLResponse:
    """Empty application form."""
    schema = build_field_schema(rules, catalog)
    state = FormState(form=_form_from_schema(schema, {}))
    return _render(request, schema, state)


@router.post("/", response_class=HTMLResponse)
async def submit_form(
    request: Request,
    rules: RuleStore = Depends(get_rule_store),
    catalog: ProductCatalog = Depends(get_product_catalog),
    client: LoanApiClient = Depends(get_loan_api),
) -> HTMLResponse:
    """Validate and submit; inline errors or the verdict panel on re-render."""
    schema = build_field_schema(rules, catalog)
    data = await request.form()
    state = FormState(form=_form_from_schema(schema, data))
    state = await submit_application(state, rules, client)
    return _render(request, schema, state)


# ── JSON API ─────────────────────────────────────────────────────────


@router.get("/api/rules")
async def api_rules(rules: RuleStore = Depends(get_rule_store)) -> dict[str, Any]:
    return rules.to_payload()


@router.get("/api/products")
async def api_products(catalog: ProductCatalog = Depends(get_product_catalog)) -> dict[str, Any]:
    return catalog.model_dump(mode="json", by_alias=True)


@router.post("/api/eligibility")
async def api_eligibility(
    payload: dict[str, dict[str, Any]] = Body(...),
    rules: RuleStore = Depends(get_rule_store),
    catalog: ProductCatalog = Depends(get_product_catalog),
    client: LoanApiClient = Depends(get_loan_api),
) -> dict[str, Any]:
    """Validate an application and return the eligibility verdict."""
    form = _form_from_json(build_field_schema(rules, catalog), payload)

    try:
        outcome = await evaluate_application(form, rules, client)
    except EligibilityUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Eligibility service unavailable",
        ) from exc

    if outcome.response is None:
        raise HTTPException(
            status_code=422,
            detail={"errors": outcome.errors.to_payload()},
        )
    return outcome.response.model_dump(mode="json", by_alias=True)


@router.post("/api/rates")
async def api_rates(
    rate_request: RateRequest,
    client: LoanApiClient = Depends(get_loan_api),
) -> dict[str, Any]:
    """Quote a rate for an amount and term."""
    try:
        quote = await client.calculate_rates(rate_request)
    except (httpx.HTTPError, OSError, ValueError) as exc:
        logger.exception("Rate calculation failed")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Rate service unavailable",
        ) from exc

    await emit(SystemEvent(
        event_type=EventType.RATES_CALCULATED,
        data={"term": quote.term, "interest_rate": str(quote.interest_rate)},
        source_module="web.routes",
    ))
    return quote.model_dump(mode="json", by_alias=True)
