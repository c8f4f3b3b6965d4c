"""Async client for the loan API: product catalogue, rules, eligibility, rates.

There is no real backend. By default every call resolves a local JSON
fixture after a simulated delay. When ``LOAN_API_BASE_URL`` is configured the
same calls go over HTTP instead:

    GET  {base_url}/products
    GET  {base_url}/rules
    POST {base_url}/eligibility
    POST {base_url}/rates

Errors are not handled here; callers decide whether a failure is fatal.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from loanform.config import LoanApiSettings, settings
from loanform.schemas.application import ApplicationForm
from loanform.schemas.eligibility import EligibilityResponse, ProductCatalog, RateQuote, RateRequest
from loanform.schemas.validation import RuleStore

logger = logging.getLogger(__name__)

# Fixture file names
_PRODUCTS_FIXTURE = "products.json"
_RULES_FIXTURE = "validation.json"
_ELIGIBILITY_FIXTURE = "eligibility.json"
_RATES_FIXTURE = "rate.json"


class LoanApiClient:
    """Mocked loan API with an optional HTTP backend."""

    def __init__(self, api_settings: LoanApiSettings | None = None) -> None:
        self._settings = api_settings or settings.loan_api
        self._base_url = self._settings.loan_api_base_url.rstrip("/")
        self._timeout = httpx.Timeout(self._settings.request_timeout, connect=5.0)

    @property
    def _fixture_mode(self) -> bool:
        """Return True if no base URL is configured (serve local fixtures)."""
        return not self._base_url

    async def _load_fixture(self, name: str, delay: float) -> Any:
        """Sleep for the simulated latency, then read a fixture file."""
        await asyncio.sleep(delay)
        path = self._settings.fixture_dir / name
        logger.debug("Serving fixture %s after %.1fs", path.name, delay)
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return json.loads(text)

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        async with httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout) as client:
            response = await client.request(method, path, json=payload)
            response.raise_for_status()
            return response.json()

    async def get_loan_products(self) -> ProductCatalog:
        if self._fixture_mode:
            data = await self._load_fixture(_PRODUCTS_FIXTURE, self._settings.products_delay)
        else:
            data = await self._request("GET", "/products")
        return ProductCatalog.model_validate(data)

    async def get_validation_rules(self) -> RuleStore:
        """Fetch the Rule Store (section -> field -> rule)."""
        if self._fixture_mode:
            data = await self._load_fixture(_RULES_FIXTURE, self._settings.rules_delay)
        else:
            data = await self._request("GET", "/rules")
        return RuleStore.from_payload(data)

    async def check_eligibility(self, form: ApplicationForm) -> EligibilityResponse:
        """Submit a validated application and return the verdict.

        The request body is the full form payload.
        """
        payload = form.to_payload()
        logger.info("Submitted payload: %s", payload)
        if self._fixture_mode:
            data = await self._load_fixture(_ELIGIBILITY_FIXTURE, self._settings.eligibility_delay)
        else:
            data = await self._request("POST", "/eligibility", payload)
        return EligibilityResponse.model_validate(data)

    async def calculate_rates(self, request: RateRequest) -> RateQuote:
        payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        if self._fixture_mode:
            data = await self._load_fixture(_RATES_FIXTURE, self._settings.rates_delay)
        else:
            data = await self._request("POST", "/rates", payload)
        return RateQuote.model_validate(data)


# Module-level singleton
loan_api = LoanApiClient()
