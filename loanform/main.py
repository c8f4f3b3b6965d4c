"""FastAPI application entry point — wires everything together.

Usage:
    python -m loanform.main

Serves the loan application form, its JSON API and a health check.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from loanform.api.client import loan_api
from loanform.config import settings
from loanform.events import clear_subscribers, emit, log_event, subscribe
from loanform.schemas.events import EventType, SystemEvent
from loanform.web.routes import router

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting loan form service (env=%s)", settings.environment)

    subscribe(log_event)
    await emit(SystemEvent(event_type=EventType.SYSTEM_STARTUP, source_module="main"))

    # Rule Store is fetched once per process; routes fall back to a lazy load
    try:
        rules = await loan_api.get_validation_rules()
    except (httpx.HTTPError, OSError, ValueError):
        logger.exception("Could not preload validation rules; will retry on first request")
    else:
        app.state.rule_store = rules
        logger.info("Validation rules loaded (%d fields)", len(rules))
        await emit(SystemEvent(
            event_type=EventType.RULES_LOADED,
            data={"rules": len(rules)},
            source_module="main",
        ))

    try:
        yield
    finally:
        logger.info("Shutting down loan form service...")
        await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, source_module="main"))
        clear_subscribers()

    logger.info("Loan form service shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="Loan Application Form",
    description="Loan application form with rule-driven validation and a mocked eligibility check",
    version="0.1.0",
    lifespan=lifespan,
    # Interactive API docs only outside production
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)
app.include_router(router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "mode": "remote" if settings.loan_api.loan_api_base_url else "fixtures",
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "loanform.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
