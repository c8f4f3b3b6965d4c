"""SystemEvent schema — the event type published on the in-process event bus.

Submission steps emit a SystemEvent. Subscribers (the logging subscriber
registered at startup, tests) consume these events asynchronously.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types emitted by the system."""

    # Reference data
    RULES_LOADED = "rules.loaded"
    PRODUCTS_LOADED = "products.loaded"

    # Submission
    APPLICATION_SUBMITTED = "application.submitted"
    VALIDATION_FAILED = "application.validation_failed"
    ELIGIBILITY_CHECKED = "eligibility.checked"
    ELIGIBILITY_FAILED = "eligibility.failed"
    RATES_CALCULATED = "rates.calculated"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class SystemEvent(BaseModel):
    """Immutable event flowing through the event bus."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}
