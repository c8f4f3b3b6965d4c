"""In-process event bus for submission lifecycle events.

Handlers are async callables registered globally or per event type.
``emit`` awaits every matching handler; a failing handler is logged and
never affects the emitter or the other handlers.

Usage:
    from loanform.events import emit, subscribe

    subscribe(my_handler, event_types=[EventType.ELIGIBILITY_CHECKED])
    await emit(SystemEvent(event_type=EventType.ELIGIBILITY_CHECKED, data={...}))
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from loanform.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)
event_log = structlog.get_logger("loanform.event_log")

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]

_global_handlers: list[EventHandler] = []
_typed_handlers: dict[EventType, list[EventHandler]] = {}


def subscribe(handler: EventHandler, event_types: list[EventType] | None = None) -> None:
    """Register a handler for all events, or only for ``event_types``."""
    if event_types is None:
        _global_handlers.append(handler)
    else:
        for event_type in event_types:
            _typed_handlers.setdefault(event_type, []).append(handler)
    scope = [t.value for t in event_types] if event_types else "all events"
    logger.info("Subscribed %s to %s", handler.__name__, scope)


def unsubscribe(handler: EventHandler) -> None:
    """Remove a handler from every registration."""
    if handler in _global_handlers:
        _global_handlers.remove(handler)
    for handlers in _typed_handlers.values():
        if handler in handlers:
            handlers.remove(handler)


def clear_subscribers() -> None:
    """Drop all registrations. Called on application shutdown."""
    _global_handlers.clear()
    _typed_handlers.clear()


async def emit(event: SystemEvent) -> None:
    """Deliver an event to every matching handler concurrently."""
    handlers = [*_global_handlers, *_typed_handlers.get(event.event_type, [])]
    if not handlers:
        return

    outcomes = await asyncio.gather(*(h(event) for h in handlers), return_exceptions=True)
    for handler, outcome in zip(handlers, outcomes):
        if isinstance(outcome, Exception):
            logger.error(
                "Event handler %s failed for %s: %r",
                handler.__name__,
                event.event_type.value,
                outcome,
            )


async def log_event(event: SystemEvent) -> None:
    """Global subscriber writing every event to the structured log."""
    event_log.info(
        event.event_type.value,
        event_id=str(event.id),
        source=event.source_module,
        **event.data,
    )
