"""Event scheduling: models and the event manager."""

from clocked.scheduler.event_manager import EventManager, EventValidationError
from clocked.scheduler.models import (
    Event,
    EventDef,
    EventResult,
    EventState,
    OperationResult,
)

__all__ = [
    "Event",
    "EventDef",
    "EventManager",
    "EventResult",
    "EventState",
    "EventValidationError",
    "OperationResult",
]
