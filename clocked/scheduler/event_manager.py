"""Event Manager: turns event definitions into armed triggers.

Lifecycle of one event:
    create -> validated -> PENDING --(timer)--> FIRED
        repeat > 0: target += repeat, back to PENDING
        otherwise:  RETIRED (removed)
    cancel / delete: CANCELLED / DELETED (removed, actions cancelled)

The event timer fires ``dispatch_lead`` seconds before the target so every
action receives a target that is still in the future and arms its own
trigger for the exact moment. Each event id has at most one armed timer.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from clocked.actions.registry import ActionRegistry
from clocked.scheduler.models import (
    Event,
    EventDef,
    EventResult,
    EventState,
    OperationResult,
)
from clocked.timers import Scheduler, TimerStore
from clocked.timing import (
    DEFAULT_HORIZON,
    MSG_ALREADY_PASSED,
    check_horizon,
    compute_target_datetime,
    seconds_until,
)

logger = logging.getLogger(__name__)

MSG_CREATED = "Evento criado com sucesso"
MSG_UPDATED = "Evento modificado com sucesso"
MSG_CANCELLED = "Evento cancelado com sucesso"
MSG_DELETED = "Evento deletado"
MSG_NOT_FOUND = "Evento não encontrado"
MSG_INVALID_ACTION = "Action inválida"
MSG_INVALID_DEFINITION = "Definição de evento inválida"
MSG_CREATE_ERROR = "Erro ao criar evento"
MSG_UPDATE_ERROR = "Erro ao atualizar evento"
MSG_REPEAT_TOO_LONG = "O intervalo de repetição não pode ser maior que o limite de agendamento"

EventInput = Union[EventDef, Mapping[str, Any]]


class EventValidationError(Exception):
    """An event definition was rejected. The message is user-facing."""


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    ctx = first.get("ctx") or {}
    if first.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    field = ".".join(str(part) for part in first.get("loc", ()))
    return f"{MSG_INVALID_DEFINITION}: {field}" if field else MSG_INVALID_DEFINITION


class EventManager:
    def __init__(
        self,
        registry: ActionRegistry,
        scheduler: Scheduler,
        horizon: timedelta = DEFAULT_HORIZON,
        dispatch_lead: float = 1.0,
    ):
        self._registry = registry
        self._scheduler = scheduler
        self._horizon = horizon
        self._dispatch_lead = dispatch_lead
        self._events: Dict[str, Event] = {}
        self._timers = TimerStore(scheduler, owner="events")

    @property
    def timers(self) -> TimerStore:
        return self._timers

    # =========================================================================
    # Operations
    # =========================================================================

    async def create_event(self, definition: EventInput) -> EventResult:
        """Validate a definition, store it and arm its timer.

        Args:
            definition: an EventDef or a mapping with the same fields

        Returns:
            EventResult carrying a snapshot of the new event, or a failed
            result with a user-facing message. Nothing is stored on failure.
        """
        try:
            event = self._build_event(
                definition, self._new_id(), created_at=self._scheduler.now()
            )
        except EventValidationError as e:
            logger.info(f"Event rejected: {e}")
            return EventResult(success=False, message=str(e))
        except Exception:
            logger.exception("Could not create event")
            return EventResult(success=False, message=MSG_CREATE_ERROR)

        self._events[event.id] = event
        self._arm(event)
        logger.info(f"Created event {event.id} '{event.title}' for {event.target_datetime}")
        return EventResult(success=True, message=MSG_CREATED, event=event.snapshot())

    async def update_event(self, event_id: str, definition: EventInput) -> EventResult:
        """Replace an event's definition, keeping its id and ``created_at``.

        The new definition is validated first; a rejected update leaves the
        stored event and its timer untouched. On success the old timer and
        the old actions' pending triggers are cancelled before re-arming.
        """
        existing = self._events.get(event_id)
        if existing is None:
            return EventResult(success=False, message=MSG_NOT_FOUND)

        # Validate before tearing anything down so a rejection keeps the original
        try:
            replacement = self._build_event(definition, event_id, created_at=existing.created_at)
        except EventValidationError as e:
            logger.info(f"Update of {event_id} rejected: {e}")
            return EventResult(success=False, message=str(e))
        except Exception:
            logger.exception(f"Could not update event {event_id}")
            return EventResult(success=False, message=MSG_UPDATE_ERROR)

        self._timers.cancel(event_id)
        await self._cancel_actions(existing)
        # A cancel or delete may have removed the event while the old actions were torn down
        if event_id not in self._events:
            logger.info(f"Event {event_id} went away during update, not re-arming")
            return EventResult(success=False, message=MSG_NOT_FOUND)
        self._events[event_id] = replacement
        self._arm(replacement)
        logger.info(f"Updated event {event_id}, now due {replacement.target_datetime}")
        return EventResult(success=True, message=MSG_UPDATED, event=replacement.snapshot())

    async def cancel_event(self, event_id: str) -> OperationResult:
        """Disarm and remove an event, cancelling its actions' triggers."""
        if not await self._tear_down(event_id, EventState.CANCELLED):
            return OperationResult(success=False, message=MSG_NOT_FOUND)
        return OperationResult(success=True, message=MSG_CANCELLED)

    async def delete_event(self, event_id: str) -> OperationResult:
        """Same teardown as cancel_event; only the final state and message differ."""
        if not await self._tear_down(event_id, EventState.DELETED):
            return OperationResult(success=False, message=MSG_NOT_FOUND)
        return OperationResult(success=True, message=MSG_DELETED)

    def get_event(self, event_id: str) -> Optional[Event]:
        """Detached copy of a stored event, or None."""
        event = self._events.get(event_id)
        return event.snapshot() if event else None

    def get_all_events(self) -> List[Event]:
        return [event.snapshot() for event in self._events.values()]

    def close(self) -> int:
        """Disarm every event and action timer. Returns the number of event timers."""
        count = self._timers.cancel_all()
        for action in self._registry.get_all():
            action.cancel_all_timers()
        if count:
            logger.info(f"Disarmed {count} event timer(s)")
        return count

    # =========================================================================
    # Building and arming
    # =========================================================================

    def _new_id(self) -> str:
        return f"event-{uuid.uuid4().hex[:12]}"

    def _build_event(
        self, definition: EventInput, event_id: str, created_at: datetime
    ) -> Event:
        """Validate a definition and resolve its target. Raises EventValidationError."""
        try:
            parsed = (
                definition
                if isinstance(definition, EventDef)
                else EventDef.model_validate(definition)
            )
        except ValidationError as e:
            raise EventValidationError(_describe_validation_error(e)) from e

        now = self._scheduler.now()
        target = compute_target_datetime(parsed.time, parsed.date, now)
        rejection = check_horizon(target, now, self._horizon)
        if rejection:
            raise EventValidationError(rejection)

        if parsed.repeat and timedelta(minutes=parsed.repeat) > self._horizon:
            raise EventValidationError(MSG_REPEAT_TOO_LONG)

        for config in parsed.actions:
            action = self._registry.get(config.type)
            if action is None:
                raise EventValidationError(f'Action tipo "{config.type}" não encontrada')
            validation = action.validate(config)
            if not validation.valid:
                raise EventValidationError(validation.error or MSG_INVALID_ACTION)

        return Event(
            id=event_id,
            title=parsed.title,
            time=parsed.time,
            date=parsed.date,
            repeat=parsed.repeat,
            actions=[config.model_copy(deep=True) for config in parsed.actions],
            created_at=created_at,
            target_datetime=target,
        )

    def _arm(self, event: Event) -> None:
        delay = seconds_until(event.target_datetime, self._scheduler.now()) - self._dispatch_lead
        event.state = EventState.PENDING
        self._timers.arm(event.id, max(delay, 0.0), lambda: self._fire(event))

    # =========================================================================
    # Firing
    # =========================================================================

    async def _fire(self, event: Event) -> None:
        logger.info(f"Firing event {event.id} '{event.title}'")
        event.state = EventState.FIRED
        if not event.repeats:
            event.completed = True

        target = event.target_datetime
        for config in event.actions:
            action = self._registry.get(config.type)
            if action is None:
                logger.error(f"Action type '{config.type}' vanished from the registry")
                continue
            try:
                result = await action.execute(config.with_title(event.title), target)
            except Exception:
                logger.exception(f"Action {config.id} of {event.id} raised")
                continue
            if result.success:
                logger.info(f"  {action.name} ({config.id}): ok - {result.message}")
            elif not action.runs_when_due and result.message == MSG_ALREADY_PASSED:
                logger.warning(
                    f"  {action.name} ({config.id}) missed its target {target}: "
                    f"event {event.id} was dispatched late"
                )
            else:
                logger.warning(f"  {action.name} ({config.id}): failed - {result.message}")

        # Cancelled or replaced while the actions ran
        if self._events.get(event.id) is not event:
            logger.debug(f"Event {event.id} changed while firing, not rescheduling")
            return

        if event.repeats:
            self._reschedule(event)
        else:
            self._retire(event)

    def _reschedule(self, event: Event) -> None:
        step = timedelta(minutes=event.repeat)
        target = event.target_datetime + step
        now = self._scheduler.now()
        while target <= now:
            target += step
        event.target_datetime = target
        self._arm(event)
        logger.info(f"Rescheduled event {event.id} for {target}")

    def _retire(self, event: Event) -> None:
        event.state = EventState.RETIRED
        self._timers.cancel(event.id)
        self._events.pop(event.id, None)
        logger.info(f"Retired event {event.id}")

    # =========================================================================
    # Teardown
    # =========================================================================

    async def _tear_down(self, event_id: str, state: EventState) -> bool:
        event = self._events.pop(event_id, None)
        if event is None:
            return False
        self._timers.cancel(event_id)
        event.state = state
        await self._cancel_actions(event)
        logger.info(f"Event {event_id} {state.value}")
        return True

    async def _cancel_actions(self, event: Event) -> None:
        for config in event.actions:
            action = self._registry.get(config.type)
            if action is None:
                continue
            try:
                result = await action.cancel(config)
            except Exception:
                logger.exception(f"Could not cancel action {config.id} of {event.id}")
                continue
            logger.debug(f"Cancel {config.id}: {result.message}")
