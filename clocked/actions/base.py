"""Action base class and the value types shared by every action.

An Action turns an ActionConfig plus a target time into an effect: either
right away (the target is already due) or through a delayed trigger kept in
the action's own TimerStore. Subclasses implement ``perform`` and set the
descriptor and message class attributes; ``execute``, ``cancel`` and
``validate`` come from here so callers never need to probe for them.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, Field

from clocked.timers import Scheduler, TimerStore
from clocked.timing import (
    DEFAULT_HORIZON,
    MSG_ALREADY_PASSED,
    format_when,
    seconds_until,
    too_far_message,
)

logger = logging.getLogger(__name__)


class ActionConfig(BaseModel):
    """One configured action inside an event."""

    id: str = Field(
        default_factory=lambda: f"action-{uuid.uuid4().hex[:8]}",
        min_length=1,
        description="Keys the action's trigger, so it must be unique across live events",
    )
    type: str = Field(min_length=1, description="Registry key of the action")
    params: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    def with_title(self, title: str) -> "ActionConfig":
        """Copy of this config with the event title injected into params."""
        return self.model_copy(update={"params": {**self.params, "title": title}})


class ActionResult(BaseModel):
    """Outcome of execute/cancel. ``data`` carries diagnostics only."""

    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, message: str, **data: Any) -> "ActionResult":
        return cls(success=True, message=message, data=data or None)

    @classmethod
    def fail(cls, message: str) -> "ActionResult":
        return cls(success=False, message=message)


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def invalid(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


class Action(ABC):
    """Base class for all schedulable actions.

    Class attributes:
        type: registry key
        name, icon: descriptors for UI listing
        runs_when_due: when the target is not in the future, run right away
            (True) or reject with the "already passed" message (False)
        *_message: user-facing strings; ``scheduled_message`` receives
            ``{when}``
    """

    type: ClassVar[str]
    name: ClassVar[str]
    icon: ClassVar[str]
    runs_when_due: ClassVar[bool] = True

    scheduled_message: ClassVar[str] = "Ação agendada para {when}"
    schedule_error_message: ClassVar[str] = "Erro ao agendar a ação"
    done_message: ClassVar[str] = "Ação executada com sucesso"
    failed_message: ClassVar[str] = "Erro ao executar a ação"
    cancelled_message: ClassVar[str] = "Ação cancelada com sucesso"
    nothing_to_cancel_message: ClassVar[str] = "Nenhuma ação agendada para cancelar"
    cancel_error_message: ClassVar[str] = "Erro ao cancelar a ação"

    def __init__(self, scheduler: Scheduler, horizon: timedelta = DEFAULT_HORIZON):
        self._scheduler = scheduler
        self._horizon = horizon
        self._timers = TimerStore(scheduler, owner=self.type)

    @property
    def timers(self) -> TimerStore:
        return self._timers

    def describe(self) -> Dict[str, str]:
        return {"type": self.type, "name": self.name, "icon": self.icon}

    async def execute(self, config: ActionConfig, target_time: datetime) -> ActionResult:
        """Run the action now if it is due, otherwise arm a trigger for ``target_time``."""
        try:
            now = self._scheduler.now()
            delay = seconds_until(target_time, now)

            if delay <= 0:
                if not self.runs_when_due:
                    return ActionResult.fail(MSG_ALREADY_PASSED)
                return await self._perform_logged(config)

            if target_time - now > self._horizon:
                return ActionResult.fail(too_far_message(self._horizon))

            handle = self._timers.arm(config.id, delay, lambda: self._fire(config))
            logger.info(f"{self.type} {config.id} armed for {target_time.isoformat()}")
            return ActionResult.ok(
                self.scheduled_message.format(when=format_when(target_time)),
                timer=handle,
                target_time=target_time,
            )
        except Exception:
            logger.exception(f"Could not schedule {self.type} {config.id}")
            return ActionResult.fail(self.schedule_error_message)

    async def _fire(self, config: ActionConfig) -> None:
        result = await self._perform_logged(config)
        if not result.success:
            logger.warning(f"{self.type} {config.id} failed when due: {result.message}")

    async def _perform_logged(self, config: ActionConfig) -> ActionResult:
        try:
            return await self.perform(config)
        except Exception:
            logger.exception(f"{self.type} {config.id} failed")
            return ActionResult.fail(self.failed_message)

    @abstractmethod
    async def perform(self, config: ActionConfig) -> ActionResult:
        """Carry out the effect. Exceptions become a failed ActionResult."""

    async def cancel(self, config: ActionConfig) -> ActionResult:
        """Disarm the pending trigger for ``config.id``. Never raises."""
        try:
            if not self._timers.cancel(config.id):
                return ActionResult.fail(self.nothing_to_cancel_message)
            await self.on_cancelled(config)
            logger.info(f"{self.type} {config.id} cancelled")
            return ActionResult.ok(self.cancelled_message)
        except Exception:
            logger.exception(f"Could not cancel {self.type} {config.id}")
            return ActionResult.fail(self.cancel_error_message)

    async def on_cancelled(self, config: ActionConfig) -> None:
        """Hook run after a pending trigger was disarmed."""

    def validate(self, config: ActionConfig) -> ValidationResult:
        return ValidationResult.ok()

    def cancel_all_timers(self) -> int:
        return self._timers.cancel_all()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pending={len(self._timers)})"
