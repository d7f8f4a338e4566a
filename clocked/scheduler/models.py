"""Event models: the input definition, the stored event and the results."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from clocked.actions.base import ActionConfig
from clocked.timing import parse_date, parse_time_of_day


class EventState(str, Enum):
    PENDING = "pending"
    FIRED = "fired"
    CANCELLED = "cancelled"
    DELETED = "deleted"
    RETIRED = "retired"


class EventDef(BaseModel):
    """What a caller submits to create or update an event."""

    title: str = ""
    time: str = Field(description="Wall-clock time, HH:MM")
    date: Optional[str] = Field(default=None, description="YYYY-MM-DD; nearest future time when absent")
    repeat: int = Field(default=0, description="Repeat interval in minutes, 0 = once")
    actions: List[ActionConfig]

    model_config = {"extra": "ignore"}

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        try:
            parse_time_of_day(value)
        except ValueError:
            raise ValueError("Horário inválido, use o formato HH:MM") from None
        return value.strip()

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            parse_date(value)
        except (TypeError, ValueError):
            raise ValueError("Data inválida, use o formato AAAA-MM-DD") from None
        return value.strip()

    @field_validator("repeat", mode="before")
    @classmethod
    def _default_repeat(cls, value):
        return 0 if value is None else value

    @field_validator("repeat")
    @classmethod
    def _check_repeat(cls, value: int) -> int:
        if value < 0:
            raise ValueError("O intervalo de repetição não pode ser negativo")
        return value

    @field_validator("actions")
    @classmethod
    def _check_actions(cls, value: List[ActionConfig]) -> List[ActionConfig]:
        if not value:
            raise ValueError("O evento precisa de pelo menos uma action")
        return value

    @model_validator(mode="after")
    def _unique_action_ids(self) -> "EventDef":
        seen = set()
        for config in self.actions:
            if config.id in seen:
                raise ValueError(f'Action id "{config.id}" duplicado no evento')
            seen.add(config.id)
        return self


class Event(BaseModel):
    """A scheduled event as the manager stores it."""

    id: str
    title: str
    time: str
    date: Optional[str] = None
    repeat: int = 0
    actions: List[ActionConfig]
    created_at: datetime
    target_datetime: datetime
    completed: bool = False
    state: EventState = EventState.PENDING

    @property
    def repeats(self) -> bool:
        return self.repeat > 0

    def snapshot(self) -> "Event":
        """Deep copy safe to hand out to callers."""
        return self.model_copy(deep=True)


class OperationResult(BaseModel):
    success: bool
    message: str


class EventResult(OperationResult):
    event: Optional[Event] = None
