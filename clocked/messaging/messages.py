"""Structured notifications emitted by the scheduling core.

Pydantic models that decouple what happened from how it is presented.
Renderers and UI layers decide how to display them.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Literal, Union
from uuid import uuid4

from pydantic import BaseModel, Field


class NotificationKind(str, Enum):
    """Wire names of the notifications, as the UI subscribes to them."""

    ALARM_TRIGGERED = "alarm-triggered"
    ALARM_STOPPED = "alarm-stopped"
    DND_TRIGGERED = "dnd-triggered"


class BaseNotification(BaseModel):
    """Base class for all notifications with auto-generated id and timestamp."""

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique identifier for this notification instance",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When this notification was created (UTC)",
    )
    kind: NotificationKind

    model_config = {"frozen": True, "extra": "forbid"}


class AlarmTriggered(BaseNotification):
    """An alarm started ringing. The UI owns playback and its looping."""

    kind: Literal[NotificationKind.ALARM_TRIGGERED] = NotificationKind.ALARM_TRIGGERED
    action_id: str = Field(description="Id of the alarm action that is ringing")
    title: str = Field(description="Title of the event that owns the alarm")
    alarm_path: Path = Field(description="Audio file to play")


class AlarmStopped(BaseNotification):
    """An alarm stopped ringing, by explicit stop or cancellation."""

    kind: Literal[NotificationKind.ALARM_STOPPED] = NotificationKind.ALARM_STOPPED
    action_id: str = Field(description="Id of the alarm action that stopped")


class DndTriggered(BaseNotification):
    """Do-not-disturb changed state."""

    kind: Literal[NotificationKind.DND_TRIGGERED] = NotificationKind.DND_TRIGGERED
    enabled: bool = Field(description="New do-not-disturb state")


AnyNotification = Union[AlarmTriggered, AlarmStopped, DndTriggered]
