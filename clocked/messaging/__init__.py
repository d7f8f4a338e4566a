"""Notification channel between the scheduling core and the UI."""

from clocked.messaging.bus import NotificationBus, Subscriber
from clocked.messaging.messages import (
    AlarmStopped,
    AlarmTriggered,
    AnyNotification,
    BaseNotification,
    DndTriggered,
    NotificationKind,
)
from clocked.messaging.rich_renderer import RichNotificationRenderer

__all__ = [
    "AlarmStopped",
    "AlarmTriggered",
    "AnyNotification",
    "BaseNotification",
    "DndTriggered",
    "NotificationBus",
    "NotificationKind",
    "RichNotificationRenderer",
    "Subscriber",
]
