"""Rich console renderer for scheduler notifications.

Subscribes to every notification kind on a NotificationBus and prints a
one-line summary for each. Alarm playback belongs to the UI; the console
only shows which file would be played.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape as escape_rich_markup

from clocked.messaging.bus import NotificationBus
from clocked.messaging.messages import (
    AlarmStopped,
    AlarmTriggered,
    AnyNotification,
    DndTriggered,
)


class RichNotificationRenderer:
    """Prints notifications from a NotificationBus using Rich."""

    def __init__(self, bus: NotificationBus, console: Optional[Console] = None) -> None:
        self._bus = bus
        self._console = console or Console()
        self._attached = False

    @property
    def console(self) -> Console:
        return self._console

    def start(self) -> None:
        if self._attached:
            return
        self._bus.subscribe(None, self.render)
        self._attached = True

    def stop(self) -> None:
        if self._attached:
            self._bus.unsubscribe(None, self.render)
            self._attached = False

    def render(self, notification: AnyNotification) -> None:
        when = notification.timestamp.astimezone().strftime("%H:%M:%S")
        prefix = f"[dim]{when}[/dim] "

        if isinstance(notification, AlarmTriggered):
            title = escape_rich_markup(notification.title)
            path = escape_rich_markup(str(notification.alarm_path))
            self._console.print(
                f"{prefix}[bold yellow]⏰ {title}[/bold yellow] [dim]({path})[/dim]"
            )
        elif isinstance(notification, AlarmStopped):
            action_id = escape_rich_markup(notification.action_id)
            self._console.print(f"{prefix}[cyan]Alarme parado[/cyan] [dim]{action_id}[/dim]")
        elif isinstance(notification, DndTriggered):
            state = "ativado" if notification.enabled else "desativado"
            self._console.print(f"{prefix}[magenta]🔕 Não perturbe {state}[/magenta]")
        else:
            # Unknown notification type - render as debug
            self._console.print(
                f"{prefix}[dim]Unknown notification: {type(notification).__name__}[/dim]"
            )
