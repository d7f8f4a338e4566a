"""Application wiring and the operations a front-end calls.

``create_app`` builds the object graph (settings, scheduler, executor,
notification bus, action registry, event manager). ``ClockedApp`` exposes the
event operations plus the alarm and shutdown conveniences the UI uses.
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from clocked.actions import AlarmAction, ActionRegistry, build_default_registry
from clocked.messaging.bus import NotificationBus
from clocked.scheduler.event_manager import EventInput, EventManager
from clocked.scheduler.models import Event, EventResult, OperationResult
from clocked.settings import ClockedSettings, get_settings
from clocked.system.assets import AssetResolver, make_asset_resolver
from clocked.system.executor import CommandExecutor
from clocked.system.platform import get_command_executor
from clocked.system.shell_open import UrlOpener
from clocked.timers import AsyncioScheduler, Scheduler
from clocked.timing import TIME_FORMAT

logger = logging.getLogger(__name__)

SHUTDOWN_EVENT_TITLE = "Desligar"
MSG_NO_SHUTDOWN = "Nenhum desligamento agendado"
MSG_NO_ALARM_ACTION = "Alarme não disponível"


class ShutdownStatus(BaseModel):
    """Result of probing the OS for a pending shutdown."""

    scheduled: bool
    message: str


class ClockedApp:
    """Front-end facade over the event manager and the action registry."""

    def __init__(
        self,
        settings: ClockedSettings,
        scheduler: Scheduler,
        executor: CommandExecutor,
        bus: NotificationBus,
        registry: ActionRegistry,
        manager: EventManager,
    ):
        self.settings = settings
        self.scheduler = scheduler
        self.executor = executor
        self.bus = bus
        self.registry = registry
        self.manager = manager

    # Event operations

    async def create_event(self, definition: EventInput) -> EventResult:
        """See EventManager.create_event."""
        return await self.manager.create_event(definition)

    async def update_event(self, event_id: str, definition: EventInput) -> EventResult:
        """See EventManager.update_event."""
        return await self.manager.update_event(event_id, definition)

    async def cancel_event(self, event_id: str) -> OperationResult:
        """See EventManager.cancel_event."""
        return await self.manager.cancel_event(event_id)

    async def delete_event(self, event_id: str) -> OperationResult:
        """See EventManager.delete_event."""
        return await self.manager.delete_event(event_id)

    def get_event(self, event_id: str) -> Optional[Event]:
        """See EventManager.get_event."""
        return self.manager.get_event(event_id)

    def get_all_events(self) -> List[Event]:
        return self.manager.get_all_events()

    # Alarm

    def stop_alarm(self, action_id: str) -> OperationResult:
        """Silence a ringing alarm.

        Args:
            action_id: id of the alarm action inside its event

        Returns:
            OperationResult; fails when that alarm is not ringing or no alarm
            action is registered.
        """
        alarm = self.registry.get(AlarmAction.type)
        if not isinstance(alarm, AlarmAction):
            return OperationResult(success=False, message=MSG_NO_ALARM_ACTION)
        result = alarm.stop_alarm(action_id)
        return OperationResult(success=result.success, message=result.message)

    def list_actions(self) -> List[Dict[str, str]]:
        return self.registry.describe()

    # Shutdown conveniences

    def _shutdown_events(self) -> List[Event]:
        return [
            event
            for event in self.manager.get_all_events()
            if any(config.type == "shutdown" for config in event.actions)
        ]

    async def schedule_shutdown(self, target: datetime) -> OperationResult:
        """One-shot shutdown at the next occurrence of ``target``'s time of day."""
        result = await self.manager.create_event(
            {
                "title": SHUTDOWN_EVENT_TITLE,
                "time": target.strftime(TIME_FORMAT),
                "actions": [{"id": f"shutdown-{uuid.uuid4().hex[:8]}", "type": "shutdown"}],
            }
        )
        return OperationResult(success=result.success, message=result.message)

    async def cancel_shutdown(self) -> OperationResult:
        """Cancel the first stored event that contains a shutdown action."""
        events = self._shutdown_events()
        if not events:
            return OperationResult(success=False, message=MSG_NO_SHUTDOWN)
        return await self.manager.cancel_event(events[0].id)

    def get_scheduled_time(self) -> Optional[str]:
        return "active" if self._shutdown_events() else None

    async def check_os_shutdown(self) -> ShutdownStatus:
        """Report whether the OS had a shutdown pending. The probe aborts it."""
        if not self.executor.supports_shutdown_query:
            return ShutdownStatus(
                scheduled=False,
                message=f"Verificação não suportada em {self.executor.platform_name}",
            )
        if await self.executor.abort_shutdown():
            return ShutdownStatus(
                scheduled=True, message="Havia um desligamento agendado no sistema"
            )
        return ShutdownStatus(
            scheduled=False, message="Nenhum desligamento agendado no sistema"
        )

    def has_pending_work(self) -> bool:
        """True while an event is live or any action timer is still armed."""
        if len(self.manager.timers) or self.manager.get_all_events():
            return True
        return any(len(action.timers) for action in self.registry.get_all())

    def close(self) -> None:
        self.manager.close()


def create_app(
    settings: Optional[ClockedSettings] = None,
    scheduler: Optional[Scheduler] = None,
    executor: Optional[CommandExecutor] = None,
    bus: Optional[NotificationBus] = None,
    opener: Optional[UrlOpener] = None,
    asset_resolver: Optional[AssetResolver] = None,
) -> ClockedApp:
    """Build a ClockedApp. Every collaborator can be swapped for tests."""
    settings = settings or get_settings()
    scheduler = scheduler or AsyncioScheduler()
    executor = executor or get_command_executor(settings)
    bus = bus or NotificationBus(history=settings.notification_history)
    asset_resolver = asset_resolver or make_asset_resolver(settings)

    registry = build_default_registry(
        scheduler,
        executor,
        bus,
        opener=opener,
        asset_resolver=asset_resolver,
        horizon=settings.max_horizon,
    )
    manager = EventManager(
        registry,
        scheduler,
        horizon=settings.max_horizon,
        dispatch_lead=settings.dispatch_lead_seconds,
    )

    logger.debug(
        f"Clocked ready: {len(registry)} actions, executor={executor.platform_name}"
    )
    return ClockedApp(settings, scheduler, executor, bus, registry, manager)
