"""Alarm action.

Ringing is a state, not a process: when the alarm fires, the action records
the action id as ringing and emits ``alarm-triggered``; the UI plays the
sound until ``stop_alarm`` or ``cancel`` emits ``alarm-stopped``.
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional

from clocked.actions.base import Action, ActionConfig, ActionResult
from clocked.messaging.bus import NotificationBus
from clocked.messaging.messages import AlarmStopped, AlarmTriggered
from clocked.system.assets import AssetResolver, make_asset_resolver
from clocked.timers import Scheduler
from clocked.timing import DEFAULT_HORIZON

logger = logging.getLogger(__name__)

DEFAULT_ALARM_TITLE = "Alarme"


class AlarmAction(Action):
    type = "alarm"
    name = "Alarme"
    icon = "ph-bell"

    scheduled_message = "Alarme agendado para {when}"
    schedule_error_message = "Erro ao agendar o alarme"
    done_message = "Alarme tocando"
    failed_message = "Erro ao tocar o alarme"
    cancelled_message = "Alarme cancelado com sucesso"
    nothing_to_cancel_message = "Nenhum alarme agendado para cancelar"
    cancel_error_message = "Erro ao cancelar o alarme"
    stopped_message = "Alarme parado"
    not_ringing_message = "Nenhum alarme tocando"

    def __init__(
        self,
        scheduler: Scheduler,
        bus: NotificationBus,
        asset_resolver: Optional[AssetResolver] = None,
        horizon: timedelta = DEFAULT_HORIZON,
    ):
        super().__init__(scheduler, horizon)
        self._bus = bus
        self._resolve_asset = asset_resolver or make_asset_resolver()
        # action id -> title of the ringing alarm
        self._ringing: Dict[str, str] = {}

    @property
    def ringing(self) -> List[str]:
        return list(self._ringing)

    def is_ringing(self, action_id: str) -> bool:
        return action_id in self._ringing

    async def perform(self, config: ActionConfig) -> ActionResult:
        alarm_path = self._resolve_asset()
        title = str(config.params.get("title") or DEFAULT_ALARM_TITLE)

        self._ringing[config.id] = title
        logger.info(f"Alarm {config.id} ringing: {alarm_path}")
        self._bus.emit(AlarmTriggered(action_id=config.id, title=title, alarm_path=alarm_path))
        return ActionResult.ok(self.done_message, alarm_path=str(alarm_path))

    def _silence(self, action_id: str) -> bool:
        if self._ringing.pop(action_id, None) is None:
            return False
        logger.info(f"Alarm {action_id} stopped")
        self._bus.emit(AlarmStopped(action_id=action_id))
        return True

    def stop_alarm(self, action_id: str) -> ActionResult:
        if self._silence(action_id):
            return ActionResult.ok(self.stopped_message)
        return ActionResult.fail(self.not_ringing_message)

    async def cancel(self, config: ActionConfig) -> ActionResult:
        try:
            disarmed = self._timers.cancel(config.id)
            silenced = self._silence(config.id)
        except Exception:
            logger.exception(f"Could not cancel alarm {config.id}")
            return ActionResult.fail(self.cancel_error_message)

        if not (disarmed or silenced):
            return ActionResult.fail(self.nothing_to_cancel_message)
        return ActionResult.ok(self.cancelled_message)
