from datetime import timedelta

from clocked.actions.base import Action, ActionConfig, ActionResult
from clocked.messaging.bus import NotificationBus
from clocked.messaging.messages import DndTriggered
from clocked.system.executor import CommandExecutor
from clocked.timers import Scheduler
from clocked.timing import DEFAULT_HORIZON


class DoNotDisturbAction(Action):
    """Turns do-not-disturb on and tells the UI about it."""

    type = "do-not-disturb"
    name = "Modo Não Perturbe"
    icon = "ph-moon"

    scheduled_message = "Modo não perturbe agendado para {when}"
    schedule_error_message = "Erro ao agendar o modo não perturbe"
    done_message = "Modo não perturbe ativado com sucesso"
    failed_message = "Erro ao ativar o modo não perturbe"
    cancelled_message = "Modo não perturbe cancelado com sucesso"
    nothing_to_cancel_message = "Nenhum modo não perturbe agendado para cancelar"
    cancel_error_message = "Erro ao cancelar o modo não perturbe"

    def __init__(
        self,
        scheduler: Scheduler,
        executor: CommandExecutor,
        bus: NotificationBus,
        horizon: timedelta = DEFAULT_HORIZON,
    ):
        super().__init__(scheduler, horizon)
        self._executor = executor
        self._bus = bus

    async def perform(self, config: ActionConfig) -> ActionResult:
        await self._executor.set_do_not_disturb(True)
        self._bus.emit(DndTriggered(enabled=True))
        return ActionResult.ok(self.done_message)
