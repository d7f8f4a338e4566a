from datetime import timedelta

from clocked.actions.base import Action, ActionConfig, ActionResult
from clocked.system.executor import CommandExecutor
from clocked.timers import Scheduler
from clocked.timing import DEFAULT_HORIZON


class LockScreenAction(Action):
    """Locks the session through the executor, now or at the target time."""

    type = "lock-screen"
    name = "Bloquear Tela"
    icon = "ph-lock"

    scheduled_message = "Bloquear tela agendado para {when}"
    schedule_error_message = "Erro ao agendar o bloqueio de tela"
    done_message = "Tela bloqueada com sucesso"
    failed_message = "Erro ao bloquear a tela"
    cancelled_message = "Bloqueio de tela cancelado com sucesso"
    nothing_to_cancel_message = "Nenhum bloqueio de tela agendado para cancelar"
    cancel_error_message = "Erro ao cancelar o bloqueio de tela"

    def __init__(
        self,
        scheduler: Scheduler,
        executor: CommandExecutor,
        horizon: timedelta = DEFAULT_HORIZON,
    ):
        super().__init__(scheduler, horizon)
        self._executor = executor

    async def perform(self, config: ActionConfig) -> ActionResult:
        await self._executor.lock()
        return ActionResult.ok(self.done_message)
