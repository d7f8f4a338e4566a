"""Destructive power actions: shutdown, restart and hibernate.

These never run on a target that is already due; the event manager hands
them a strictly-future target and they arm their own trigger for it.
"""

import logging
from datetime import timedelta

from clocked.actions.base import Action, ActionConfig, ActionResult
from clocked.system.executor import CommandExecutor
from clocked.timers import Scheduler
from clocked.timing import DEFAULT_HORIZON

logger = logging.getLogger(__name__)


class PowerAction(Action):
    runs_when_due = False

    def __init__(
        self,
        scheduler: Scheduler,
        executor: CommandExecutor,
        horizon: timedelta = DEFAULT_HORIZON,
    ):
        super().__init__(scheduler, horizon)
        self._executor = executor


class _AbortsOsShutdown(PowerAction):
    """Also aborts an OS-level pending shutdown when the trigger is cancelled."""

    async def on_cancelled(self, config: ActionConfig) -> None:
        try:
            aborted = await self._executor.abort_shutdown()
        except Exception as e:
            logger.warning(f"Could not abort OS shutdown for {config.id}: {e}")
            return
        if aborted:
            logger.info(f"Aborted OS-level shutdown for {config.id}")


class ShutdownAction(_AbortsOsShutdown):
    type = "shutdown"
    name = "Desligar"
    icon = "ph-power"

    scheduled_message = "Desligar agendado para {when}"
    schedule_error_message = "Erro ao agendar o desligar"
    done_message = "Desligando o computador"
    failed_message = "Erro ao executar o desligamento"
    cancelled_message = "Desligar cancelado com sucesso"
    nothing_to_cancel_message = "Nenhum desligar agendado para cancelar"
    cancel_error_message = "Erro ao cancelar o desligar"

    async def perform(self, config: ActionConfig) -> ActionResult:
        await self._executor.shutdown()
        return ActionResult.ok(self.done_message)


class RestartAction(_AbortsOsShutdown):
    type = "restart"
    name = "Reiniciar"
    icon = "ph-arrow-clockwise"

    scheduled_message = "Reinicialização agendada para {when}"
    schedule_error_message = "Erro ao agendar a reinicialização"
    done_message = "Reiniciando o computador"
    failed_message = "Erro ao executar a reinicialização"
    cancelled_message = "Reinicialização cancelada com sucesso"
    nothing_to_cancel_message = "Nenhuma reinicialização agendada para cancelar"
    cancel_error_message = "Erro ao cancelar a reinicialização"

    async def perform(self, config: ActionConfig) -> ActionResult:
        await self._executor.reboot()
        return ActionResult.ok(self.done_message)


class HibernateAction(PowerAction):
    type = "hibernate"
    name = "Hibernar"
    icon = "ph-bed"

    scheduled_message = "Hibernação agendada para {when}"
    schedule_error_message = "Erro ao agendar a hibernação"
    done_message = "Hibernando o computador"
    failed_message = "Erro ao executar a hibernação"
    cancelled_message = "Hibernação cancelada com sucesso"
    nothing_to_cancel_message = "Nenhuma hibernação agendada para cancelar"
    cancel_error_message = "Erro ao cancelar a hibernação"

    async def perform(self, config: ActionConfig) -> ActionResult:
        await self._executor.hibernate()
        return ActionResult.ok(self.done_message)
