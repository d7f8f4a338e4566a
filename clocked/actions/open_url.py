from datetime import datetime, timedelta
from typing import Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from clocked.actions.base import Action, ActionConfig, ActionResult, ValidationResult
from clocked.system.shell_open import UrlOpener
from clocked.timers import Scheduler
from clocked.timing import DEFAULT_HORIZON

_URL_ADAPTER = TypeAdapter(AnyUrl)

MSG_URL_REQUIRED = "URL é obrigatória"
MSG_URL_MISSING = "URL não fornecida"
MSG_URL_INVALID = "URL inválida"


def _url_of(config: ActionConfig) -> str:
    return str(config.params.get("url") or "").strip()


def _is_absolute_url(url: str) -> bool:
    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError:
        return False
    return True


class OpenUrlAction(Action):
    """Opens ``params.url`` with the default handler, now or at the target time."""

    type = "open-url"
    name = "Abrir URL"
    icon = "ph-globe"

    scheduled_message = "Abertura de URL agendada para {when}"
    schedule_error_message = "Erro ao agendar a abertura da URL"
    failed_message = "Erro ao abrir a URL"
    cancelled_message = "Abertura de URL cancelada com sucesso"
    nothing_to_cancel_message = "Nenhuma abertura de URL agendada para cancelar"
    cancel_error_message = "Erro ao cancelar a abertura da URL"

    def __init__(
        self,
        scheduler: Scheduler,
        opener: Optional[UrlOpener] = None,
        horizon: timedelta = DEFAULT_HORIZON,
    ):
        super().__init__(scheduler, horizon)
        self._opener = opener or UrlOpener()

    def validate(self, config: ActionConfig) -> ValidationResult:
        url = _url_of(config)
        if not url:
            return ValidationResult.invalid(MSG_URL_REQUIRED)
        if not _is_absolute_url(url):
            return ValidationResult.invalid(MSG_URL_INVALID)
        return ValidationResult.ok()

    async def execute(self, config: ActionConfig, target_time: datetime) -> ActionResult:
        url = _url_of(config)
        if not url:
            return ActionResult.fail(MSG_URL_MISSING)
        if not _is_absolute_url(url):
            return ActionResult.fail(MSG_URL_INVALID)
        return await super().execute(config, target_time)

    async def perform(self, config: ActionConfig) -> ActionResult:
        url = _url_of(config)
        await self._opener.open(url)
        return ActionResult.ok(f"URL aberta: {url}")
