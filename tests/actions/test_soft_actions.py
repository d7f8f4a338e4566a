"""Tests for lock-screen, do-not-disturb and open-url."""

from datetime import timedelta

import pytest

from clocked.actions import (
    ActionConfig,
    DoNotDisturbAction,
    LockScreenAction,
    OpenUrlAction,
)
from clocked.messaging import DndTriggered

from conftest import START, FakeOpener


class TestLockScreenAction:
    @pytest.mark.asyncio
    async def test_due_target_locks_now(self, scheduler, executor):
        action = LockScreenAction(scheduler, executor)

        result = await action.execute(ActionConfig(id="l1", type="lock-screen"), START)

        assert result.success is True
        assert result.message == "Tela bloqueada com sucesso"
        assert executor.commands == ["lock-now"]

    @pytest.mark.asyncio
    async def test_delayed_lock(self, scheduler, executor):
        action = LockScreenAction(scheduler, executor)

        await action.execute(ActionConfig(id="l1", type="lock-screen"), START + timedelta(seconds=30))
        assert executor.commands == []

        await scheduler.advance(30)
        assert executor.commands == ["lock-now"]

    @pytest.mark.asyncio
    async def test_failing_lock_is_reported(self, scheduler, executor):
        executor.fail_commands.add("lock-now")
        action = LockScreenAction(scheduler, executor)

        result = await action.execute(ActionConfig(id="l1", type="lock-screen"), START)

        assert result.success is False
        assert result.message == "Erro ao bloquear a tela"

    @pytest.mark.asyncio
    async def test_cancel_without_pending(self, scheduler, executor):
        action = LockScreenAction(scheduler, executor)

        result = await action.cancel(ActionConfig(id="l1", type="lock-screen"))

        assert result.success is False
        assert result.message == "Nenhum bloqueio de tela agendado para cancelar"


class TestDoNotDisturbAction:
    @pytest.mark.asyncio
    async def test_enables_and_notifies(self, scheduler, executor, bus):
        action = DoNotDisturbAction(scheduler, executor, bus)

        result = await action.execute(ActionConfig(id="d1", type="do-not-disturb"), START)

        assert result.success is True
        assert executor.dnd == [True]
        [notification] = bus.history
        assert isinstance(notification, DndTriggered)
        assert notification.enabled is True

    @pytest.mark.asyncio
    async def test_delayed(self, scheduler, executor, bus):
        action = DoNotDisturbAction(scheduler, executor, bus)
        config = ActionConfig(id="d1", type="do-not-disturb")

        result = await action.execute(config, START + timedelta(minutes=2))
        assert result.message == "Modo não perturbe agendado para 15/01/2026, 10:02:00"

        await scheduler.advance(120)
        assert executor.dnd == [True]


class TestOpenUrlAction:
    def _config(self, url=None):
        params = {} if url is None else {"url": url}
        return ActionConfig(id="u1", type="open-url", params=params)

    def test_validate_requires_url(self, scheduler, opener):
        result = OpenUrlAction(scheduler, opener).validate(self._config())
        assert result.valid is False
        assert result.error == "URL é obrigatória"

    @pytest.mark.parametrize("url", ["not a url", "example.com", "/relative/path"])
    def test_validate_rejects_malformed(self, scheduler, opener, url):
        result = OpenUrlAction(scheduler, opener).validate(self._config(url))
        assert result.valid is False
        assert result.error == "URL inválida"

    def test_validate_accepts_absolute_url(self, scheduler, opener):
        assert OpenUrlAction(scheduler, opener).validate(self._config("https://example.com/x")).valid

    @pytest.mark.asyncio
    async def test_execute_checks_url_too(self, scheduler, opener):
        action = OpenUrlAction(scheduler, opener)

        missing = await action.execute(self._config(), START)
        invalid = await action.execute(self._config("nope"), START)

        assert missing.message == "URL não fornecida"
        assert invalid.message == "URL inválida"
        assert opener.opened == []

    @pytest.mark.asyncio
    async def test_due_target_opens_now(self, scheduler, opener):
        """open-url with a past target runs immediately."""
        action = OpenUrlAction(scheduler, opener)

        result = await action.execute(self._config("https://example.com"), START - timedelta(seconds=1))

        assert result.success is True
        assert result.message == "URL aberta: https://example.com"
        assert opener.opened == ["https://example.com"]

    @pytest.mark.asyncio
    async def test_delayed_open(self, scheduler, opener):
        action = OpenUrlAction(scheduler, opener)

        await action.execute(self._config("https://example.com"), START + timedelta(seconds=5))
        assert opener.opened == []

        await scheduler.advance(5)
        assert opener.opened == ["https://example.com"]

    @pytest.mark.asyncio
    async def test_opener_failure_is_reported(self, scheduler):
        action = OpenUrlAction(scheduler, FakeOpener(fail=True))

        result = await action.execute(self._config("https://example.com"), START)

        assert result.success is False
        assert result.message == "Erro ao abrir a URL"

    @pytest.mark.asyncio
    async def test_cancel(self, scheduler, opener):
        action = OpenUrlAction(scheduler, opener)
        config = self._config("https://example.com")
        await action.execute(config, START + timedelta(seconds=5))

        first = await action.cancel(config)
        second = await action.cancel(config)
        await scheduler.advance(10)

        assert first.message == "Abertura de URL cancelada com sucesso"
        assert second.message == "Nenhuma abertura de URL agendada para cancelar"
        assert opener.opened == []
