"""Tests for application wiring and the front-end conveniences."""

from datetime import datetime

import pytest

from clocked.app import create_app
from clocked.settings import ClockedSettings
from clocked.system.executor import DryRunExecutor
from clocked.timers import VirtualScheduler

from conftest import START, RecordingExecutor


class TestCreateApp:
    def test_dry_run_wraps_platform_executor(self):
        app = create_app(settings=ClockedSettings(dry_run=True), scheduler=VirtualScheduler(START))
        assert isinstance(app.executor, DryRunExecutor)

    @pytest.mark.asyncio
    async def test_shorter_horizon_rejects_events(self, executor, bus):
        app = create_app(
            settings=ClockedSettings(max_horizon_hours=1),
            scheduler=VirtualScheduler(START),
            executor=executor,
            bus=bus,
        )

        result = await app.create_event(
            {"title": "x", "time": "12:00", "actions": [{"id": "l1", "type": "lock-screen"}]}
        )

        assert result.success is False
        assert result.message == "O horário não pode ser mais de 1 horas no futuro"

    def test_list_actions(self, app):
        rows = app.list_actions()
        assert rows[0] == {"type": "shutdown", "name": "Desligar", "icon": "ph-power"}
        assert len(rows) == 7


class TestShutdownConveniences:
    @pytest.mark.asyncio
    async def test_schedule_shutdown(self, app):
        result = await app.schedule_shutdown(datetime(2026, 1, 15, 11, 0))

        assert result.success is True
        assert app.get_scheduled_time() == "active"
        [event] = app.get_all_events()
        assert event.title == "Desligar"
        assert event.actions[0].type == "shutdown"
        assert event.target_datetime == datetime(2026, 1, 15, 11, 0)

    @pytest.mark.asyncio
    async def test_schedule_shutdown_uses_time_of_day(self, app):
        """Only the time of day matters; an earlier time means tomorrow."""
        await app.schedule_shutdown(datetime(2020, 5, 1, 9, 30))
        [event] = app.get_all_events()
        assert event.target_datetime == datetime(2026, 1, 16, 9, 30)

    @pytest.mark.asyncio
    async def test_cancel_shutdown_without_schedule(self, app):
        result = await app.cancel_shutdown()

        assert result.success is False
        assert result.message == "Nenhum desligamento agendado"
        assert app.get_scheduled_time() is None

    @pytest.mark.asyncio
    async def test_cancel_shutdown(self, app, scheduler, executor):
        await app.schedule_shutdown(datetime(2026, 1, 15, 11, 0))

        result = await app.cancel_shutdown()
        await scheduler.advance(2 * 3600)

        assert result.success is True
        assert result.message == "Evento cancelado com sucesso"
        assert app.get_scheduled_time() is None
        assert executor.commands == []

    @pytest.mark.asyncio
    async def test_cancel_shutdown_ignores_other_events(self, app):
        await app.create_event(
            {"title": "x", "time": "11:00", "actions": [{"id": "l1", "type": "lock-screen"}]}
        )

        result = await app.cancel_shutdown()

        assert result.success is False
        assert len(app.get_all_events()) == 1

    @pytest.mark.asyncio
    async def test_check_os_shutdown_unsupported(self, app, executor):
        status = await app.check_os_shutdown()

        assert status.scheduled is False
        assert executor.abort_calls == 0

    @pytest.mark.asyncio
    async def test_check_os_shutdown_found_one(self, settings, scheduler, bus, opener):
        executor = RecordingExecutor(abort_result=True, query_supported=True)
        app = create_app(
            settings=settings, scheduler=scheduler, executor=executor, bus=bus, opener=opener
        )

        status = await app.check_os_shutdown()

        assert status.scheduled is True
        assert executor.abort_calls == 1

    @pytest.mark.asyncio
    async def test_check_os_shutdown_nothing_pending(self, settings, scheduler, bus, opener):
        executor = RecordingExecutor(abort_result=False, query_supported=True)
        app = create_app(
            settings=settings, scheduler=scheduler, executor=executor, bus=bus, opener=opener
        )

        status = await app.check_os_shutdown()

        assert status.scheduled is False
        assert status.message == "Nenhum desligamento agendado no sistema"


class TestAlarmControl:
    @pytest.mark.asyncio
    async def test_stop_alarm(self, app, scheduler):
        await app.create_event(
            {"title": "Acordar", "time": "10:05", "actions": [{"id": "a1", "type": "alarm"}]}
        )
        await scheduler.advance(5 * 60)

        result = app.stop_alarm("a1")
        again = app.stop_alarm("a1")

        assert result.success is True
        assert again.success is False

    @pytest.mark.asyncio
    async def test_alarm_uses_configured_sound(self, settings, scheduler, executor, bus, alarm_file):
        """Without an injected resolver the alarm file comes from settings."""
        app = create_app(settings=settings, scheduler=scheduler, executor=executor, bus=bus)
        await app.create_event(
            {"title": "Acordar", "time": "10:05", "actions": [{"id": "a1", "type": "alarm"}]}
        )

        await scheduler.advance(5 * 60)

        assert bus.history[-1].alarm_path == alarm_file


class TestPendingWork:
    @pytest.mark.asyncio
    async def test_has_pending_work_until_actions_fire(self, app, scheduler):
        assert app.has_pending_work() is False
        await app.create_event(
            {"title": "x", "time": "10:01", "actions": [{"id": "l1", "type": "lock-screen"}]}
        )
        assert app.has_pending_work() is True

        await scheduler.advance(59)
        # event retired, lock trigger still armed for 10:01:00
        assert app.get_all_events() == []
        assert app.has_pending_work() is True

        await scheduler.advance(1)
        assert app.has_pending_work() is False

    @pytest.mark.asyncio
    async def test_close(self, app, scheduler, executor):
        await app.schedule_shutdown(datetime(2026, 1, 15, 11, 0))

        app.close()
        await scheduler.advance(2 * 3600)

        assert executor.commands == []
