"""Tests for the OS command executor and its platform variants."""

import sys
from unittest.mock import AsyncMock, patch

import pytest

from clocked.system.executor import (
    CommandError,
    CommandExecutor,
    CommandFailedError,
    CommandTimeoutError,
    DryRunExecutor,
    UnsupportedCommandError,
)
from clocked.system.platform import get_command_executor
from clocked.system.platform_unix import LinuxExecutor, MacOSExecutor
from clocked.system.platform_win import WindowsExecutor
from clocked.settings import ClockedSettings


def python_command(code: str) -> str:
    return f'"{sys.executable}" -c "{code}"'


class TestCommandExecutor:
    @pytest.mark.asyncio
    async def test_run_returns_exit_code(self):
        executor = CommandExecutor()
        assert await executor.run(python_command("import sys; sys.exit(3)")) == 3

    @pytest.mark.asyncio
    async def test_run_checked_raises_on_failure(self):
        executor = CommandExecutor()
        command = python_command("import sys; sys.stderr.write('nope'); sys.exit(2)")

        with pytest.raises(CommandFailedError) as exc_info:
            await executor.run_checked(command)

        assert exc_info.value.exit_code == 2
        assert "nope" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_run_checked_success(self):
        await CommandExecutor().run_checked(python_command("pass"))

    @pytest.mark.asyncio
    async def test_timeout_kills_command(self):
        executor = CommandExecutor(timeout=0.2)

        with pytest.raises(CommandTimeoutError) as exc_info:
            await executor.run(python_command("import time; time.sleep(10)"))

        assert exc_info.value.timeout == 0.2
        assert isinstance(exc_info.value, CommandError)

    @pytest.mark.asyncio
    async def test_unsupported_primitive(self):
        with pytest.raises(UnsupportedCommandError):
            await CommandExecutor().shutdown()

    @pytest.mark.asyncio
    async def test_generic_abort_reports_nothing(self):
        executor = CommandExecutor()
        assert await executor.abort_shutdown() is False
        assert executor.supports_shutdown_query is False


class TestDryRunExecutor:
    @pytest.mark.asyncio
    async def test_records_instead_of_running(self):
        executor = DryRunExecutor(LinuxExecutor())

        await executor.shutdown()
        await executor.lock()

        assert executor.commands == [
            "sudo shutdown -h now",
            "gnome-screensaver-command -l || xdg-screensaver lock || i3lock",
        ]

    def test_factory_honors_dry_run(self):
        executor = get_command_executor(ClockedSettings(dry_run=True, command_timeout_seconds=3))
        assert isinstance(executor, DryRunExecutor)
        assert executor.timeout == 3


class TestPlatformExecutors:
    @pytest.mark.asyncio
    async def test_linux_primitives(self):
        executor = LinuxExecutor()
        with patch.object(executor, "run_checked", new=AsyncMock()) as run_checked:
            await executor.reboot()
            await executor.set_do_not_disturb(True)

        commands = [call.args[0] for call in run_checked.await_args_list]
        assert commands == [
            "sudo reboot",
            "gsettings set org.gnome.desktop.notifications show-banners false",
        ]

    @pytest.mark.asyncio
    async def test_macos_do_not_disturb(self):
        executor = MacOSExecutor()
        with patch.object(executor, "run_checked", new=AsyncMock()) as run_checked:
            await executor.set_do_not_disturb(True)

        assert run_checked.await_args.args[0].endswith("doNotDisturb -boolean true")

    @pytest.mark.asyncio
    async def test_windows_commands(self):
        executor = WindowsExecutor()
        with patch.object(executor, "run_checked", new=AsyncMock()) as run_checked:
            await executor.shutdown()
            await executor.hibernate()

        commands = [call.args[0] for call in run_checked.await_args_list]
        assert commands == ["shutdown /s /t 0", "shutdown /h"]


class TestWindowsAbort:
    """``shutdown /a`` exit codes."""

    @pytest.mark.asyncio
    async def test_abort_success(self):
        executor = WindowsExecutor(abort_timeout=1.5)
        with patch.object(executor, "run", new=AsyncMock(return_value=0)) as run:
            assert await executor.abort_shutdown() is True

        run.assert_awaited_once_with("shutdown /a", timeout=1.5)

    @pytest.mark.asyncio
    async def test_nothing_in_progress(self):
        """Exit code 1116 means there was nothing to abort."""
        executor = WindowsExecutor()
        with patch.object(executor, "run", new=AsyncMock(return_value=1116)):
            assert await executor.abort_shutdown() is False

    @pytest.mark.asyncio
    async def test_other_failure_is_logged(self, caplog):
        executor = WindowsExecutor()
        with patch.object(executor, "run", new=AsyncMock(return_value=5)):
            assert await executor.abort_shutdown() is False
        assert "exit code 5" in caplog.text

    @pytest.mark.asyncio
    async def test_timeout_is_not_fatal(self):
        executor = WindowsExecutor()
        error = CommandTimeoutError("shutdown /a", 2.0)
        with patch.object(executor, "run", new=AsyncMock(side_effect=error)):
            assert await executor.abort_shutdown() is False

    def test_supports_query(self):
        assert WindowsExecutor().supports_shutdown_query is True
