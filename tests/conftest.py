"""Shared fixtures: a simulated clock, fake OS collaborators and a wired app.

Every test runs at a fixed wall-clock moment (``START``) on a
VirtualScheduler, so nothing waits on real time.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Set, Tuple

import pytest

from clocked.app import ClockedApp, create_app
from clocked.messaging.bus import NotificationBus
from clocked.settings import ClockedSettings, clear_settings_cache
from clocked.system.executor import CommandExecutor
from clocked.system.shell_open import OpenUrlError, UrlOpener
from clocked.timers import VirtualScheduler

START = datetime(2026, 1, 15, 10, 0, 0)


class RecordingExecutor(CommandExecutor):
    """Records commands instead of running them."""

    platform_name = "test"

    shutdown_command = "shutdown-now"
    reboot_command = "reboot-now"
    lock_command = "lock-now"
    hibernate_command = "hibernate-now"

    def __init__(self, abort_result: bool = False, query_supported: bool = False):
        super().__init__()
        self.commands: List[str] = []
        self.fail_commands: Set[str] = set()
        self.dnd: List[bool] = []
        self.abort_calls = 0
        self.abort_result = abort_result
        self.query_supported = query_supported

    async def _spawn(self, command: str, timeout: Optional[float]) -> Tuple[int, str]:
        self.commands.append(command)
        if command in self.fail_commands:
            return 1, "simulated failure"
        return 0, ""

    async def set_do_not_disturb(self, enabled: bool) -> None:
        self.dnd.append(enabled)

    async def abort_shutdown(self) -> bool:
        self.abort_calls += 1
        return self.abort_result

    @property
    def supports_shutdown_query(self) -> bool:
        return self.query_supported


class FakeOpener(UrlOpener):
    def __init__(self, fail: bool = False):
        self.opened: List[str] = []
        self.fail = fail

    async def open(self, url: str) -> None:
        if self.fail:
            raise OpenUrlError(f"refused {url}")
        self.opened.append(url)


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch, tmp_path):
    """Keep CLOCKED_* variables and stray .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("CLOCKED_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler(start=START)


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def bus() -> NotificationBus:
    return NotificationBus(history=50)


@pytest.fixture
def alarm_file(tmp_path) -> Path:
    path = tmp_path / "public" / "alarm-1.mp3"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"ID3")
    return path


@pytest.fixture
def settings(alarm_file) -> ClockedSettings:
    return ClockedSettings(alarm_sound=alarm_file)


@pytest.fixture
def app(settings, scheduler, executor, bus, opener, alarm_file) -> ClockedApp:
    return create_app(
        settings=settings,
        scheduler=scheduler,
        executor=executor,
        bus=bus,
        opener=opener,
        asset_resolver=lambda: alarm_file,
    )


@pytest.fixture
def manager(app):
    return app.manager


@pytest.fixture
def registry(app):
    return app.registry
