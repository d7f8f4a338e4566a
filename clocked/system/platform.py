"""Platform abstraction for OS commands.

Provides a unified executor interface across Windows, Linux, and macOS.
"""

import sys
from typing import Optional

from clocked.settings import ClockedSettings, get_settings
from clocked.system.executor import CommandExecutor, DryRunExecutor

if sys.platform == "win32":
    from clocked.system.platform_win import WindowsExecutor as PlatformExecutor
elif sys.platform == "darwin":
    from clocked.system.platform_unix import MacOSExecutor as PlatformExecutor
else:
    from clocked.system.platform_unix import LinuxExecutor as PlatformExecutor


def get_command_executor(settings: Optional[ClockedSettings] = None) -> CommandExecutor:
    """Build the executor for the running platform, honoring ``dry_run``."""
    settings = settings or get_settings()
    executor = PlatformExecutor(
        timeout=settings.command_timeout_seconds,
        abort_timeout=settings.abort_timeout_seconds,
    )
    if settings.dry_run:
        return DryRunExecutor(executor)
    return executor


__all__ = ["PlatformExecutor", "get_command_executor"]
