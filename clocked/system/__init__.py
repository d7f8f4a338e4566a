"""OS-facing collaborators: command executor, URL opener, alarm asset."""

from clocked.system.assets import AssetResolver, make_asset_resolver, resolve_alarm_path
from clocked.system.executor import (
    CommandError,
    CommandExecutor,
    CommandFailedError,
    CommandTimeoutError,
    DryRunExecutor,
    UnsupportedCommandError,
)
from clocked.system.platform import get_command_executor
from clocked.system.shell_open import OpenUrlError, UrlOpener

__all__ = [
    "AssetResolver",
    "CommandError",
    "CommandExecutor",
    "CommandFailedError",
    "CommandTimeoutError",
    "DryRunExecutor",
    "OpenUrlError",
    "UnsupportedCommandError",
    "UrlOpener",
    "get_command_executor",
    "make_asset_resolver",
    "resolve_alarm_path",
]
