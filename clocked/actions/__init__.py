"""Schedulable actions and the registry that resolves them by type."""

from datetime import timedelta
from typing import Optional

from clocked.actions.alarm import AlarmAction
from clocked.actions.base import Action, ActionConfig, ActionResult, ValidationResult
from clocked.actions.do_not_disturb import DoNotDisturbAction
from clocked.actions.lock_screen import LockScreenAction
from clocked.actions.open_url import OpenUrlAction
from clocked.actions.power import HibernateAction, RestartAction, ShutdownAction
from clocked.actions.registry import ActionRegistry
from clocked.messaging.bus import NotificationBus
from clocked.system.assets import AssetResolver
from clocked.system.executor import CommandExecutor
from clocked.system.shell_open import UrlOpener
from clocked.timers import Scheduler
from clocked.timing import DEFAULT_HORIZON


def build_default_registry(
    scheduler: Scheduler,
    executor: CommandExecutor,
    bus: NotificationBus,
    opener: Optional[UrlOpener] = None,
    asset_resolver: Optional[AssetResolver] = None,
    horizon: timedelta = DEFAULT_HORIZON,
) -> ActionRegistry:
    """Registry with every built-in action, in the order the UI lists them."""
    registry = ActionRegistry()
    registry.register(ShutdownAction(scheduler, executor, horizon))
    registry.register(RestartAction(scheduler, executor, horizon))
    registry.register(HibernateAction(scheduler, executor, horizon))
    registry.register(LockScreenAction(scheduler, executor, horizon))
    registry.register(AlarmAction(scheduler, bus, asset_resolver, horizon))
    registry.register(DoNotDisturbAction(scheduler, executor, bus, horizon))
    registry.register(OpenUrlAction(scheduler, opener, horizon))
    return registry


__all__ = [
    "Action",
    "ActionConfig",
    "ActionRegistry",
    "ActionResult",
    "AlarmAction",
    "DoNotDisturbAction",
    "HibernateAction",
    "LockScreenAction",
    "OpenUrlAction",
    "RestartAction",
    "ShutdownAction",
    "ValidationResult",
    "build_default_registry",
]
