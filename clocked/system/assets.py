"""Location of the alarm sound.

Resolution order:
1. ``alarm_sound`` from settings, when configured
2. packaged builds (frozen executables or an explicit ``resources_dir``):
   ``<resources>/public/alarm-1.mp3``
3. development checkouts: ``<cwd>/public/alarm-1.mp3``
"""

import os
import sys
from pathlib import Path
from typing import Callable, Optional

from clocked.settings import ClockedSettings, get_settings

ALARM_FILE_NAME = "alarm-1.mp3"

AssetResolver = Callable[[], Path]


def is_packaged() -> bool:
    return bool(getattr(sys, "frozen", False))


def _resources_dir(settings: ClockedSettings) -> Optional[Path]:
    if settings.resources_dir:
        return Path(settings.resources_dir)
    if is_packaged():
        bundle_dir = getattr(sys, "_MEIPASS", None)
        return Path(bundle_dir) if bundle_dir else Path(sys.executable).parent
    return None


def resolve_alarm_path(settings: Optional[ClockedSettings] = None) -> Path:
    """Return the alarm sound path. Raises FileNotFoundError when it is missing."""
    settings = settings or get_settings()

    if settings.alarm_sound:
        path = Path(settings.alarm_sound).expanduser()
    else:
        base = _resources_dir(settings) or Path(os.getcwd())
        path = base / "public" / ALARM_FILE_NAME

    if not path.is_file():
        raise FileNotFoundError(f"Alarm sound not found: {path}")
    return path


def make_asset_resolver(settings: Optional[ClockedSettings] = None) -> AssetResolver:
    return lambda: resolve_alarm_path(settings)
