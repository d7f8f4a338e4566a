import importlib.metadata

try:
    _detected_version = importlib.metadata.version("clocked")
    # Ensure we never end up with None or empty string
    __version__ = _detected_version if _detected_version else "0.0.0-dev"
except Exception:
    # Fallback for dev environments where metadata might not be available
    __version__ = "0.0.0-dev"

from clocked.settings import ClockedSettings, clear_settings_cache, get_settings

__all__ = [
    "__version__",
    "ClockedSettings",
    "clear_settings_cache",
    "get_settings",
]
