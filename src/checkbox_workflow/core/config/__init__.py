"""Settings loading for checkbox-workflow."""
from __future__ import annotations

from .manager import ENV_PREFIX, SETTINGS_FILE_ENV, SettingsManager, load_settings

__all__ = ["SettingsManager", "load_settings", "ENV_PREFIX", "SETTINGS_FILE_ENV"]
