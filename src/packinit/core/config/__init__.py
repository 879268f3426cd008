"""Settings loading for packinit."""
from __future__ import annotations

from .manager import SettingsManager, load_settings

__all__ = ["SettingsManager", "load_settings"]
