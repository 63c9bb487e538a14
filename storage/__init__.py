"""Data persistence components."""

from .settings import AppSettings, SettingsManager, get_settings_manager

__all__ = [
    "AppSettings",
    "SettingsManager",
    "get_settings_manager",
]
