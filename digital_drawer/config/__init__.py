"""Configuration package."""

from digital_drawer.config.settings import (
    AppSettings,
    BackupSettings,
    PremiumSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BackupSettings",
    "PremiumSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
