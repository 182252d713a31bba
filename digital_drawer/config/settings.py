"""
Configuration Management for Digital Drawer

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Backup limits, storage location and the exported app identity are
read once and shared by every flow.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackupSettings(BaseSettings):
    """Backup export/import limits."""

    model_config = SettingsConfigDict(
        env_prefix="BACKUP_",
        extra="ignore"
    )

    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum size of a backup file accepted for import"
    )
    max_string_length: int = Field(
        default=10000,
        ge=1,
        description="Maximum length of any string inside a backup"
    )
    max_array_length: int = Field(
        default=5000,
        ge=1,
        description="Maximum number of items in any array inside a backup"
    )
    export_dir: str = Field(
        default="./exports",
        description="Directory backup files are written to"
    )
    atomic_restore: bool = Field(
        default=False,
        description="Write all restored sections in one batch when the store supports it"
    )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max import size in bytes."""
        return self.max_file_size_mb * 1024 * 1024


class StorageSettings(BaseSettings):
    """Local key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore"
    )

    data_path: str = Field(
        default="./data/storage.json",
        description="Path of the JSON file holding the key-value store"
    )
    key_prefix: str = Field(
        default="@",
        max_length=5,
        description="Namespace prefix of every storage key"
    )

    @field_validator('data_path')
    @classmethod
    def validate_data_path(cls, v: str) -> str:
        """Reject a directory where a file is expected."""
        if Path(v).is_dir():
            raise ValueError(f"Storage path {v} is a directory, expected a file")
        return v


class PremiumSettings(BaseSettings):
    """In-app purchase configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PREMIUM_",
        extra="ignore"
    )

    entitlement_id: str = Field(
        default="remove_ads",
        description="Entitlement that marks a premium user"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Identity written into backups
    app_name: str = Field(
        default="dijital_cekmecem",
        min_length=1,
        description="Application name used in backup file names"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Version stamped into exported backups"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def backup(self) -> BackupSettings:
        return BackupSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def premium(self) -> PremiumSettings:
        return PremiumSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("backup", "storage", "premium", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
