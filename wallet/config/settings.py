"""
Configuration Management for the Wallet Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger core itself takes no configuration; only the storage and
audit layers read these values.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Flat-file dump configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_STORAGE_",
        extra="ignore"
    )

    dump_dir: str = Field(
        default="data",
        description="Directory used by export/import when none is given"
    )
    history_records_per_file: int = Field(
        default=100,
        ge=1,
        description="Maximum payments per history page file"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of dump files"
    )

    @field_validator('dump_dir')
    @classmethod
    def validate_dump_dir(cls, v: str) -> str:
        """Reject an empty directory name."""
        if not v.strip():
            raise ValueError("dump_dir must not be empty")
        return v


class AuditSettings(BaseSettings):
    """Audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLET_AUDIT_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Record audit events for ledger operations"
    )
    max_events: int = Field(
        default=10000,
        ge=1,
        description="Events kept by the in-memory audit storage"
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

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
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
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def audit(self) -> AuditSettings:
        return AuditSettings()

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

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for every group that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "audit", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
