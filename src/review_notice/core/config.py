"""
Configuration management for Review Notice.

Uses Pydantic Settings for environment variable validation and type safety.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class NoticeDefaults(BaseSettings):
    """Defaults applied to notices that omit an option at registration."""

    days: int = Field(
        default=7,
        ge=0,
        description="Days to wait before showing a notice (and half the 'later' delay)"
    )
    cap: str = Field(
        default="manage_options",
        description="Capability a viewer needs to see and answer a notice"
    )
    domain: str = Field(
        default="review-notice",
        description="Text domain tag for translations"
    )

    model_config = SettingsConfigDict(env_prefix="REVIEW_NOTICE_")


class StorageConfig(BaseSettings):
    """Storage backend configuration."""

    backend: str = Field(
        default="memory",
        description="Storage backend: 'memory' or 'sqlite'"
    )
    db_path: str = Field(
        default="/var/lib/review-notice/notices.db",
        description="Path to SQLite database file (sqlite backend only)"
    )

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate storage backend name."""
        v = v.lower()
        if v not in ("memory", "sqlite"):
            raise ValueError("Storage backend must be one of: ['memory', 'sqlite']")
        return v

    model_config = SettingsConfigDict(env_prefix="REVIEW_NOTICE_STORAGE_")


class ServerConfig(BaseSettings):
    """HTTP API configuration."""

    host: str = Field(
        default="0.0.0.0",
        description="Bind address for the API server"
    )
    port: int = Field(
        default=8090,
        ge=1,
        le=65535,
        description="Port for the API server"
    )
    notices_file: Optional[str] = Field(
        default=None,
        description="YAML file with notices to register at startup"
    )
    capabilities_file: Optional[str] = Field(
        default=None,
        description="YAML file with roles and viewer capabilities"
    )

    model_config = SettingsConfigDict(env_prefix="REVIEW_NOTICE_SERVER_")


class AppConfig(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Nested configurations
    notices: NoticeDefaults = Field(default_factory=NoticeDefaults)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_NOTICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Lazily loads configuration on first access.

    Returns:
        AppConfig: The global configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig(
            notices=NoticeDefaults(),
            storage=StorageConfig(),
            server=ServerConfig(),
        )
    return _config


def reload_config() -> AppConfig:
    """
    Reload configuration from environment variables.

    Useful for testing or when environment changes.

    Returns:
        AppConfig: The reloaded configuration instance
    """
    global _config
    _config = None
    return get_config()
