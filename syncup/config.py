"""Centralized configuration management using Pydantic Settings.

This module provides typed configuration for all application settings,
loaded from environment variables with sensible defaults.

Usage:
    from syncup.config import get_settings
    settings = get_settings()
    tz = settings.scheduling.canonical_timezone
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresSettings(BaseSettings):
    """PostgreSQL connection configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POSTGRES_",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field(default="postgres", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="devuser", description="PostgreSQL user")
    password: str = Field(default="", description="PostgreSQL password")
    database: str = Field(
        default="devdb",
        validation_alias="POSTGRES_DB",
        description="Database name",
    )
    pool_min_size: int = Field(default=2, description="Minimum pool size")
    pool_max_size: int = Field(default=10, description="Maximum pool size")
    pool_timeout: int = Field(default=30, description="Timeout for acquiring connections")
    pool_max_lifetime: int = Field(
        default=1800, description="Maximum connection lifetime in seconds"
    )
    pool_max_idle: int = Field(
        default=300, description="Maximum idle time before closing connection"
    )

    def get_dsn(self) -> str:
        """Generate PostgreSQL DSN connection string."""
        return (
            f"host={self.host} port={self.port} user={self.user} "
            f"password={self.password} dbname={self.database} sslmode=disable"
        )


class CorsSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    origins_raw: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )
    origins_regex: str = Field(
        default="",
        validation_alias="CORS_ORIGINS_REGEX",
        description="Regex pattern for origins",
    )

    @property
    def origins(self) -> list[str]:
        """Parse comma-separated origins into list."""
        return [o.strip() for o in self.origins_raw.split(",") if o.strip()]

    @property
    def allow_credentials(self) -> bool:
        """Credentials not allowed with wildcard origins."""
        return self.origins != ["*"] and not self.origins_regex


class DebugSettings(BaseSettings):
    """Debug flags configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    request: bool = Field(default=False, alias="request_debug")

    @field_validator("*", mode="before")
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)


class FeatureSettings(BaseSettings):
    """Feature flags configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    database: bool = Field(default=True, alias="enable_db")

    @field_validator("*", mode="before")
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)


class SchedulingSettings(BaseSettings):
    """Scheduling configuration."""

    model_config = SettingsConfigDict(env_prefix="SYNCUP_", extra="ignore")

    canonical_timezone: str = Field(
        default="America/New_York",
        description="IANA zone all aggregated results are shown in",
    )
    app_name: str = Field(default="SyncUp", description="Name used in calendar exports")
    uid_domain: str = Field(default="syncup.app", description="Domain part of calendar UIDs")

    @field_validator("canonical_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v}") from e
        return v


class Settings:
    """Main application settings combining all configuration sections.

    This is not a BaseSettings subclass to avoid env var conflicts.
    Each subsetting is loaded independently with its own prefix.

    Usage:
        settings = Settings()
        # or use cached singleton:
        settings = get_settings()
    """

    def __init__(self) -> None:
        self.postgres = PostgresSettings()
        self.cors = CorsSettings()
        self.debug = DebugSettings()
        self.features = FeatureSettings()
        self.scheduling = SchedulingSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance (singleton pattern)."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear cached settings (useful for testing)."""
    get_settings.cache_clear()
