"""Configuration management for Life Intelligence using Pydantic Settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database settings."""

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    database_url: str = Field(
        default="sqlite:///~/.local/share/lifeintel/lifeintel.db", alias="DATABASE_URL"
    )
    echo: bool = Field(default=False, alias="DATABASE_ECHO")


class InsightSettings(BaseSettings):
    """Insight generation settings."""

    model_config = SettingsConfigDict(env_prefix="INSIGHTS_", env_file=".env", extra="ignore")

    # Pair series on matching dates; False pairs them by window position
    align_by_date: bool = True


class ApiSettings(BaseSettings):
    """HTTP API server settings."""

    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 8000


class Settings(BaseSettings):
    """Main Life Intelligence settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # General
    environment: Literal["development", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    insights: InsightSettings = Field(default_factory=InsightSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


# Global settings instance
settings = Settings()
