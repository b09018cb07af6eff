"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Discord bot configuration."""

    name: str = Field(default="SimpBot", description="Bot display name")
    token: str = Field(default="", description="Discord bot token")
    default_prefix: str = Field(
        default="!",
        description="Command prefix used in guilds that have no stored prefix",
    )
    command_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds a command handler may run before it is reported as timed out. "
                    "None means handlers run without a time limit.",
    )

    @field_validator("default_prefix")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1 or value.isspace():
            raise ValueError("default_prefix must be a single non-whitespace character")
        return value

    model_config = SettingsConfigDict(env_prefix="BOT_")


class StorageSettings(BaseSettings):
    """Per-guild configuration storage."""

    database_path: Path = Field(
        default=Path("data/simpbot.db"),
        description="Path to the SQLite database holding prefixes and mutes",
    )

    model_config = SettingsConfigDict(env_prefix="STORAGE_")


class WikipediaSettings(BaseSettings):
    """Wikipedia lookup service configuration."""

    api_url: str = Field(
        default="https://en.wikipedia.org/w/api.php",
        description="MediaWiki API endpoint",
    )
    timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field(
        default="SimpBot/0.1 (Discord bot)",
        description="User-Agent sent to the MediaWiki API",
    )

    model_config = SettingsConfigDict(env_prefix="WIKIPEDIA_")


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: Literal["development", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    # Sub-configurations
    bot: BotSettings = Field(default_factory=BotSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    wikipedia: WikipediaSettings = Field(default_factory=WikipediaSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from file and environment.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Loaded settings instance
    """
    global _settings
    if env_file:
        _settings = Settings(_env_file=env_file)
    else:
        _settings = Settings()
    return _settings
