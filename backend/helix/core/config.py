"""Application configuration using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HELIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Helix"
    version: str = "1.0.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8080, description="Server port")

    # Paths
    config_path: Path = Field(
        default=Path("/config"),
        description="Path for configuration files and database",
    )
    languages_path: Path = Field(
        default=Path("/config/languages"),
        description="Directory holding installed translation files (<locale>.po/.mo)",
    )

    # Database
    database_url: str | None = Field(
        default=None,
        description="Options database URL (defaults to SQLite under config_path)",
    )

    # CORS
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )

    # Access control
    admin_token: str | None = Field(
        default=None,
        description="Bearer token granting the manage_options capability",
    )

    # Host defaults used when the options table has no value yet
    site_url: str = Field(
        default="http://localhost",
        description="Address of the site core files",
    )
    home_url: str | None = Field(
        default=None,
        description="Public site address (defaults to site_url)",
    )
    default_locale: str = Field(
        default="",
        description="Locale used when WPLANG is unset (empty means en_US)",
    )

    # Translations
    wp_version: str = Field(
        default="6.5",
        description="Core version reported to the translations API",
    )
    translations_api_url: str = Field(
        default="https://api.wordpress.org/translations/core/1.0/",
        description="Translations API endpoint listing available language packs",
    )
    translations_cache_ttl: float = Field(
        default=3600.0,
        ge=0,
        description="Seconds to cache the available translations list",
    )
    translations_failure_ttl: float = Field(
        default=60.0,
        ge=0,
        description="Seconds to wait before retrying a failed translations lookup",
    )
    allow_language_install: bool = Field(
        default=True,
        description="Allow downloading missing language packs on update",
    )
    http_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for outbound HTTP requests",
    )

    @property
    def db_path(self) -> Path:
        """Get the SQLite database file path."""
        return self.config_path / "helix.db"


# Global settings instance
settings = Settings()
