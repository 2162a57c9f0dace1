"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import (
    DatabaseURLSchemes,
    LibraryConstants,
    LogLevels,
    MediaConstants,
    PlaybackConstants,
)
from ..domain.shared.messages import ErrorMessages


class DatabaseSettings(BaseModel):
    """Local library database configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/library.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(DatabaseURLSchemes.SQLITE):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class CatalogSettings(BaseModel):
    """Remote songs API configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    base_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("base_url", "api_url", "server_url"),
    )
    api_token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("api_token", "token")
    )
    request_timeout_s: float = Field(default=10.0, gt=0.0, le=300.0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(ErrorMessages.INVALID_BASE_URL)
        return v.rstrip("/")


class PlaybackSettings(BaseModel):
    """Transport behaviour."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    restart_threshold_seconds: float = Field(
        default=PlaybackConstants.RESTART_THRESHOLD_SECONDS, ge=0.0
    )
    shuffle: bool = False
    repeat_mode: Literal["off", "all", "one"] = "off"


class LibrarySettings(BaseModel):
    """Local library and upload handling."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    uploads_dir: str = Field(
        default="data/uploads", validation_alias=AliasChoices("uploads_dir", "upload_dir")
    )
    default_artist: str = Field(default=LibraryConstants.DEFAULT_ARTIST, min_length=1)
    default_cover_url: str = LibraryConstants.DEFAULT_COVER_URL
    max_upload_mb: int = Field(default=LibraryConstants.MAX_UPLOAD_MB, ge=1, le=2048)
    audio_extensions: tuple[str, ...] = LibraryConstants.AUDIO_EXTENSIONS

    @field_validator("audio_extensions", mode="before")
    @classmethod
    def validate_audio_extensions(cls, v: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        """Lower-case extensions and convert lists to tuples."""
        # Convert list to tuple if needed (from JSON array in env vars)
        extensions = tuple(ext.lower() for ext in v)
        for extension in extensions:
            if not extension.startswith("."):
                raise ValueError(ErrorMessages.INVALID_AUDIO_EXTENSION.format(extension=extension))
        return extensions


class MediaSettings(BaseModel):
    """ffplay media engine configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    ffplay_path: str = Field(
        default=MediaConstants.FFPLAY_BINARY, validation_alias=AliasChoices("ffplay_path", "ffplay")
    )
    ffprobe_path: str = Field(
        default=MediaConstants.FFPROBE_BINARY,
        validation_alias=AliasChoices("ffprobe_path", "ffprobe"),
    )
    volume: int = Field(default=100, ge=0, le=100)
    progress_interval_s: float = Field(
        default=MediaConstants.PROGRESS_INTERVAL_SECONDS, gt=0.0, le=10.0
    )


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL, CATALOG_BACKEND (top-level)
    - CATALOG__BASE_URL, CATALOG__API_TOKEN (nested with ``__``)
    - PLAYBACK__SHUFFLE, PLAYBACK__REPEAT_MODE
    - LIBRARY__UPLOADS_DIR, DATABASE__URL, MEDIA__FFPLAY_PATH, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = LogLevels.INFO
    catalog_backend: Literal["http", "local"] = "http"

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    library: LibrarySettings = Field(default_factory=LibrarySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {
            LogLevels.DEBUG,
            LogLevels.INFO,
            LogLevels.WARNING,
            LogLevels.ERROR,
            LogLevels.CRITICAL,
        }
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
