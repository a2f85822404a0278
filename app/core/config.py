"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    Static type checkers treat fields as constructor arguments, which is not
    how BaseSettings is intended to be used.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_server_settings() -> "ServerSettings":
    return ServerSettings()  # type: ignore[call-arg]


def _build_analysis_settings() -> "AnalysisSettings":
    return AnalysisSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Request gate configuration (credentials, rate limits, limits on input)."""

    api_key_required: bool = Field(
        True,
        description="Whether API key authentication is required",
    )
    # Legacy unprefixed IA11_* / RATE_LIMIT_* names from earlier deployments
    # are accepted after the APP_ ones
    api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("APP_API_KEY", "IA11_API_KEY"),
        description="Expected shared-secret credential",
    )
    api_keys: str | None = Field(
        None,
        validation_alias=AliasChoices("APP_API_KEYS", "IA11_API_KEYS"),
        description="Additional comma-separated credentials (key rotation)",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client, per-tier rate limiting",
    )
    rate_limit_per_min: int = Field(
        30,
        validation_alias=AliasChoices("APP_RATE_LIMIT_PER_MIN", "RATE_LIMIT_PER_MIN"),
        description="Maximum requests per window for the standard tier",
        ge=1,
    )
    rate_limit_per_min_pro: int = Field(
        5,
        validation_alias=AliasChoices("APP_RATE_LIMIT_PER_MIN_PRO", "RATE_LIMIT_PER_MIN_PRO"),
        description="Maximum requests per window for the pro tier",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    trust_proxy_headers: bool = Field(
        True,
        description="Honour X-Client-ID and X-Forwarded-For; when off, key clients by socket peer",
    )

    max_body_bytes: int = Field(
        1024 * 1024,
        description="Maximum accepted request body size in bytes",
        ge=1,
    )
    cors_allow_origins: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        populate_by_name=True,
    )


class ServerSettings(BaseSettings):
    """Listen address for the uvicorn entrypoint."""

    host: str = Field(
        "0.0.0.0",
        description="Interface to bind",
    )
    # Hosting platforms inject a bare PORT variable
    port: int = Field(
        3000,
        validation_alias=AliasChoices("SERVER_PORT", "PORT"),
        description="TCP port to listen on",
    )

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        case_sensitive=False,
    )


class AnalysisSettings(BaseSettings):
    """Response producer selection.

    Only the static engine exists today; the factory rejects anything else.
    """

    engine: str = Field(
        "static",
        description="Analysis producer name (e.g., static)",
    )
    engine_name: str = Field(
        "IA11",
        description="Engine name reported in analysis results",
    )

    model_config = SettingsConfigDict(
        env_prefix="ANALYSIS_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    server: ServerSettings = Field(default_factory=_build_server_settings)
    analysis: AnalysisSettings = Field(default_factory=_build_analysis_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
