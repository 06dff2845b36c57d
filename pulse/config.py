"""
ProjectPulse Configuration Module
=================================

Centralized configuration management using Pydantic Settings.

Loads configuration from:
    1. Environment variables
    2. .env file (if present)
    3. Default values

Usage:
    from pulse.config import settings

    print(settings.database_dsn)
    print(settings.health_window_size)

Author: ProjectPulse Team
Version: 1.0.0
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Naming convention: UPPER_SNAKE_CASE in env, lower_snake_case in code.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # =========================================================================
    # Application Settings
    # =========================================================================

    app_name: str = Field(default="ProjectPulse", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # =========================================================================
    # API Server
    # =========================================================================

    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    cors_allowed_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (empty = any)"
    )

    # =========================================================================
    # PostgreSQL
    # =========================================================================

    postgres_host: str = Field(default="localhost", description="PostgreSQL host")
    postgres_port: int = Field(default=5432, description="PostgreSQL port")
    postgres_db: str = Field(default="projectpulse", description="PostgreSQL database")
    postgres_user: str = Field(default="pulse_user", description="PostgreSQL user")
    postgres_password: str = Field(
        default="pulse_secure_password_change_me",
        description="PostgreSQL password"
    )
    database_url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy async URL; overrides the postgres_* fields"
    )

    @property
    def postgres_async_dsn(self) -> str:
        """Get async PostgreSQL connection string for asyncpg."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def database_dsn(self) -> str:
        """Connection string used by the async engine."""
        return self.database_url or self.postgres_async_dsn

    # =========================================================================
    # Authentication
    # =========================================================================

    jwt_secret: str = Field(
        default="pulse-dev-secret-CHANGE-IN-PRODUCTION",
        description="HMAC secret used to sign access tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expire_minutes: int = Field(
        default=7 * 24 * 60,
        ge=1,
        description="Access token lifetime in minutes"
    )
    auth_cookie_name: str = Field(default="token", description="Auth cookie name")
    auth_cookie_secure: bool = Field(
        default=False,
        description="Mark the auth cookie Secure (enable behind HTTPS)"
    )

    # =========================================================================
    # Health Score Policy
    # =========================================================================

    health_window_size: int = Field(
        default=4,
        ge=1,
        description="Number of most recent check-ins/feedback entries scored"
    )
    health_drift_threshold: int = Field(
        default=5,
        ge=0,
        description="Read-time drift (points) above which the stored score is refreshed"
    )
    initial_health_score: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Health score assigned to newly created projects"
    )

    # =========================================================================
    # Activity Log
    # =========================================================================

    activity_list_limit: int = Field(
        default=50,
        ge=1,
        description="Maximum activity entries returned per project"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        Settings instance
    """
    return Settings()


# Convenience alias
settings = get_settings()
