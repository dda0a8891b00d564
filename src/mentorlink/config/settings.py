"""
MentorLink Application Settings

Configuration management using Pydantic Settings.
All sensitive values are loaded from environment variables.

SECURITY: Never log or expose settings containing secrets.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CRISIS_ALERT = (
    "Emergency support has been notified. A crisis counselor will be "
    "available shortly. If this is a life-threatening emergency, please call "
    "911 or your local emergency number immediately."
)


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(env_prefix="MENTORLINK_DB_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="mentorlink", description="Database name")
    user: str = Field(default="mentorlink", description="Database user")
    password: SecretStr = Field(default=SecretStr("dev_password"), description="Database password")
    pool_size: int = Field(default=10, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, le=100, description="Max overflow connections")
    url: Optional[str] = Field(
        default=None,
        description="Full async URL override (e.g. sqlite+aiosqlite:///./dev.db)",
    )

    @property
    def async_url(self) -> str:
        """Generate async database URL for SQLAlchemy."""
        if self.url:
            return self.url
        password = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{password}@{self.host}:{self.port}/{self.name}"

    @property
    def sync_url(self) -> str:
        """Generate sync database URL for Alembic migrations."""
        password = self.password.get_secret_value()
        return f"postgresql://{self.user}:{password}@{self.host}:{self.port}/{self.name}"

    @property
    def is_sqlite(self) -> bool:
        return self.async_url.startswith("sqlite")


class JWTSettings(BaseSettings):
    """Bearer token verification configuration."""

    model_config = SettingsConfigDict(env_prefix="MENTORLINK_JWT_")

    secret_key: SecretStr = Field(default=SecretStr("dev_jwt_secret_key_not_for_production"), description="JWT signing secret")
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    dev_token_passthrough: bool = Field(
        default=False,
        description="Development only: treat the raw bearer token as the user id",
    )


class RealtimeSettings(BaseSettings):
    """WebSocket and message paging configuration."""

    model_config = SettingsConfigDict(env_prefix="MENTORLINK_WS_")

    path: str = Field(default="/api/ws", description="WebSocket endpoint path")
    outbox_size: int = Field(default=256, ge=1, le=10_000, description="Queued pushes per connection")
    default_page_size: int = Field(default=50, ge=1, le=500)
    max_page_size: int = Field(default=200, ge=1, le=1000)


class SafetySettings(BaseSettings):
    """Crisis detection and escalation configuration."""

    model_config = SettingsConfigDict(env_prefix="MENTORLINK_SAFETY_")

    crisis_alert_message: str = Field(default=DEFAULT_CRISIS_ALERT)
    extra_crisis_keywords: list[str] = Field(
        default_factory=list,
        description="Additional phrases appended to the built-in crisis list",
    )


class SentrySettings(BaseSettings):
    """Sentry error tracking configuration."""

    model_config = SettingsConfigDict(env_prefix="MENTORLINK_SENTRY_")

    dsn: str = Field(default="", description="Sentry DSN (empty disables)")
    sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)


class Settings(BaseSettings):
    """
    Main application settings.

    All configuration is loaded from environment variables with MENTORLINK_ prefix.
    Sensitive values use SecretStr to prevent accidental logging.

    Usage:
        settings = get_settings()
        db_url = settings.database.async_url
    """

    model_config = SettingsConfigDict(
        env_prefix="MENTORLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode - NEVER enable in production")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    api_version: str = Field(default="v1", description="API version prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )
    create_schema_on_startup: bool = Field(
        default=False,
        description="Create tables at startup (development/sqlite convenience)",
    )
    store_backend: Literal["sql", "memory"] = Field(
        default="sql",
        description="Session store backend (memory is process-local, for demos and tests)",
    )
    verify_mentors_on_registration: bool = Field(
        default=False,
        description="Development only: register new mentors as verified",
    )

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    realtime: RealtimeSettings = Field(default_factory=RealtimeSettings)
    safety: SafetySettings = Field(default_factory=SafetySettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    def allows_token_passthrough(self) -> bool:
        """Passthrough tokens are honoured in development only."""
        return self.env == "development" and self.jwt.dev_token_passthrough

    def auto_verifies_mentors(self) -> bool:
        """Registration skips mentor verification in development only."""
        return self.env == "development" and self.verify_mentors_on_registration


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.
    For testing, use dependency injection to override.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
