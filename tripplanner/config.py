"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str | None = None
    auto_create_schema: bool = False

    # Cache / rate limiting
    redis_url: str | None = None

    # UI
    ui_origin: str = "http://localhost:3000"

    # Auth
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 7 * 24 * 60
    password_hash_iterations: int = 260_000

    # Rate limiting (requests per minute, per client)
    auth_attempts_per_min: int = 10

    # Seeding (admin account created by tripplanner.db.seed when both are set)
    seed_admin_email: str | None = None
    seed_admin_password: str | None = None

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
