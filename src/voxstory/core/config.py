"""Application configuration using pydantic-settings."""
import logging
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    workers: int = 1
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",  # Vite default
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Database
    database_url: str = "sqlite+aiosqlite:///./voxstory.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Session tokens
    secret_key: str = "voxstory-secret-key"
    jwt_secret_key: str = ""  # Falls back to secret_key if not set
    jwt_algorithm: str = "HS256"
    session_expire_minutes: int | None = None  # None keeps sessions until logout
    session_cookie_name: str = "token"
    session_cookie_secure: bool = False
    session_cookie_samesite: Literal["lax", "strict", "none"] = "lax"

    # Password hashing (bcrypt cost factor, 4-31)
    password_hash_rounds: int = 12

    # Gemini
    gemini_api_key: str = ""
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_story_model: str = "gemini-3-flash-preview"
    gemini_tts_model: str = "gemini-2.5-flash-preview-tts"
    generation_timeout_seconds: float = 120.0

    @property
    def async_database_url(self) -> str:
        """Ensure database URL uses an async driver."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("sqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    @property
    def effective_jwt_secret(self) -> str:
        """Get the effective JWT secret key (prefers jwt_secret_key, falls back to secret_key)."""
        return self.jwt_secret_key or self.secret_key

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Set the root log level and a plain format for the service."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
