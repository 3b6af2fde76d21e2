"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "showroom"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Database (SQLite for local dev, PostgreSQL for prod)
    database_url: str = "sqlite+aiosqlite:///./showroom.db"

    # Frontend
    frontend_url: str = "http://localhost:3000"

    # API
    api_prefix: str = "/api"

    # Pricing
    # Seeds the app_settings row; afterwards the rate is edited via /settings
    default_exchange_rate_eur: float = 4.5
    default_currency: str = "PLN"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
