"""Application configuration from environment."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "VowArc API"
    debug: bool = False
    log_level: str = "INFO"

    # Database (async driver; Alembic converts to a sync one)
    database_url: str = "sqlite+aiosqlite:///./vowarc.db"

    # JWT issued by the auth provider (HS256 shared secret)
    secret_key: str = "change-me-in-production-use-env"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Shared secret sent by the scheduler as x-cron-secret; unset disables the check
    cron_secret: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
