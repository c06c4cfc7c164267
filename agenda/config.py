"""Agenda — Configuration via pydantic-settings."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database (single local file, opened once per process)
    DATABASE_URL: str = "sqlite:///./app.db"

    # Timezone used for every stored timestamp (local wall-clock, not UTC)
    TIMEZONE: str = "America/Argentina/Buenos_Aires"

    # First-run seed
    DEFAULT_ADMIN_USER: str = "administrador"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    # Backups
    BACKUP_DIR: str = "./data/backups"
    BACKUP_RETENTION: int = 10
    AUTO_BACKUP: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
