"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    bot_token: str
    bot_password: str = "admin123"
    admin_timeout: int = Field(default=30, ge=1)
    storage_path: Path = Path("storage")
    db_file: Path = Path("plants.json")
    polling_timeout: int = Field(default=30, ge=0)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
