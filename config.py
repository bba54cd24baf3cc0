"""Configuration settings for the exercise progress engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = Path(__file__).parent / "data" / "playbook.db"

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Application settings loaded from PLAYBOOK_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PLAYBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: Path = Field(
        default=DEFAULT_DB_PATH,
        description="SQLite database holding exercises and responses",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr",
    )
    default_user_id: str = Field(
        default="local",
        description="User whose responses the CLI reads when --user is omitted",
    )

    # Character limit warnings for text responses (fractions of max length)
    text_near_limit_ratio: float = Field(default=0.7, gt=0.0, le=1.0)
    text_critical_limit_ratio: float = Field(default=0.9, gt=0.0, le=1.0)

    progress_bar_width: int = Field(default=30, ge=5, le=120)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
