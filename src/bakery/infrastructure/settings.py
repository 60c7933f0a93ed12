"""Runtime configuration, read from the environment or a ``.env`` file.

Example .env:
    BAKERY_DATA_DIR=./data
    BAKERY_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    data_dir: Path = Path("data")
    log_level: str = "INFO"
    default_page_size: int = 50

    model_config = SettingsConfigDict(
        env_prefix="BAKERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
