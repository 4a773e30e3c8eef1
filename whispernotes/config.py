"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Empty means local-only mode: identity calls go straight to the fallback path.
    API_BASE_URL: str = ""
    HTTP_TIMEOUT_SECONDS: float = 10.0
    AUTH_MAX_RETRIES: int = 0
    AUTH_RETRY_BASE_SECONDS: float = 0.5
    AUTH_RETRY_MAX_SECONDS: float = 4.0

    DATABASE_PATH: str = "data/whispernotes.db"

    USER_STORAGE_KEY: str = "ghibli_user"
    THEME_STORAGE_KEY: str = "ghibli_theme"
    NOTES_STORAGE_KEY: str = "whisper_notes"
    NOTEBOOKS_STORAGE_KEY: str = "whisper_notebooks"

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.DATABASE_PATH)
        if not db_path.is_absolute():
            self.DATABASE_PATH = str((BASE_DIR / db_path).resolve())

        self.API_BASE_URL = self.API_BASE_URL.strip().rstrip("/")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
