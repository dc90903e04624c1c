"""Centralized settings for venuescrape runs."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SITES_PATH = Path(__file__).resolve().parent / "sites.yaml"


class Settings(BaseSettings):
    """
    Application settings powered by pydantic-settings.

    Loads configuration from environment variables and a .env file in the
    working directory.
    """

    # -------------------------------------------------------------------------
    # SELECTOR INFERENCE
    # -------------------------------------------------------------------------
    LLM_ENABLED: bool = True
    LLM_PROVIDER: str = "ollama"
    LLM_MODEL: str | None = None
    LLM_BASE_URL: str = "http://localhost:11434/v1"
    LLM_TIMEOUT_S: float = Field(default=30.0, gt=0)
    LLM_MAX_MARKUP_CHARS: int = Field(default=20000, ge=1)
    OPENAI_API_KEY: SecretStr | None = None

    # -------------------------------------------------------------------------
    # BROWSER
    # -------------------------------------------------------------------------
    HEADLESS: bool = True
    WAIT_TIMEOUT_S: float = Field(default=10.0, gt=0)
    SITE_TIMEOUT_S: float | None = None
    MAX_CONCURRENT_SITES: int = Field(default=1, ge=1)

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------
    SITES_CONFIG_PATH: Path = DEFAULT_SITES_PATH
    OUTPUT_DIR: Path = Path(".")

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Allow extra fields in .env but ignore them in the model
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
