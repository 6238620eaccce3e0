"""
Configuration management for Learning Pass.

This module provides environment-based configuration using Pydantic BaseSettings,
so the same build can point at different policy files and output directories
in development, testing and production.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("LP_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are automatically loaded with the LP_ prefix.
    For example, LP_PARTNERS_DIR will override the partners_dir setting.
    """

    app_name: str = Field(default="LearningPass", description="Application name")
    log_level: str = Field(default="INFO", description="Logging level")
    log_to_file: bool = Field(default=False, description="Also write logs to a rotating file")
    log_file_dir: str = Field(default="logs", description="Directory for log files")

    # Policy configuration
    library_config: str = Field(
        default="./config/library.yml",
        description="Path to the library-wide customer policy",
    )
    partners_dir: str = Field(
        default="./config/partners",
        description="Directory holding one partner policy YAML per partner",
    )

    # Flat output
    flat_output_dir: Optional[str] = Field(
        default=None,
        description="Directory for generated flat files (None = log sink only)",
    )
    flat_overwrite: bool = Field(
        default=True,
        description="Overwrite an existing flat file instead of failing",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    model_config = SettingsConfigDict(
        env_prefix="LP_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded once and reused across
    the application lifecycle.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
