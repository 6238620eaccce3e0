"""Configuration management for Learning Pass.

This module provides centralized configuration loaded from environment variables
with validation using Pydantic BaseSettings.

Usage:
    >>> from learning_pass.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.library_config)
"""

from learning_pass.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
