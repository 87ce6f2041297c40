"""
FastAPI dependency utilities for injecting configuration.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from settings_sync.core.config import AppSettings, get_settings


@lru_cache()
def _settings_singleton() -> AppSettings:
    """Ensure configuration is created once per process."""
    return get_settings()


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return _settings_singleton()


AppSettingsDep = Annotated[AppSettings, Depends(get_app_settings)]

__all__ = ["AppSettingsDep", "get_app_settings"]
