"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the data layer
"""

from functools import lru_cache

from pydantic import Field

from datalayer.configs.base import BaseSettings
from datalayer.configs.database import DatabaseSettings
from datalayer.configs.repository import RepositorySettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    repository: RepositorySettings = Field(default_factory=RepositorySettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from datalayer.configs import get_settings
        settings = get_settings()
    """
    return Settings()
