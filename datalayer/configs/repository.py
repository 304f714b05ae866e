"""
Repository configuration settings.

Pagination defaults and limits applied by BaseRepository.find_all().

Dependencies: pydantic, pydantic_settings
System role: Query shaping defaults for the repository layer
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from datalayer.configs.base import BaseSettings


class RepositorySettings(BaseSettings):
    """Pagination defaults for repository queries."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REPOSITORY_",
        case_sensitive=False,
        extra="ignore",
    )

    default_page: int = Field(default=1, ge=1, description="Page used when none is requested")
    default_per_page: int = Field(default=10, ge=1, description="Page size used when none is requested")
