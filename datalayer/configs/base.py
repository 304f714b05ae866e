"""
Shared settings base for the data layer.

Every config module inherits the .env loading rules from here; log_level
is read by observability.logger.configure_logging().

Dependencies: pydantic_settings
System role: Common parent of DatabaseSettings, RepositorySettings and Settings
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Settings parent: .env file support, case-insensitive names, unknown keys ignored."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level applied by configure_logging()",
    )
