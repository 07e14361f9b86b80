"""Configuration management for the search function.

Uses Pydantic Settings for environment-based configuration.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseSettings):
    """S3 location of the dataset and client options."""

    bucket: str = Field(default="kuso2018", description="Bucket holding the dataset")
    key: str = Field(default="av.csv", description="Object key of the CSV dataset")
    region: str = Field(default="ap-northeast-1", description="AWS region")
    endpoint_url: Optional[str] = Field(
        default=None, description="Override endpoint for S3-compatible stores"
    )
    access_key: Optional[str] = Field(
        default=None, description="Access key (defaults to the execution role)"
    )
    secret_key: Optional[str] = Field(default=None, description="Secret key")

    model_config = SettingsConfigDict(env_prefix="STORAGE_")


class Settings(BaseSettings):
    """Main function configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)

    service_name: str = Field(default="kuso-search", description="Service name")
    environment: str = Field(default="production", description="Deployment environment")
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=True, description="Render logs as JSON")
    timezone: str = Field(
        default="UTC", description="Time zone used for 'today' in age calculations"
    )

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance
    """
    return Settings()
