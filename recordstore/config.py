"""
Configuration settings for the record store server and client.

Uses Pydantic Settings to load environment variables for the listening
endpoint, connection timeouts, the bulk-dump secret, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server
    host: str = Field("0.0.0.0", alias="RECORDSTORE_HOST")
    port: int = Field(8080, alias="RECORDSTORE_PORT", ge=0, le=65535)
    listen_backlog: int = Field(50, alias="RECORDSTORE_LISTEN_BACKLOG", gt=0)
    read_timeout_seconds: float = Field(10.0, alias="RECORDSTORE_READ_TIMEOUT", gt=0)

    # Bulk dump authorization; deployment-time value, not exposed as a CLI flag
    dump_secret: str = Field("s3cr3t", alias="RECORDSTORE_DUMP_SECRET", min_length=1)

    # Client
    connect_timeout_seconds: float = Field(5.0, alias="RECORDSTORE_CONNECT_TIMEOUT", gt=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
