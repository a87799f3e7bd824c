"""
Configuration settings for structgen.

Uses Pydantic Settings to load defaults for the catalog connection, the
output location and logging from ``STRUCTGEN_*`` environment variables or a
local ``.env`` file. CLI options take precedence over these values.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Catalog
    host: str = "localhost"
    port: int = Field(9042, ge=1, le=65535)
    username: str | None = None
    password: str | None = None
    keyspace: str | None = None
    consistency: str = "QUORUM"
    connect_timeout: float = Field(10.0, gt=0)

    # Output
    output_dir: Path = Path("./outputs")
    package: str = "main"
    file_name: str = "main.go"

    # Application
    parallel: int = Field(1, ge=1)
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="STRUCTGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
