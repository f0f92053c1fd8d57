"""
Object storage settings from environment with defaults.
Uses pydantic-settings so all env vars are validated and documented in one model.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """
    All S3 environment variables (S3_ prefix, e.g. S3_BUCKET, S3_ENDPOINT).
    Frozen: built once at startup and passed to the components that need it.
    """

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=None,  # .env is loaded via bootstrap_env() so env is ready
        extra="ignore",
        frozen=True,
    )

    endpoint: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    region: str | None = None
    bucket: str = ""

    # Fixed root of every key: {collection_root}/{namespace}/{relative_path}
    collection_root: str = "videos"

    # Needed by most S3-compatible vendors (Vultr, MinIO)
    force_path_style: bool = True

    connect_timeout_sec: float = Field(10, gt=0)
    read_timeout_sec: float = Field(30, gt=0)
    max_attempts: int = Field(3, ge=1)


def get_storage_settings() -> StorageSettings:
    """Return validated storage settings from current environment."""
    return StorageSettings()
