"""S3 implementation of the hls-relay object storage interface."""

from .config import StorageSettings, get_storage_settings
from .env_config import bucket_name, object_storage_from_env, object_storage_from_settings
from .s3_storage import S3ObjectStorage

__all__ = [
    "S3ObjectStorage",
    "StorageSettings",
    "bucket_name",
    "get_storage_settings",
    "object_storage_from_env",
    "object_storage_from_settings",
]
