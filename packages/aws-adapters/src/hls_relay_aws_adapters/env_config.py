"""
Build storage adapter instances from settings.

Settings are read from the environment once (StorageSettings) and the result is
passed in; nothing here reads os.environ directly.

Env vars (S3_ prefix):
- S3_BUCKET (required for uploads and streaming)
- S3_ENDPOINT (e.g. https://ewr1.vultrobjects.com or LocalStack)
- S3_ACCESS_KEY_ID, S3_SECRET_ACCESS_KEY (default: boto3 credential chain)
- S3_REGION
- S3_COLLECTION_ROOT (default: videos)
- S3_FORCE_PATH_STYLE (default: true)
- S3_CONNECT_TIMEOUT_SEC (default: 10), S3_READ_TIMEOUT_SEC (default: 30)
- S3_MAX_ATTEMPTS (default: 3)
"""

from .config import StorageSettings, get_storage_settings
from .s3_storage import S3ObjectStorage


def object_storage_from_settings(
    settings: StorageSettings,
    *,
    max_pool_connections: int = 10,
) -> S3ObjectStorage:
    """Build S3ObjectStorage; size the connection pool to the upload concurrency."""
    return S3ObjectStorage(
        region_name=settings.region,
        endpoint_url=settings.endpoint,
        aws_access_key_id=settings.access_key_id,
        aws_secret_access_key=settings.secret_access_key,
        force_path_style=settings.force_path_style,
        connect_timeout=settings.connect_timeout_sec,
        read_timeout=settings.read_timeout_sec,
        max_attempts=settings.max_attempts,
        max_pool_connections=max_pool_connections,
    )


def object_storage_from_env(*, max_pool_connections: int = 10) -> S3ObjectStorage:
    """Build S3ObjectStorage from S3_* environment variables."""
    return object_storage_from_settings(
        get_storage_settings(), max_pool_connections=max_pool_connections
    )


def bucket_name(settings: StorageSettings) -> str:
    """Return the bucket name; raise ValueError when S3_BUCKET is not configured."""
    if not settings.bucket:
        raise ValueError("S3_BUCKET is not set")
    return settings.bucket
