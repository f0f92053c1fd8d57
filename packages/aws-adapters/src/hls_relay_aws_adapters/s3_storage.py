"""S3 implementation of ObjectStorage (AWS or any S3-compatible endpoint)."""

import os

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError
from hls_relay_shared import ObjectNotFound, ObjectStream

# Minimum S3 multipart part size (except last) is 5 MB
MULTIPART_CHUNK_SIZE = 8 * 1024 * 1024  # 8 MB
MULTIPART_THRESHOLD = 100 * 1024 * 1024  # 100 MB: use multipart above this

STREAM_CHUNK_SIZE = 64 * 1024

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


class S3ObjectStorage:
    """ObjectStorage implementation using S3."""

    def __init__(
        self,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        force_path_style: bool = False,
        connect_timeout: float = 10,
        read_timeout: float = 30,
        max_attempts: int = 3,
        max_pool_connections: int = 10,
    ) -> None:
        config = Config(
            signature_version="s3v4",
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"max_attempts": max_attempts, "mode": "standard"},
            max_pool_connections=max_pool_connections,
            s3={"addressing_style": "path" if force_path_style else "auto"},
        )
        self._client = boto3.client(
            "s3",
            region_name=region_name,
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            config=config,
        )

    def upload(
        self,
        bucket: str,
        key: str,
        body: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        """Upload bytes to the given bucket and key."""
        extra = _put_args(content_type, public_read=False)
        self._client.put_object(Bucket=bucket, Key=key, Body=body, **extra)

    def upload_file(
        self,
        bucket: str,
        key: str,
        path: str,
        *,
        content_type: str | None = None,
        public_read: bool = False,
    ) -> None:
        """Upload a file from local path; uses multipart for files over 100 MB."""
        extra = _put_args(content_type, public_read=public_read)
        file_size = os.path.getsize(path)
        if file_size >= MULTIPART_THRESHOLD:
            self._upload_multipart(bucket, key, path, extra)
        else:
            with open(path, "rb") as f:
                self._client.put_object(Bucket=bucket, Key=key, Body=f, **extra)

    def _upload_multipart(self, bucket: str, key: str, path: str, extra: dict) -> None:
        """Upload using S3 multipart API for large files."""
        resp = self._client.create_multipart_upload(Bucket=bucket, Key=key, **extra)
        upload_id = resp["UploadId"]
        parts: list[dict] = []
        try:
            with open(path, "rb") as f:
                part_number = 1
                while True:
                    chunk = f.read(MULTIPART_CHUNK_SIZE)
                    if not chunk:
                        break
                    part_resp = self._client.upload_part(
                        Bucket=bucket,
                        Key=key,
                        UploadId=upload_id,
                        PartNumber=part_number,
                        Body=chunk,
                    )
                    parts.append({"ETag": part_resp["ETag"], "PartNumber": part_number})
                    part_number += 1
            self._client.complete_multipart_upload(
                Bucket=bucket,
                Key=key,
                UploadId=upload_id,
                MultipartUpload={"Parts": parts},
            )
        except Exception:
            self._client.abort_multipart_upload(
                Bucket=bucket, Key=key, UploadId=upload_id
            )
            raise

    def open_stream(self, bucket: str, key: str) -> ObjectStream:
        """
        Open the object for chunked reading without buffering it.

        Raises ObjectNotFound for a missing key; other storage errors propagate.
        """
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if e.response["Error"]["Code"] in _NOT_FOUND_CODES:
                raise ObjectNotFound(f"Object not found: {key}") from e
            raise
        body = resp["Body"]
        return ObjectStream(
            body.iter_chunks(chunk_size=STREAM_CHUNK_SIZE),
            content_length=resp.get("ContentLength"),
            close=body.close,
        )

    def download(self, bucket: str, key: str) -> bytes:
        """
        Read a whole object into memory. Used by tests and tooling to check
        uploaded bytes; the stream gateway uses open_stream instead.
        """
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if e.response["Error"]["Code"] in _NOT_FOUND_CODES:
                raise ObjectNotFound(f"Object not found: {key}") from e
            raise
        return resp["Body"].read()

    def exists(self, bucket: str, key: str) -> bool:
        """Return True if the object exists, False otherwise."""
        try:
            self._client.head_object(Bucket=bucket, Key=key)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] in _NOT_FOUND_CODES:
                return False
            raise

    def list_object_keys(self, bucket: str, prefix: str) -> list[str]:
        """Return all keys under prefix, following continuation tokens."""
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])
        return keys


def _put_args(content_type: str | None, *, public_read: bool) -> dict:
    extra: dict = {}
    if content_type:
        extra["ContentType"] = content_type
    if public_read:
        extra["ACL"] = "public-read"
    return extra

