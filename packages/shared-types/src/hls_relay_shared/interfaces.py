"""
Cloud-agnostic interface for object storage.

Implementations (e.g. S3 or any S3-compatible vendor) live in separate packages
(e.g. aws-adapters). Pipeline logic depends on this interface and receives the
implementation by config.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


class ObjectStream:
    """An object body opened for reading (chunk iterator + metadata for the response)."""

    def __init__(
        self,
        chunks: Iterator[bytes],
        *,
        content_length: int | None = None,
        close=None,
    ) -> None:
        self.chunks = chunks
        self.content_length = content_length
        self._close = close

    def __iter__(self) -> Iterator[bytes]:
        try:
            yield from self.chunks
        finally:
            self.close()

    def close(self) -> None:
        if self._close is not None:
            self._close()
            self._close = None


@runtime_checkable
class ObjectStorage(Protocol):
    """Object storage: upload files/bytes, open objects for streaming, list keys."""

    def upload(
        self,
        bucket: str,
        key: str,
        body: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        """Upload bytes to the given bucket and key."""
        ...

    def upload_file(
        self,
        bucket: str,
        key: str,
        path: str,
        *,
        content_type: str | None = None,
        public_read: bool = False,
    ) -> None:
        """Upload a file from local path to bucket/key. May use multipart for large files."""
        ...

    def open_stream(self, bucket: str, key: str) -> ObjectStream:
        """Open the object for chunked reading. Raises ObjectNotFound if it does not exist."""
        ...

    def exists(self, bucket: str, key: str) -> bool:
        """Return True if the object exists, False otherwise."""
        ...

    def list_object_keys(self, bucket: str, prefix: str) -> list[str]:
        """Return all keys under prefix (any depth)."""
        ...
