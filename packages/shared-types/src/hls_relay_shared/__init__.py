"""Shared types and conventions for the hls-relay packaging pipeline."""

from .errors import (
    FileSystemUnavailable,
    InvalidPathSegment,
    ObjectNotFound,
    PipelineError,
    SegmentationFailed,
    SegmentationTimedOut,
    UploadFailed,
)
from .interfaces import ObjectStorage, ObjectStream
from .keys import (
    PLAYLIST_CONTENT_TYPE,
    SEGMENT_CONTENT_TYPE,
    build_object_key,
    build_ready_marker_key,
    build_remote_prefix,
    content_type_for,
    validate_path_segment,
    validate_relative_path,
)
from .logging_config import configure_logging
from .models import (
    ConvertResponse,
    ErrorResponse,
    JobStatus,
    LocalFile,
    PackagingJob,
    SegmentSet,
    UploadResponse,
)

__version__ = "0.1.0"
__all__ = [
    "PLAYLIST_CONTENT_TYPE",
    "SEGMENT_CONTENT_TYPE",
    "ConvertResponse",
    "ErrorResponse",
    "FileSystemUnavailable",
    "InvalidPathSegment",
    "JobStatus",
    "LocalFile",
    "ObjectNotFound",
    "ObjectStorage",
    "ObjectStream",
    "PackagingJob",
    "PipelineError",
    "SegmentSet",
    "SegmentationFailed",
    "SegmentationTimedOut",
    "UploadFailed",
    "UploadResponse",
    "build_object_key",
    "build_ready_marker_key",
    "build_remote_prefix",
    "configure_logging",
    "content_type_for",
    "validate_path_segment",
    "validate_relative_path",
]
