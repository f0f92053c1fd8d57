"""Pydantic models for packaging jobs, segment sets, local files, and API DTOs."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """Lifecycle status of a packaging job."""

    CREATED = "created"
    SEGMENTING = "segmenting"
    SEGMENTED = "segmented"
    UPLOADING = "uploading"
    READY = "ready"
    FAILED = "failed"


class PackagingJob(BaseModel):
    """One run of the pipeline: segment a local input, then publish it under a namespace."""

    job_id: str = Field(..., description="Unique job identifier")
    input_path: str = Field(..., description="Source media file on local disk")
    output_dir: str = Field(..., description="Local working directory for the segment set")
    status: JobStatus = Field(JobStatus.CREATED, description="Current job status")
    namespace: str | None = Field(
        None, description="Remote namespace (set once when upload starts)"
    )
    segment_count: int | None = Field(
        None, ge=0, description="Number of media segments (set when segmentation completes)"
    )
    playlist: str | None = Field(
        None, description="Playlist filename inside output_dir (set when segmentation completes)"
    )
    object_keys: list[str] = Field(
        default_factory=list, description="Keys written to the object store"
    )
    created_at: int | None = Field(None, description="Unix timestamp when job was created")
    error: str | None = Field(None, description="Failure message when status=failed")


# --- Local segment set (segmenter output, walker output) ---

class SegmentSet(BaseModel):
    """Playlist plus the media segments it references, in playlist order."""

    playlist_path: Path
    segment_paths: list[Path] = Field(default_factory=list)

    @property
    def segment_count(self) -> int:
        return len(self.segment_paths)


class LocalFile(BaseModel):
    """A regular file found under a root directory."""

    path: Path = Field(..., description="Absolute path on local disk")
    relative_path: str = Field(
        ..., description="Path relative to the walked root, always '/'-separated"
    )


# --- API DTOs ---

class ConvertResponse(BaseModel):
    """Response for GET /convert."""

    job_id: str
    status: JobStatus
    playlist: str
    segment_count: int


class UploadResponse(BaseModel):
    """Response for GET /upload-to-s3."""

    job_id: str
    status: JobStatus
    namespace: str
    folder: str = Field(..., description="Remote folder, e.g. videos/{namespace}/")
    object_count: int


class ErrorResponse(BaseModel):
    """Structured failure body for every pipeline error."""

    error: str
    detail: str
