"""
Packaging pipeline: segment the configured input, then publish the segment set.

State per job: created -> segmenting -> segmented -> uploading -> ready, or failed.
A namespace becomes resolvable only once its ready marker is written, which
happens after every upload of the job confirmed.
"""

from __future__ import annotations

import json
import logging
import threading
import time
import uuid

from hls_relay_shared import (
    FileSystemUnavailable,
    InvalidPathSegment,
    JobStatus,
    ObjectStorage,
    PackagingJob,
    PipelineError,
    UploadFailed,
    build_ready_marker_key,
    build_remote_prefix,
)
from hls_relay_shared.keys import PLAYLIST_EXTENSION

from .config import PipelineSettings
from .namespace import allocate_namespace, is_valid_namespace
from .segmenter import segment_to_hls
from .uploader import upload_segment_set
from .walker import walk_files

logger = logging.getLogger(__name__)


class PackagingPipeline:
    """
    Runs segmentation and upload against one local working directory.

    A lock serialises segment() and upload(): the working directory is never
    rewritten while an upload is reading it.
    """

    def __init__(
        self,
        settings: PipelineSettings,
        storage: ObjectStorage,
        bucket: str,
        *,
        collection_root: str = "videos",
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.bucket = bucket
        self.collection_root = collection_root
        self._lock = threading.Lock()
        self._latest: PackagingJob | None = None

    @property
    def latest(self) -> PackagingJob | None:
        """Most recent job (any status), or None before the first run."""
        return self._latest

    def remote_folder(self, namespace: str) -> str:
        return f"{build_remote_prefix(self.collection_root, namespace)}/"

    def segment(self) -> PackagingJob:
        """
        Segment the configured input into the working directory.

        Raises SegmentationFailed (or SegmentationTimedOut); the job is recorded
        as failed and the working directory is left empty.
        """
        s = self.settings
        job = PackagingJob(
            job_id=str(uuid.uuid4()),
            input_path=s.input_file,
            output_dir=s.output_dir,
            status=JobStatus.SEGMENTING,
            created_at=int(time.time()),
        )
        with self._lock:
            self._latest = job
            logger.info("pipeline: job_id=%s segmenting input=%s", job.job_id, s.input_file)
            try:
                segment_set = segment_to_hls(
                    s.input_file,
                    s.output_dir,
                    segment_duration_sec=s.segment_duration_sec,
                    start_number=s.start_number,
                    list_size=s.list_size,
                    timeout_sec=s.segmenter_timeout_sec,
                    clear_output_dir=s.clear_output_dir,
                    ffmpeg_bin=s.ffmpeg_bin,
                )
            except PipelineError as e:
                self._latest = _failed(job, e)
                raise
            job = job.model_copy(
                update={
                    "status": JobStatus.SEGMENTED,
                    "segment_count": segment_set.segment_count,
                    "playlist": segment_set.playlist_path.name,
                }
            )
            self._latest = job
        logger.info(
            "pipeline: job_id=%s segmented segments=%s", job.job_id, job.segment_count
        )
        return job

    def upload(self, namespace: str | None = None) -> PackagingJob:
        """
        Upload the working directory's segment set under a namespace.

        Args:
            namespace: Reuse an existing namespace (idempotent retry of a failed
                upload). A fresh one is allocated when None.

        Raises:
            InvalidPathSegment: namespace is not a valid single path segment.
            FileSystemUnavailable: working directory missing, unreadable or empty.
            UploadFailed: at least one object write failed (no rollback).
        """
        if namespace is not None and not is_valid_namespace(namespace):
            raise InvalidPathSegment(f"Invalid namespace: {namespace!r}")
        with self._lock:
            job = self._job_for_upload(namespace)
            self._latest = job
            logger.info(
                "pipeline: job_id=%s uploading namespace=%s", job.job_id, job.namespace
            )
            try:
                job = self._publish(job)
            except PipelineError as e:
                self._latest = _failed(job, e)
                raise
            self._latest = job
        logger.info(
            "pipeline: job_id=%s ready namespace=%s objects=%s",
            job.job_id,
            job.namespace,
            len(job.object_keys),
        )
        return job

    def run(self, namespace: str | None = None) -> PackagingJob:
        """Segment then upload: one complete job."""
        self.segment()
        return self.upload(namespace)

    def is_published(self, namespace: str) -> bool:
        """True once the ready marker for namespace exists."""
        return is_namespace_published(
            self.storage, self.bucket, self.collection_root, namespace
        )

    def _job_for_upload(self, namespace: str | None) -> PackagingJob:
        """Latest segmented job, or a new job for whatever the working directory holds.

        A job's namespace never changes once set; uploading again under a different
        namespace starts a new job record for the same segment set.
        """
        ns = namespace or allocate_namespace()
        latest = self._latest
        if (
            latest is not None
            and latest.status == JobStatus.SEGMENTED
            and latest.namespace is None
        ):
            base = latest
        elif latest is not None and latest.namespace == ns:
            base = latest
        else:
            base = PackagingJob(
                job_id=str(uuid.uuid4()),
                input_path=self.settings.input_file,
                output_dir=self.settings.output_dir,
                created_at=int(time.time()),
                segment_count=latest.segment_count if latest is not None else None,
                playlist=latest.playlist if latest is not None else None,
            )
        return base.model_copy(
            update={"namespace": ns, "status": JobStatus.UPLOADING, "error": None}
        )

    def _publish(self, job: PackagingJob) -> PackagingJob:
        files = walk_files(job.output_dir)
        if not files:
            raise FileSystemUnavailable(f"No segment set in {job.output_dir}")
        prefix = build_remote_prefix(self.collection_root, job.namespace)
        keys = upload_segment_set(
            self.storage,
            self.bucket,
            files,
            prefix,
            max_workers=self.settings.max_concurrent_uploads,
        )
        # Marker bytes are a function of namespace and keys only
        marker = {"namespace": job.namespace, "objects": sorted(keys)}
        try:
            self.storage.upload(
                self.bucket,
                build_ready_marker_key(self.collection_root, job.namespace),
                json.dumps(marker, sort_keys=True).encode(),
                content_type="application/json",
            )
        except Exception as e:
            raise UploadFailed(
                f"ready marker write failed: {e}", first_error=e, uploaded_keys=keys
            ) from e
        logger.info(
            "pipeline: job_id=%s marker written namespace=%s published_at=%s",
            job.job_id,
            job.namespace,
            int(time.time()),
        )
        segment_count = sum(
            1 for f in files if not f.relative_path.endswith(PLAYLIST_EXTENSION)
        )
        return job.model_copy(
            update={
                "status": JobStatus.READY,
                "object_keys": keys,
                "segment_count": segment_count,
            }
        )


def _failed(job: PackagingJob, error: PipelineError) -> PackagingJob:
    return job.model_copy(update={"status": JobStatus.FAILED, "error": error.message})


def is_namespace_published(
    storage: ObjectStorage, bucket: str, collection_root: str, namespace: str
) -> bool:
    """True once every upload of a job under namespace confirmed (ready marker exists)."""
    return storage.exists(bucket, build_ready_marker_key(collection_root, namespace))
