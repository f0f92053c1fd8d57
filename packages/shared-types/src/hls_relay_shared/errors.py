"""
Error taxonomy for the packaging pipeline.

Every error carries a stable ``code`` (used as the ``error`` field of the JSON
failure body) and the HTTP ``status_code`` the web layer answers with. None of
these are retried by the pipeline itself.
"""


class PipelineError(Exception):
    """Base class for packaging and streaming failures."""

    code = "pipeline_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SegmentationFailed(PipelineError):
    """The transcoder exited with an error; no segment set is available."""

    code = "segmentation_failed"
    status_code = 500

    def __init__(self, message: str, *, diagnostic: str | None = None) -> None:
        super().__init__(message)
        self.diagnostic = diagnostic


class SegmentationTimedOut(SegmentationFailed):
    """The transcoder did not finish within the configured timeout and was killed."""

    code = "segmentation_timed_out"
    status_code = 504


class FileSystemUnavailable(PipelineError):
    """Working directory missing or unreadable."""

    code = "filesystem_unavailable"
    status_code = 500


class UploadFailed(PipelineError):
    """
    At least one object-store write failed.

    Objects written before the failure are not rolled back; their keys are kept
    in ``uploaded_keys`` so callers can log or retry under the same namespace.
    """

    code = "upload_failed"
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        first_error: BaseException | None = None,
        uploaded_keys: list[str] | None = None,
        failed_count: int = 0,
    ) -> None:
        super().__init__(message)
        self.first_error = first_error
        self.uploaded_keys = list(uploaded_keys or [])
        self.failed_count = failed_count


class ObjectNotFound(PipelineError):
    """Requested object does not exist (or could not be fetched)."""

    code = "object_not_found"
    status_code = 404


class InvalidPathSegment(PipelineError):
    """Untrusted path segment rejected before any storage call."""

    code = "invalid_path_segment"
    status_code = 400
