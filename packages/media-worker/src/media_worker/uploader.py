"""
Parallel upload of a segment set to object storage.

Keys: {remote_prefix}/{relative_path}. Content type from the file extension,
public-read ACL. At most max_workers transfers run at once; the call returns only
after every transfer has settled.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from hls_relay_shared import LocalFile, ObjectStorage, UploadFailed, content_type_for

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_UPLOADS = 8


def upload_segment_set(
    storage: ObjectStorage,
    bucket: str,
    files: list[LocalFile],
    remote_prefix: str,
    *,
    max_workers: int = DEFAULT_MAX_CONCURRENT_UPLOADS,
    public_read: bool = True,
) -> list[str]:
    """
    Upload every file under remote_prefix, preserving relative subpaths.

    Returns:
        Keys written, in the order of files.

    Raises:
        UploadFailed: one or more uploads failed. Carries the first error seen
            and the keys that did succeed; those objects are not removed.
    """
    prefix = remote_prefix.rstrip("/")
    keyed = [(f, f"{prefix}/{f.relative_path}") for f in files]
    if not keyed:
        return []

    uploaded: set[str] = set()
    first_error: BaseException | None = None
    failed = 0
    with ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(keyed))),
        thread_name_prefix="upload",
    ) as pool:
        futures = {
            pool.submit(
                storage.upload_file,
                bucket,
                key,
                str(f.path),
                content_type=content_type_for(f.relative_path),
                public_read=public_read,
            ): key
            for f, key in keyed
        }
        for future in as_completed(futures):
            key = futures[future]
            try:
                future.result()
            except Exception as e:
                failed += 1
                logger.warning("uploader: key=%s failed: %s", key, e)
                if first_error is None:
                    first_error = e
            else:
                uploaded.add(key)

    if first_error is not None:
        logger.error(
            "uploader: prefix=%s %s/%s uploads failed; %s objects left in place",
            prefix,
            failed,
            len(keyed),
            len(uploaded),
        )
        raise UploadFailed(
            f"{failed} of {len(keyed)} uploads failed: {first_error}",
            first_error=first_error,
            uploaded_keys=[key for _, key in keyed if key in uploaded],
            failed_count=failed,
        )
    logger.info("uploader: prefix=%s uploaded %s objects", prefix, len(keyed))
    return [key for _, key in keyed]
