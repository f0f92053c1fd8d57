"""
Remote key format, path-segment validation, and content-type rule.

Single source of truth: the uploader builds keys and the stream gateway resolves
them using only these functions.

Object key format:  {collection_root}/{namespace}/{relative_path}
Ready marker key:   {collection_root}/{namespace}/.ready

Validation behaviour: untrusted input raises InvalidPathSegment. Keys built from
walker output are trusted and only normalised to '/' separators.
"""

import re

from .errors import InvalidPathSegment

PLAYLIST_EXTENSION = ".m3u8"
PLAYLIST_CONTENT_TYPE = "application/vnd.apple.mpegurl"
SEGMENT_CONTENT_TYPE = "video/MP2T"

READY_MARKER_NAME = ".ready"

# One path segment: no separators, no leading dot (rules out '.', '..', hidden files)
_PATH_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9._-]*$")
_PATH_SEGMENT_MAX_LENGTH = 255


def content_type_for(name: str) -> str:
    """Playlist MIME type for *.m3u8, transport-stream MIME type for anything else."""
    if name.endswith(PLAYLIST_EXTENSION):
        return PLAYLIST_CONTENT_TYPE
    return SEGMENT_CONTENT_TYPE


def build_remote_prefix(collection_root: str, namespace: str) -> str:
    """
    Build the key prefix for one job's objects.

    Format: {collection_root}/{namespace} (no trailing slash)
    """
    return f"{collection_root.strip('/')}/{namespace}"


def build_object_key(collection_root: str, namespace: str, relative_path: str) -> str:
    """
    Build the canonical object key for a file of a segment set.

    Format: {collection_root}/{namespace}/{relative_path}
    Backslashes in relative_path are normalised to '/'.
    """
    rel = relative_path.replace("\\", "/").lstrip("/")
    return f"{build_remote_prefix(collection_root, namespace)}/{rel}"


def build_ready_marker_key(collection_root: str, namespace: str) -> str:
    """Key of the marker object written once every upload of a job has confirmed."""
    return build_object_key(collection_root, namespace, READY_MARKER_NAME)


def validate_path_segment(segment: str, *, field: str = "path") -> str:
    """
    Return segment unchanged if it is a single safe path component.

    Raises:
        InvalidPathSegment: empty, too long, contains a separator, starts with
            a dot, or uses characters outside [A-Za-z0-9._-].
    """
    if (
        not segment
        or len(segment) > _PATH_SEGMENT_MAX_LENGTH
        or not _PATH_SEGMENT_RE.match(segment)
    ):
        raise InvalidPathSegment(f"Invalid {field}: {segment!r}")
    return segment


def validate_relative_path(path: str, *, field: str = "filename") -> str:
    """
    Validate a '/'-separated relative path segment by segment.

    Used for untrusted filenames from the request path; a path such as
    '../secret' or 'a//b' is rejected before any storage call.
    """
    if not path or path.startswith("/") or "\\" in path:
        raise InvalidPathSegment(f"Invalid {field}: {path!r}")
    for segment in path.split("/"):
        validate_path_segment(segment, field=field)
    return path
