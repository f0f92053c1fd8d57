"""Recursive file listing for a segment set directory."""

from __future__ import annotations

import os
from pathlib import Path

from hls_relay_shared import FileSystemUnavailable, LocalFile


def walk_files(root: str | Path) -> list[LocalFile]:
    """
    Return every regular file under root, at any depth.

    Each entry carries the absolute path and the path relative to root with '/'
    separators. Directories are not returned and symlinked directories are not
    followed. Order is unspecified.

    Raises:
        FileSystemUnavailable: root is missing, not a directory, or unreadable.
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise FileSystemUnavailable(f"Directory not found: {root}")

    errors: list[OSError] = []
    files: list[LocalFile] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=errors.append):
        for name in filenames:
            path = Path(dirpath) / name
            if not path.is_file():
                continue
            files.append(
                LocalFile(path=path, relative_path=path.relative_to(root).as_posix())
            )
    if errors:
        raise FileSystemUnavailable(f"Cannot read {errors[0].filename}: {errors[0].strerror}")
    return files
