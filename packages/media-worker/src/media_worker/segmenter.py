"""
FFmpeg-based HLS segmentation: playlist plus transport-stream segments.

Uses -f hls with -codec copy for keyframe-aligned splits without re-encoding.
Segments are named {playlist_stem}{n}.ts starting at start_number.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from hls_relay_shared import SegmentationFailed, SegmentationTimedOut, SegmentSet

logger = logging.getLogger(__name__)

DEFAULT_SEGMENT_DURATION_SEC = 10
DIAGNOSTIC_MAX_CHARS = 2000
SEGMENT_EXTENSION = ".ts"


def build_ffmpeg_command(
    input_path: Path,
    playlist_path: Path,
    *,
    segment_duration_sec: int = DEFAULT_SEGMENT_DURATION_SEC,
    start_number: int = 0,
    list_size: int = 0,
    ffmpeg_bin: str = "ffmpeg",
) -> list[str]:
    """Return the ffmpeg argv for one stream-copy HLS packaging run."""
    return [
        ffmpeg_bin,
        "-y",
        "-i",
        str(input_path),
        "-codec",
        "copy",
        "-start_number",
        str(start_number),
        "-hls_time",
        str(segment_duration_sec),
        # 0 keeps every segment in the playlist (no rotation)
        "-hls_list_size",
        str(list_size),
        "-f",
        "hls",
        str(playlist_path),
    ]


def clear_directory(output_dir: Path) -> None:
    """Remove everything inside output_dir, keeping the directory itself."""
    for child in output_dir.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def read_playlist_segments(playlist_path: Path) -> list[str]:
    """Return segment URIs from an HLS media playlist, in playlist order."""
    segments: list[str] = []
    for line in playlist_path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            segments.append(line)
    return segments


def find_unlisted_segments(output_dir: Path, segment_paths: list[Path]) -> list[str]:
    """Relative paths of .ts files under output_dir that the playlist does not list."""
    listed = {p.resolve() for p in segment_paths}
    return sorted(
        p.relative_to(output_dir).as_posix()
        for p in output_dir.rglob(f"*{SEGMENT_EXTENSION}")
        if p.is_file() and p.resolve() not in listed
    )


def segment_to_hls(
    input_path: str | Path,
    output_dir: str | Path,
    *,
    playlist_name: str | None = None,
    segment_duration_sec: int = DEFAULT_SEGMENT_DURATION_SEC,
    start_number: int = 0,
    list_size: int = 0,
    timeout_sec: float | None = None,
    clear_output_dir: bool = True,
    ffmpeg_bin: str = "ffmpeg",
) -> SegmentSet:
    """
    Package the input video as HLS in output_dir.

    Args:
        input_path: Path to the source video file.
        output_dir: Directory for the playlist and segments (created if absent).
        playlist_name: Playlist filename; defaults to {input stem}.m3u8.
        segment_duration_sec: Target duration per segment in seconds.
        start_number: Index of the first segment.
        list_size: Max playlist entries; 0 keeps all segments.
        timeout_sec: Kill ffmpeg after this many seconds; None waits forever.
        clear_output_dir: Remove stale files from a previous run first.
        ffmpeg_bin: ffmpeg executable name or path.

    Returns:
        SegmentSet with the playlist path and the segment paths it lists.

    Raises:
        SegmentationTimedOut: ffmpeg exceeded timeout_sec.
        SegmentationFailed: ffmpeg missing, exited non-zero, or wrote a playlist
            referencing files that are not on disk. The output directory is
            left empty in every failure case.
    """
    input_path = Path(input_path)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    if clear_output_dir:
        clear_directory(output_dir)
    playlist_path = output_dir / (playlist_name or f"{input_path.stem}.m3u8")
    cmd = build_ffmpeg_command(
        input_path,
        playlist_path,
        segment_duration_sec=segment_duration_sec,
        start_number=start_number,
        list_size=list_size,
        ffmpeg_bin=ffmpeg_bin,
    )
    logger.info("segmenter: start input=%s output_dir=%s", input_path, output_dir)
    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=timeout_sec)
    except subprocess.TimeoutExpired as e:
        clear_directory(output_dir)
        logger.warning("segmenter: timed out after %ss input=%s", timeout_sec, input_path)
        raise SegmentationTimedOut(
            f"ffmpeg did not finish within {timeout_sec}s",
            diagnostic=_diagnostic(e.stderr),
        ) from e
    except subprocess.CalledProcessError as e:
        clear_directory(output_dir)
        diagnostic = _diagnostic(e.stderr)
        logger.warning(
            "segmenter: ffmpeg exited %s input=%s: %s", e.returncode, input_path, diagnostic
        )
        raise SegmentationFailed(
            f"ffmpeg exited with status {e.returncode}: {diagnostic}",
            diagnostic=diagnostic,
        ) from e
    except FileNotFoundError as e:
        clear_directory(output_dir)
        raise SegmentationFailed(f"ffmpeg not found: {ffmpeg_bin}") from e

    if not playlist_path.exists():
        clear_directory(output_dir)
        raise SegmentationFailed(f"ffmpeg did not write a playlist: {playlist_path.name}")
    segment_paths = [output_dir / name for name in read_playlist_segments(playlist_path)]
    missing = [p.name for p in segment_paths if not p.exists()]
    if missing:
        clear_directory(output_dir)
        raise SegmentationFailed(f"playlist references missing segments: {missing}")
    unlisted = find_unlisted_segments(output_dir, segment_paths)
    if unlisted:
        # Only reachable with clear_output_dir=False; the walker uploads these too
        logger.warning(
            "segmenter: output_dir=%s holds %s segment files not in %s: %s",
            output_dir,
            len(unlisted),
            playlist_path.name,
            unlisted,
        )
    logger.info(
        "segmenter: complete playlist=%s segments=%s", playlist_path.name, len(segment_paths)
    )
    return SegmentSet(playlist_path=playlist_path, segment_paths=segment_paths)


def _diagnostic(stderr: bytes | str | None) -> str:
    """Last lines of ffmpeg stderr (the banner and stream dump come first)."""
    if not stderr:
        return ""
    text = stderr.decode(errors="replace") if isinstance(stderr, bytes) else stderr
    return text.strip()[-DIAGNOSTIC_MAX_CHARS:]
