"""
Pipeline config from environment with defaults.
Uses pydantic-settings so all env vars are validated and documented in one model.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """
    All environment variables used by the packaging pipeline (HLS_ prefix).
    Frozen: built once at startup and passed into PackagingPipeline.
    """

    model_config = SettingsConfigDict(env_prefix="HLS_", extra="ignore", frozen=True)

    # Fixed input and local working directory for the segment set
    input_file: str = "video/timer.mp4"
    output_dir: str = "output"

    # Segmentation: ffmpeg -hls_time / -start_number / -hls_list_size
    segment_duration_sec: int = Field(10, ge=1)
    start_number: int = Field(0, ge=0)
    list_size: int = Field(0, ge=0)
    segmenter_timeout_sec: float | None = Field(600, gt=0)
    clear_output_dir: bool = True
    ffmpeg_bin: str = "ffmpeg"

    # Upload: worker pool size, independent of segment count
    max_concurrent_uploads: int = Field(8, ge=1, le=64)


def get_settings() -> PipelineSettings:
    """Return validated settings from current environment."""
    return PipelineSettings()
