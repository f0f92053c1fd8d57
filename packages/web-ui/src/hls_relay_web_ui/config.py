"""Web UI settings (player URL, gateway readiness check, bind address) and .env loading."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class WebUISettings(BaseSettings):
    """Web UI env vars, unprefixed (VIDEO_STREAM_URL, REQUIRE_READY_MARKER, HOST, PORT)."""

    model_config = SettingsConfigDict(
        env_file=None,  # bootstrap_env() has already populated os.environ
        extra="ignore",
        frozen=True,
    )

    # Player source substituted into the index page
    video_stream_url: str = "/video-local/timer.m3u8"

    # Stream gateway serves a namespace only after its .ready marker exists
    require_ready_marker: bool = True

    host: str = "0.0.0.0"
    port: int = 3000


def get_settings() -> WebUISettings:
    """Return validated settings from current environment."""
    return WebUISettings()


def bootstrap_env() -> None:
    """Load HLS_RELAY_ENV_FILE, or ./.env when unset, into os.environ (existing vars win)."""
    import os

    import dotenv

    path = os.environ.get("HLS_RELAY_ENV_FILE")
    if path:
        dotenv.load_dotenv(Path(path).resolve())
    else:
        dotenv.load_dotenv(Path.cwd() / ".env")
