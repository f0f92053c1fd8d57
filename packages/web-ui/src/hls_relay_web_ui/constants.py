"""Shared constants for web-ui (paths, mount points)."""

from pathlib import Path

# Paths (package dir and templates under it)
PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"

# Already-converted segment set served straight from the working directory
LOCAL_VIDEO_MOUNT = "/video-local"

# Generic body for every gateway miss; storage details stay in the logs
NOT_FOUND_DETAIL = "File not found"
