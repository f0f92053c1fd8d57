"""API routers for web-ui (packaging triggers, stream gateway)."""

from .packaging import router as packaging_router
from .stream import router as stream_router

__all__ = ["packaging_router", "stream_router"]
