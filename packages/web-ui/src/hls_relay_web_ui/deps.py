"""Dependencies and app state for FastAPI routes."""

from fastapi import Request
from fastapi.templating import Jinja2Templates
from hls_relay_shared import ObjectStorage
from media_worker.pipeline import PackagingPipeline

from .config import WebUISettings


def get_templates(request: Request) -> Jinja2Templates:
    """Return Jinja2Templates from app state (set in main before including routers)."""
    return request.app.state.templates


def get_web_settings(request: Request) -> WebUISettings:
    """Return WebUISettings from app state (set once in main)."""
    return request.app.state.web_settings


def get_pipeline(request: Request) -> PackagingPipeline:
    """Return PackagingPipeline from app state, building it from env on first use.

    The instance is kept on app.state: it holds the most recent job.
    """
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is not None:
        return pipeline
    from media_worker.main import build_pipeline

    pipeline = build_pipeline()
    request.app.state.pipeline = pipeline
    return pipeline


def get_object_storage(request: Request) -> ObjectStorage:
    """Return ObjectStorage from app state or the pipeline's storage."""
    storage = getattr(request.app.state, "object_storage", None)
    if storage is not None:
        return storage
    return get_pipeline(request).storage


def get_bucket(request: Request) -> str:
    """Return bucket name from app state or the pipeline."""
    name = getattr(request.app.state, "bucket_name", None)
    if name is not None:
        return name
    return get_pipeline(request).bucket


def get_collection_root(request: Request) -> str:
    """Return the fixed key root (e.g. videos) from app state or the pipeline."""
    root = getattr(request.app.state, "collection_root", None)
    if root is not None:
        return root
    return get_pipeline(request).collection_root
