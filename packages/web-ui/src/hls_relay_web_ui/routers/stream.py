"""Stream gateway: relay one published HLS object from object storage to the client."""

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from hls_relay_shared import (
    ObjectNotFound,
    ObjectStorage,
    ObjectStream,
    build_object_key,
    content_type_for,
    validate_path_segment,
    validate_relative_path,
)
from media_worker.pipeline import is_namespace_published

from ..config import WebUISettings
from ..constants import NOT_FOUND_DETAIL
from ..deps import get_bucket, get_collection_root, get_object_storage, get_web_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _open_published_object(
    storage: ObjectStorage,
    bucket: str,
    collection_root: str,
    namespace: str,
    filename: str,
    *,
    require_ready_marker: bool,
) -> ObjectStream:
    """Open {collection_root}/{namespace}/{filename}; any miss or storage error is ObjectNotFound."""
    key = build_object_key(collection_root, namespace, filename)
    try:
        if require_ready_marker and not is_namespace_published(
            storage, bucket, collection_root, namespace
        ):
            logger.info("stream: namespace=%s not published", namespace)
            raise ObjectNotFound(NOT_FOUND_DETAIL)
        return storage.open_stream(bucket, key)
    except ObjectNotFound:
        logger.info("stream: key=%s not found", key)
        raise ObjectNotFound(NOT_FOUND_DETAIL) from None
    except Exception as e:
        logger.warning("stream: key=%s fetch failed: %s", key, e)
        raise ObjectNotFound(NOT_FOUND_DETAIL) from e


@router.get("/stream/{namespace}/{filename:path}", response_class=StreamingResponse)
async def stream_object(
    namespace: str,
    filename: str,
    storage: ObjectStorage = Depends(get_object_storage),
    bucket: str = Depends(get_bucket),
    collection_root: str = Depends(get_collection_root),
    settings: WebUISettings = Depends(get_web_settings),
) -> StreamingResponse:
    """Proxy one playlist or segment; bytes are relayed as they arrive from storage."""
    validate_path_segment(namespace, field="namespace")
    validate_relative_path(filename, field="filename")
    stream = await asyncio.to_thread(
        _open_published_object,
        storage,
        bucket,
        collection_root,
        namespace,
        filename,
        require_ready_marker=settings.require_ready_marker,
    )
    headers = {}
    if stream.content_length is not None:
        headers["Content-Length"] = str(stream.content_length)
    return StreamingResponse(
        stream,
        media_type=content_type_for(filename),
        headers=headers,
    )
