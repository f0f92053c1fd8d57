"""Packaging triggers: segment the configured input, upload the latest segment set."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query
from hls_relay_shared import ConvertResponse, UploadResponse
from media_worker.pipeline import PackagingPipeline

from ..deps import get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/convert", response_model=ConvertResponse)
async def convert(pipeline: PackagingPipeline = Depends(get_pipeline)) -> ConvertResponse:
    """Segment the configured input into the working directory (blocks until ffmpeg exits)."""
    job = await asyncio.to_thread(pipeline.segment)
    return ConvertResponse(
        job_id=job.job_id,
        status=job.status,
        playlist=job.playlist or "",
        segment_count=job.segment_count or 0,
    )


@router.get("/upload-to-s3", response_model=UploadResponse)
async def upload_to_s3(
    namespace: str | None = Query(
        None, description="Retry under an existing namespace instead of allocating one"
    ),
    pipeline: PackagingPipeline = Depends(get_pipeline),
) -> UploadResponse:
    """Upload the most recent segment set; the namespace is returned once it is published."""
    job = await asyncio.to_thread(pipeline.upload, namespace)
    return UploadResponse(
        job_id=job.job_id,
        status=job.status,
        namespace=job.namespace,
        folder=pipeline.remote_folder(job.namespace),
        object_count=len(job.object_keys),
    )
