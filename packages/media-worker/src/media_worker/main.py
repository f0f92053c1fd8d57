"""
Entrypoint for one packaging run from the command line. Builds settings and the
S3 adapter from env, segments the input, uploads it, and prints the namespace.

Usage:
  hls-package [--input video/timer.mp4] [--output-dir output] [--namespace NS] [--upload-only]
"""

from __future__ import annotations

import argparse
import logging
import sys

from hls_relay_aws_adapters import bucket_name, get_storage_settings, object_storage_from_settings
from hls_relay_shared import PipelineError, configure_logging

from .config import get_settings
from .pipeline import PackagingPipeline

logger = logging.getLogger(__name__)


def build_pipeline(overrides: dict | None = None) -> PackagingPipeline:
    """Build PackagingPipeline from env; overrides replace individual PipelineSettings fields."""
    settings = get_settings()
    if overrides:
        settings = settings.model_copy(update=overrides)
    storage_settings = get_storage_settings()
    bucket = bucket_name(storage_settings)
    storage = object_storage_from_settings(
        storage_settings, max_pool_connections=settings.max_concurrent_uploads
    )
    return PackagingPipeline(
        settings,
        storage,
        bucket,
        collection_root=storage_settings.collection_root,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Package a video as HLS and publish it to object storage."
    )
    parser.add_argument("--input", dest="input_file", help="Source video (default: HLS_INPUT_FILE)")
    parser.add_argument("--output-dir", help="Local working directory (default: HLS_OUTPUT_DIR)")
    parser.add_argument("--namespace", help="Retry an upload under an existing namespace")
    parser.add_argument(
        "--upload-only",
        action="store_true",
        help="Skip segmentation and upload the working directory as-is",
    )
    args = parser.parse_args(argv)
    configure_logging()

    overrides = {
        k: v
        for k, v in (("input_file", args.input_file), ("output_dir", args.output_dir))
        if v is not None
    }
    try:
        pipeline = build_pipeline(overrides)
        if args.upload_only:
            job = pipeline.upload(args.namespace)
        else:
            job = pipeline.run(args.namespace)
    except PipelineError as e:
        logger.error("hls-package: %s: %s", e.code, e.message)
        return 1
    except ValueError as e:
        logger.error("hls-package: %s", e)
        return 2
    print(pipeline.remote_folder(job.namespace))
    return 0


if __name__ == "__main__":
    sys.exit(main())
