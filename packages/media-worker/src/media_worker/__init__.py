"""HLS packaging pipeline: segmenter, walker, namespace allocator, uploader."""
