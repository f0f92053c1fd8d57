"""FastAPI app serving the HLS relay: index page, packaging triggers, stream gateway."""
