"""FastAPI app: index page, local HLS files, packaging triggers, stream gateway."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from hls_relay_shared import ErrorResponse, PipelineError, configure_logging
from media_worker.config import get_settings as get_pipeline_settings

from .config import bootstrap_env, get_settings
from .constants import LOCAL_VIDEO_MOUNT, TEMPLATES_DIR
from .routers import packaging_router, stream_router

# Load .env (HLS_RELAY_ENV_FILE or ./.env) before any settings are read.
bootstrap_env()

# Ensure app loggers emit INFO; uvicorn --log-level only affects uvicorn.
configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="HLS Relay", version="0.1.0")

app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
app.state.web_settings = get_settings()

# Working directory of the segment set, served as-is for local playback
app.mount(
    LOCAL_VIDEO_MOUNT,
    StaticFiles(directory=get_pipeline_settings().output_dir, check_dir=False),
    name="video-local",
)

app.include_router(packaging_router)
app.include_router(stream_router)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    """Render every pipeline failure as {"error": code, "detail": message}."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s: %s", request.method, request.url.path, exc.code, exc.message)
    body = ErrorResponse(error=exc.code, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Player page with the configured stream URL."""
    templates: Jinja2Templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "index.html",
        {"video_stream_url": request.app.state.web_settings.video_stream_url},
    )


def run() -> None:
    """Serve the app with uvicorn on WebUISettings.host:port."""
    import uvicorn

    settings = app.state.web_settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
