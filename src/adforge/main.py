"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from adforge.api.routes import router
from adforge.config import get_music_dir, settings
from adforge.errors import (
    AdForgeError,
    AnalysisError,
    ConfigurationError,
    DraftError,
    MediaToolError,
    PipelineError,
    RunCancelledError,
    SynthesisError,
    UploadError,
)

logger = structlog.get_logger()

_OUTPUT_DIR = Path(settings.output_base_dir)


# ---------------------------------------------------------------------------
# CORS configuration
# ---------------------------------------------------------------------------

_DEFAULT_ORIGINS = {
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
}


def _get_allowed_origins() -> set[str]:
    origins = set(_DEFAULT_ORIGINS)
    if settings.allowed_origins:
        origins.update(o.strip() for o in settings.allowed_origins.split(",") if o.strip())
    return origins


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

_STATUS_BY_ERROR: dict[type[AdForgeError], int] = {
    UploadError: 400,
    ConfigurationError: 503,
    AnalysisError: 502,
    DraftError: 502,
    SynthesisError: 502,
    MediaToolError: 500,
    RunCancelledError: 499,
}


def status_for(exc: AdForgeError) -> int:
    """HTTP status for *exc*; pipeline failures take the status of their cause."""
    if isinstance(exc, PipelineError) and exc.cause is not None:
        exc = exc.cause
    for error_type, status in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status
    return 500


async def adforge_error_handler(request: Request, exc: AdForgeError) -> JSONResponse:
    status = status_for(exc)
    log = logger.error if status >= 500 else logger.warning
    log(
        "request.failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        stage=exc.stage,
        error=exc.message,
        status=status,
    )
    return JSONResponse(status_code=status, content=exc.to_dict())


# ---------------------------------------------------------------------------
# App lifecycle
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration problems at startup; nothing to tear down."""
    logger.info(
        "app.startup",
        allowed_origins=sorted(_get_allowed_origins()),
        openai_key_configured=bool(settings.openai_api_key),
        tts_provider=settings.tts_provider,
        music_dir=str(get_music_dir()),
    )
    if not settings.openai_api_key:
        logger.warning("app.openai_key_missing", hint="set OPENAI_API_KEY in .env")
    yield
    logger.info("app.shutdown")


app = FastAPI(
    title="AdForge",
    description="Image-to-video ad generator: vision analysis, script drafting, voiceover, FFmpeg assembly",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_get_allowed_origins()),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AdForgeError, adforge_error_handler)
app.include_router(router)

# Static file serving for generated ads and voiceovers
_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/output", StaticFiles(directory=str(_OUTPUT_DIR)), name="output")
